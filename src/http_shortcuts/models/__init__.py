"""Modelos de dados do cliente."""

from .response import ClientResponse

__all__ = ["ClientResponse"]
