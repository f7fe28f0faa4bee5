"""Módulo core do cliente: configuração e merge de opções."""

from .config import (
    ClientConfig,
    build_url,
    get_base_url,
    merge_options,
    with_defaults,
)

__all__ = [
    "ClientConfig",
    "build_url",
    "get_base_url",
    "merge_options",
    "with_defaults",
]
