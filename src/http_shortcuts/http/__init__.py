"""Módulo HTTP: cliente, atalhos, multipart e normalização de erros."""

from .agents import create_agents, create_ssl_context
from .client import HttpClient, ensure_payload, is_empty_payload
from .concurrent import all_requests, spread
from .errors import HttpError, map_response_to_data, map_response_to_error, wrap_request
from .factory import (
    HttpClientFactory,
    create_http_client,
    default_factory,
    dispose_http_client,
)
from .multipart import FormData, is_form_data, normalize_request, to_form_data

__all__ = [
    "FormData",
    "HttpClient",
    "HttpClientFactory",
    "HttpError",
    "all_requests",
    "create_agents",
    "create_http_client",
    "create_ssl_context",
    "default_factory",
    "dispose_http_client",
    "ensure_payload",
    "is_empty_payload",
    "is_form_data",
    "map_response_to_data",
    "map_response_to_error",
    "normalize_request",
    "spread",
    "to_form_data",
    "wrap_request",
]
