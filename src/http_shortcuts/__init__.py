"""Atalhos HTTP sobre httpx com configuração padrão e erros normalizados."""

from .core import ClientConfig, with_defaults
from .http import (
    FormData,
    HttpClient,
    HttpClientFactory,
    HttpError,
    all_requests,
    create_http_client,
    dispose_http_client,
    is_form_data,
    map_response_to_data,
    map_response_to_error,
    normalize_request,
    spread,
    to_form_data,
    wrap_request,
)
from .http.factory import (
    delete,
    fetch_file,
    get,
    head,
    options,
    patch,
    post,
    put,
    request,
    send_file,
)
from .models import ClientResponse

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "ClientResponse",
    "FormData",
    "HttpClient",
    "HttpClientFactory",
    "HttpError",
    "all_requests",
    "create_http_client",
    "delete",
    "dispose_http_client",
    "fetch_file",
    "get",
    "head",
    "is_form_data",
    "map_response_to_data",
    "map_response_to_error",
    "normalize_request",
    "options",
    "patch",
    "post",
    "put",
    "request",
    "send_file",
    "spread",
    "to_form_data",
    "with_defaults",
    "wrap_request",
]
