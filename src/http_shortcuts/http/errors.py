"""Normalização de respostas e erros HTTP."""

from collections.abc import Awaitable, Mapping
from typing import Any

import httpx

from ..models import ClientResponse
from ..utils import get_logger

logger = get_logger(__name__)

BAD_REQUEST = 400
SERVICE_UNAVAILABLE = 503


class HttpError(Exception):
    """
    Erro normalizado, com o mesmo formato independente da origem da falha.

    Chaves de um corpo de resposta em dicionário (``data``) também ficam
    acessíveis como atributos do erro.
    """

    def __init__(
        self,
        message: str | None = None,
        status: int | None = None,
        code: int | str | None = None,
        description: str | None = None,
        errors: Any = None,
        data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.description = description
        self.errors = errors if errors is not None else {}
        self.data = data if data is not None else {}

    def __getattr__(self, name: str) -> Any:
        data = self.__dict__.get("data")
        if isinstance(data, Mapping) and name in data:
            return data[name]
        raise AttributeError(name)

    def to_dict(self) -> dict[str, Any]:
        body = dict(self.data) if isinstance(self.data, Mapping) else {}
        return {
            **body,
            "status": self.status,
            "code": self.code,
            "message": self.message,
            "description": self.description,
            "errors": self.errors,
        }

    def __repr__(self) -> str:
        return f"<HttpError status={self.status} message='{self.message}'>"


def _get(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    try:
        return getattr(obj, key, None)
    except RuntimeError:
        # httpx.RequestError.request levanta RuntimeError quando não há request
        return None


def _decode_error_body(response: httpx.Response) -> Any:
    try:
        if not response.content:
            return None
        return response.json()
    except httpx.ResponseNotRead:
        return None
    except ValueError:
        return response.text


def _response_fields(response: Any) -> dict[str, Any]:
    if isinstance(response, httpx.Response):
        return {
            "status": response.status_code,
            "code": None,
            "data": _decode_error_body(response),
            "status_text": response.reason_phrase,
            "errors": None,
        }
    if isinstance(response, ClientResponse):
        return {
            "status": response.status,
            "code": None,
            "data": response.data,
            "status_text": response.status_text,
            "errors": None,
        }
    return {
        "status": _get(response, "status"),
        "code": _get(response, "code"),
        "data": _get(response, "data"),
        "status_text": _get(response, "status_text") or _get(response, "statusText"),
        "errors": _get(response, "errors"),
    }


def map_response_to_data(raw: Any) -> Any:
    """Extrai os dados de uma resposta."""
    if isinstance(raw, Mapping):
        return raw.get("data")
    return getattr(raw, "data", None)


def map_response_to_error(raw: Any) -> HttpError:
    """
    Converte uma falha de requisição em HttpError.

    Três casos, conforme os sinais presentes em ``raw``:

    - ``response`` presente: erro do servidor, status/código espelham a
      resposta e a mensagem vem do corpo ou do reason phrase;
    - apenas ``request``: servidor não respondeu (503, Service Unavailable);
    - nenhum dos dois: erro ao montar a requisição (400, Bad Request).

    Valores já presentes em ``raw`` (message, description, code, status)
    prevalecem sobre os padrões.

    Args:
        raw: Exceção do httpx (ou qualquer exceção) ou dicionário com as
            chaves ``request``, ``response``, ``message`` etc.

    Returns:
        HttpError normalizado
    """
    code = _get(raw, "code")
    status = _get(raw, "status")
    message = _get(raw, "message")
    description = _get(raw, "description")
    errors = _get(raw, "errors")
    data = _get(raw, "data")
    request = _get(raw, "request")
    response = _get(raw, "response")

    if isinstance(raw, BaseException) and not message:
        message = str(raw) or None

    if response is not None:
        fields = _response_fields(response)
        code = fields["code"] or code or fields["status"]
        status = fields["status"] or fields["code"] or status
        data = fields["data"] or data or {}
        body_message = data.get("message") if isinstance(data, Mapping) else None
        message = body_message or fields["status_text"] or message
        description = description or message
        errors = fields["errors"] or errors or {}

    elif request is not None:
        code = code or SERVICE_UNAVAILABLE
        status = status or SERVICE_UNAVAILABLE
        description = description or "Service Unavailable"
        message = message or description

    else:
        code = code or BAD_REQUEST
        status = status or BAD_REQUEST
        description = description or "Bad Request"
        message = message or description

    return HttpError(
        message=message,
        status=status,
        code=code,
        description=description,
        errors=errors,
        data=data,
    )


async def wrap_request(
    request: Awaitable[ClientResponse], skip_data: bool = False
) -> Any:
    """
    Aguarda a requisição e normaliza o resultado.

    Args:
        request: Requisição em andamento (corotina/awaitable)
        skip_data: Retorna a resposta completa em vez de apenas os dados

    Returns:
        Dados da resposta, ou a própria resposta se ``skip_data``

    Raises:
        HttpError: Em qualquer falha da requisição
    """
    try:
        response = await request
    except HttpError:
        raise
    except Exception as e:
        error = map_response_to_error(e)
        logger.debug(f"Requisição falhou ({type(e).__name__}): {error!r}")
        raise error from e

    return response if skip_data else map_response_to_data(response)
