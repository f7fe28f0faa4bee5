"""Cliente HTTP com atalhos por verbo e respostas normalizadas."""

import logging
from collections.abc import Mapping, Sequence, Set
from typing import Any

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..core.config import ClientConfig, build_url, merge_options, with_defaults
from ..models import ClientResponse
from ..utils import get_logger
from .agents import create_agents
from .errors import map_response_to_error, wrap_request
from .multipart import FormData, is_form_data, normalize_request

logger = get_logger(__name__)


def is_empty_payload(data: Any) -> bool:
    """Determina se o payload de uma requisição está vazio."""
    if data is None:
        return True
    if isinstance(data, (Mapping, Sequence, Set, bytearray, FormData)):
        return len(data) == 0
    return False


def ensure_payload(data: Any) -> None:
    """Levanta HttpError antes de qualquer I/O se não houver payload."""
    if is_empty_payload(data):
        raise map_response_to_error({"message": "Missing Payload"})


class HttpClient:
    """
    Cliente HTTP sobre ``httpx.AsyncClient``.

    As opções do cliente (headers, base_url, timeout...) são combinadas com
    as de cada requisição, que prevalecem. A URL base não fica presa ao
    transporte: cada requisição a resolve a partir das próprias opções,
    permitindo usar o mesmo cliente com vários endpoints.
    """

    def __init__(
        self,
        options: dict[str, Any] | None = None,
        config: ClientConfig | None = None,
    ):
        """
        Args:
            options: Opções padrão de todas as requisições deste cliente
            config: Configuração de timeouts e retries (usa padrão se None)
        """
        self.config = config or ClientConfig()
        self.options = with_defaults(options)
        self.timeout = self.options.get("timeout", self.config.timeout)

        # Headers não vão para o AsyncClient: o httpx manteria o Content-Type
        # padrão mesmo em corpos multipart
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=create_agents(self.options),
        )

    def __repr__(self) -> str:
        return f"<HttpClient base_url='{self.options.get('base_url')}'>"

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def headers(self) -> dict[str, str]:
        return self.options["headers"]

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Envio
    # ------------------------------------------------------------------

    def _should_retry_status_error(self, status_code: int) -> bool:
        """Determina se um erro de status HTTP deve ser retentado."""
        # Retenta em 5xx (erros do servidor)
        if 500 <= status_code < 600:
            return True
        # Request Timeout, Too Many Requests
        return status_code in (408, 429)

    def _should_retry(self, exc: BaseException) -> bool:
        if isinstance(exc, httpx.HTTPStatusError):
            return self._should_retry_status_error(exc.response.status_code)
        return isinstance(exc, httpx.TransportError)

    @staticmethod
    def _encode_body(data: Any) -> dict[str, Any]:
        if is_form_data(data):
            return {"files": data.entries} if data else {}
        if is_empty_payload(data):
            return {}
        if isinstance(data, (str, bytes, bytearray)):
            return {"content": data}
        return {"json": data}

    @staticmethod
    def _decode_body(response: httpx.Response, response_type: str) -> Any:
        if response_type == "stream":
            return response
        if response_type == "bytes":
            return response.content
        if response_type == "text":
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _send(
        self, client: httpx.AsyncClient, request: dict[str, Any], url: str
    ) -> ClientResponse:
        """
        Envia uma requisição já normalizada (internal, raises exceptions).

        Raises:
            httpx.HTTPStatusError: Em caso de status fora da faixa 2xx
            httpx.TransportError: Em caso de falha de conexão ou timeout
        """
        method = str(request.get("method") or "GET").upper()
        response_type = request["response_type"]

        kwargs: dict[str, Any] = {
            "params": request.get("params"),
            "headers": request["headers"],
            **self._encode_body(request.get("data")),
        }
        if request.get("timeout") is not None:
            kwargs["timeout"] = request["timeout"]

        http_request = client.build_request(method, url, **kwargs)
        logger.debug(f"{method} {url}")

        response = await client.send(http_request, stream=response_type == "stream")
        if response_type == "stream" and not response.is_success:
            # Corpo do erro é necessário para a normalização
            await response.aread()

        response.raise_for_status()

        logger.debug(
            f"Requisição bem-sucedida para {url} - Status: {response.status_code}"
        )
        return ClientResponse(
            status=response.status_code,
            headers=response.headers,
            data=self._decode_body(response, response_type),
            url=str(response.url),
            raw=response,
        )

    async def _send_with_retry(
        self,
        client: httpx.AsyncClient,
        request: dict[str, Any],
        url: str,
    ) -> ClientResponse:
        max_retries = request.get("max_retries") or self.config.max_retries

        @retry(
            retry=retry_if_exception(self._should_retry),
            stop=stop_after_attempt(max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async def _send_once() -> ClientResponse:
            return await self._send(client, request, url)

        return await _send_once()

    async def request(self, options: dict[str, Any] | None = None) -> ClientResponse:
        """
        Realiza uma requisição HTTP com as opções informadas.

        Args:
            options: ``method``, ``url``, ``base_url``, ``headers``,
                ``params``, ``data``, ``multipart``, ``response_type``,
                ``timeout``, ``agent_options``, ``max_retries``

        Returns:
            Resposta completa

        Raises:
            httpx.HTTPStatusError: Em caso de status fora da faixa 2xx
            httpx.RequestError: Em caso de erro de conexão
            ValueError: Se a URL final não for absoluta
        """
        request = normalize_request(merge_options(self.options, options))
        url = build_url(request.get("base_url"), request.get("url"))
        if not httpx.URL(url).is_absolute_url:
            raise ValueError(f"URL sem esquema ou host: '{url}' (defina base_url)")

        transport = create_agents(options)
        if transport is None:
            return await self._send_with_retry(self._client, request, url)

        # Opções de agente por requisição usam um cliente dedicado; o stream
        # não sobrevive ao fechamento dele, então o corpo é lido por inteiro
        if request["response_type"] == "stream":
            request["response_type"] = "bytes"
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=transport
        ) as client:
            return await self._send_with_retry(client, request, url)

    # ------------------------------------------------------------------
    # Atalhos
    # ------------------------------------------------------------------

    async def get(self, url: str | None = None, options: dict | None = None) -> Any:
        """
        GET em ``url``; retorna os dados da resposta.

        Example:
            >>> await client.get("/users", {"params": {"age": 11}})
        """
        request = {"method": "GET", "url": url, **(options or {})}
        return await wrap_request(self.request(request))

    async def delete(self, url: str | None = None, options: dict | None = None) -> Any:
        """DELETE em ``url``; retorna os dados da resposta."""
        request = {"method": "DELETE", "url": url, **(options or {})}
        return await wrap_request(self.request(request))

    async def head(
        self, url: str | None = None, options: dict | None = None
    ) -> ClientResponse:
        """HEAD em ``url``; retorna a resposta completa (headers)."""
        request = {"method": "HEAD", "url": url, **(options or {})}
        return await wrap_request(self.request(request), skip_data=True)

    async def options(
        self, url: str | None = None, options: dict | None = None
    ) -> ClientResponse:
        """OPTIONS em ``url``; retorna a resposta completa (headers)."""
        request = {"method": "OPTIONS", "url": url, **(options or {})}
        return await wrap_request(self.request(request), skip_data=True)

    async def post(
        self, url: str | None = None, data: Any = None, options: dict | None = None
    ) -> Any:
        """
        POST de ``data`` em ``url``.

        Dicionários são enviados como JSON, ou como multipart com
        ``{"multipart": True}`` nas opções. Um FormData é enviado como está.

        Raises:
            HttpError: "Missing Payload" se ``data`` estiver vazio, antes de
                qualquer I/O; ou a falha normalizada da requisição
        """
        ensure_payload(data)
        request = {"method": "POST", "url": url, "data": data, **(options or {})}
        return await wrap_request(self.request(request))

    async def put(
        self, url: str | None = None, data: Any = None, options: dict | None = None
    ) -> Any:
        """PUT de ``data`` em ``url`` (mesmas regras de :meth:`post`)."""
        ensure_payload(data)
        request = {"method": "PUT", "url": url, "data": data, **(options or {})}
        return await wrap_request(self.request(request))

    async def patch(
        self, url: str | None = None, data: Any = None, options: dict | None = None
    ) -> Any:
        """PATCH de ``data`` em ``url`` (mesmas regras de :meth:`post`)."""
        ensure_payload(data)
        request = {"method": "PATCH", "url": url, "data": data, **(options or {})}
        return await wrap_request(self.request(request))

    async def send_file(
        self, url: str | None = None, data: Any = None, options: dict | None = None
    ) -> Any:
        """
        Envia arquivos via multipart (POST por padrão).

        Example:
            >>> with open("image.png", "rb") as image:
            ...     await client.send_file("/files", {"image": image})
            >>> await client.send_file("/files/1", {"image": b"..."}, {"method": "PATCH"})
        """
        ensure_payload(data)
        options = {**(options or {}), "multipart": True}
        request = {"method": "POST", "url": url, "data": data, **options}
        return await wrap_request(self.request(request))

    async def fetch_file(
        self, url: str | None = None, options: dict | None = None
    ) -> httpx.Response:
        """
        Baixa um arquivo em modo stream.

        Returns:
            Resposta httpx aberta; consuma com ``aiter_bytes()`` e feche com
            ``aclose()``
        """
        options = {**(options or {}), "response_type": "stream"}
        request = {"method": "GET", "url": url, **options}
        return await wrap_request(self.request(request))
