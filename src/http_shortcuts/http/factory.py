"""Fábrica do cliente compartilhado e atalhos em nível de módulo."""

import asyncio
from typing import Any

import httpx

from ..core.config import ClientConfig
from ..models import ClientResponse
from ..utils import get_logger
from .client import HttpClient

logger = get_logger(__name__)


class HttpClientFactory:
    """
    Mantém um único HttpClient por aplicação.

    O cliente é criado na primeira chamada de :meth:`create` e reaproveitado
    nas seguintes (as opções das chamadas seguintes são ignoradas) até
    :meth:`dispose`.

    O pool de conexões do httpx pertence ao event loop que o usou primeiro.
    Quando :meth:`create` roda em outro loop (ex.: um novo ``asyncio.run``),
    o cliente é recriado com as mesmas opções.
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config
        self._client: HttpClient | None = None
        self._options: dict[str, Any] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @staticmethod
    def _current_loop() -> asyncio.AbstractEventLoop | None:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _bound_to_other_loop(self, loop: asyncio.AbstractEventLoop | None) -> bool:
        return self._loop is not None and loop is not None and loop is not self._loop

    @property
    def client(self) -> HttpClient | None:
        return self._client

    def create(self, options: dict[str, Any] | None = None) -> HttpClient:
        loop = self._current_loop()

        if self._client is not None and self._bound_to_other_loop(loop):
            # Pool preso ao loop anterior: descartado sem aclose
            logger.debug(f"Event loop mudou, recriando {self._client!r}")
            self._client = None
            options = self._options

        if self._client is None or self._client.is_closed:
            self._client = HttpClient(options, config=self.config)
            self._options = options
            self._loop = None
            logger.debug(f"Cliente HTTP criado: {self._client!r}")

        if self._loop is None:
            self._loop = loop
        return self._client

    async def dispose(self) -> None:
        """Fecha e descarta o cliente atual."""
        client, self._client = self._client, None
        loop, self._loop = self._loop, None
        self._options = None
        if client is None:
            return
        if self._current_loop() is not loop and loop is not None:
            logger.debug(f"Cliente de outro event loop descartado: {client!r}")
            return
        await client.close()
        logger.debug(f"Cliente HTTP descartado: {client!r}")


default_factory = HttpClientFactory()


def create_http_client(options: dict[str, Any] | None = None) -> HttpClient:
    """Cria (se necessário) e retorna o cliente da fábrica padrão."""
    return default_factory.create(options)


async def dispose_http_client() -> None:
    """Descarta o cliente da fábrica padrão."""
    await default_factory.dispose()


async def request(options: dict[str, Any] | None = None) -> ClientResponse:
    return await create_http_client().request(options)


async def get(url: str | None = None, options: dict | None = None) -> Any:
    return await create_http_client().get(url, options)


async def delete(url: str | None = None, options: dict | None = None) -> Any:
    return await create_http_client().delete(url, options)


async def head(url: str | None = None, options: dict | None = None) -> ClientResponse:
    return await create_http_client().head(url, options)


async def options(url: str | None = None, options: dict | None = None) -> ClientResponse:
    return await create_http_client().options(url, options)


async def post(url: str | None = None, data: Any = None, options: dict | None = None) -> Any:
    return await create_http_client().post(url, data, options)


async def put(url: str | None = None, data: Any = None, options: dict | None = None) -> Any:
    return await create_http_client().put(url, data, options)


async def patch(url: str | None = None, data: Any = None, options: dict | None = None) -> Any:
    return await create_http_client().patch(url, data, options)


async def send_file(
    url: str | None = None, data: Any = None, options: dict | None = None
) -> Any:
    return await create_http_client().send_file(url, data, options)


async def fetch_file(url: str | None = None, options: dict | None = None) -> httpx.Response:
    return await create_http_client().fetch_file(url, options)
