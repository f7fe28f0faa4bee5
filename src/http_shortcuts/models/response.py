"""Modelo de resposta normalizada."""

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class ClientResponse:
    """Resposta HTTP com o corpo já decodificado conforme o response_type."""

    status: int
    headers: httpx.Headers
    data: Any = None
    url: str = ""
    raw: httpx.Response | None = field(default=None, repr=False)

    @property
    def status_text(self) -> str:
        return self.raw.reason_phrase if self.raw is not None else ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def aclose(self) -> None:
        """Libera a conexão de respostas em modo stream."""
        if self.raw is not None:
            await self.raw.aclose()

    def __repr__(self) -> str:
        return f"<ClientResponse status={self.status} url='{self.url}'>"
