"""Configurações, constantes e merge de opções do cliente."""

import os
from typing import Any

import httpx


class ClientConfig:
    """Configurações do cliente HTTP."""

    # Content negotiation
    CONTENT_TYPE = "application/json"
    RESPONSE_TYPE = "json"
    RESPONSE_TYPES = ("json", "text", "bytes", "stream")

    # Variáveis de ambiente com a URL base (em ordem de prioridade)
    BASE_URL_ENV_VARS = ("BASE_URL", "REACT_APP_BASE_URL")

    # Limites
    MAX_RETRIES = 1

    # Timeouts (em segundos)
    CONNECT_TIMEOUT = 5.0
    READ_TIMEOUT = 30.0
    WRITE_TIMEOUT = 10.0
    POOL_TIMEOUT = 5.0

    def __init__(
        self,
        timeout: httpx.Timeout | float | None = None,
        max_retries: int | None = None,
    ):
        """
        Args:
            timeout: Timeout customizado (usa os padrões da classe se None)
            max_retries: Número máximo de tentativas por requisição
        """
        self.timeout = timeout if timeout is not None else self.default_timeout()
        self.max_retries = max_retries if max_retries is not None else self.MAX_RETRIES

        self._validate_config()

    @classmethod
    def default_timeout(cls) -> httpx.Timeout:
        return httpx.Timeout(
            connect=cls.CONNECT_TIMEOUT,
            read=cls.READ_TIMEOUT,
            write=cls.WRITE_TIMEOUT,
            pool=cls.POOL_TIMEOUT,
        )

    @classmethod
    def default_headers(cls) -> dict[str, str]:
        return {"Accept": cls.CONTENT_TYPE, "Content-Type": cls.CONTENT_TYPE}

    def _validate_config(self) -> None:
        """Valida as configurações."""
        if self.max_retries <= 0:
            raise ValueError(f"max_retries deve ser positivo: {self.max_retries}")
        if isinstance(self.timeout, (int, float)) and self.timeout <= 0:
            raise ValueError(f"Timeout deve ser positivo: {self.timeout}")


def get_base_url() -> str | None:
    """Retorna a primeira URL base definida no ambiente."""
    for name in ClientConfig.BASE_URL_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def merge_options(
    base: dict[str, Any] | None, override: dict[str, Any] | None
) -> dict[str, Any]:
    """
    Merge raso de opções em que ``override`` prevalece.

    ``headers`` é combinado chave a chave e valores ``None`` em ``override``
    são ignorados. Nenhum dos dicionários é modificado.
    """
    merged = dict(base or {})
    merged["headers"] = dict(merged.get("headers") or {})

    for key, value in (override or {}).items():
        if value is None:
            continue
        if key == "headers":
            merged["headers"] = {**merged["headers"], **value}
        else:
            merged[key] = value

    return merged


def with_defaults(options: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Combina as opções informadas com os padrões do cliente.

    Args:
        options: Opções da requisição ou do cliente

    Returns:
        Novo dicionário com as opções combinadas

    Example:
        >>> with_defaults({"base_url": "https://api.example.com/"})
        {'base_url': 'https://api.example.com/', 'headers': {...}}
    """
    defaults = {
        "base_url": get_base_url(),
        "headers": ClientConfig.default_headers(),
    }
    return merge_options(defaults, options)


def build_url(base_url: str | None, url: str | None) -> str:
    """
    Resolve a URL da requisição contra a URL base.

    URLs absolutas são usadas como estão. Caso contrário base e caminho são
    unidos com exatamente uma barra entre eles.
    """
    url = url or ""
    if not base_url or httpx.URL(url).is_absolute_url:
        return url
    if not url:
        return base_url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"
