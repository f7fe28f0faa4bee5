"""Transportes httpx com TLS customizado (certificado cliente, CA própria)."""

import ssl
from typing import Any

import httpx

from ..core.config import with_defaults
from ..utils import get_logger

logger = get_logger(__name__)


def create_ssl_context(agent_options: dict[str, Any]) -> ssl.SSLContext:
    """
    Cria o contexto TLS a partir das opções do agente.

    Args:
        agent_options: ``ca`` (arquivo da CA), ``cert`` e ``key`` (certificado
            cliente) e ``passphrase`` (senha da chave)
    """
    context = ssl.create_default_context(cafile=agent_options.get("ca"))

    cert = agent_options.get("cert")
    if cert:
        context.load_cert_chain(
            certfile=cert,
            keyfile=agent_options.get("key"),
            password=agent_options.get("passphrase"),
        )

    return context


def create_agents(options: dict[str, Any] | None = None) -> httpx.AsyncHTTPTransport | None:
    """
    Cria um transporte httpx quando há ``agent_options`` nas opções.

    Keep-alive fica ligado por padrão; ``keep_alive=False`` desliga o
    reaproveitamento de conexões.

    Returns:
        Transporte configurado ou None se não houver opções de agente
    """
    agent_options = with_defaults(options).get("agent_options") or {}
    if not agent_options:
        return None

    agent_options = {"keep_alive": True, **agent_options}
    limits = (
        httpx.Limits()
        if agent_options["keep_alive"]
        else httpx.Limits(max_keepalive_connections=0)
    )

    logger.debug(f"Criando transporte com opções: {sorted(agent_options)}")
    return httpx.AsyncHTTPTransport(
        verify=create_ssl_context(agent_options),
        limits=limits,
    )
