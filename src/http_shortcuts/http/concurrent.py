"""Execução de requisições concorrentes com limitação via asyncio.Semaphore."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from ..utils import get_logger

logger = get_logger(__name__)


async def all_requests(
    *requests: Awaitable[Any],
    max_concurrent: int | None = None,
) -> list[Any]:
    """
    Aguarda várias requisições concorrentes.

    Falha assim que qualquer uma falhar, propagando o erro (já normalizado
    quando as requisições vêm dos atalhos). As demais são canceladas e
    aguardadas antes da propagação.

    Args:
        requests: Requisições em andamento (ex.: ``client.get("/users")``)
        max_concurrent: Limite de requisições simultâneas (sem limite se None)

    Returns:
        Resultados na mesma ordem das requisições

    Example:
        >>> roles, users = await all_requests(client.get("/roles"), client.get("/users"))
    """
    if max_concurrent is not None and max_concurrent <= 0:
        raise ValueError(f"Concorrência máxima deve ser positiva: {max_concurrent}")

    if max_concurrent is None:
        awaitables = list(requests)
    else:
        semaphore = asyncio.Semaphore(max_concurrent)

        async def with_semaphore(request: Awaitable[Any]) -> Any:
            try:
                async with semaphore:
                    return await request
            except asyncio.CancelledError:
                # Cancelada ainda na fila do semáforo
                if asyncio.iscoroutine(request):
                    request.close()
                raise

        awaitables = [with_semaphore(request) for request in requests]

    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    logger.debug(f"Concluídas {len(results)} requisições concorrentes")
    return list(results)


def spread(callback: Callable[..., Any]) -> Callable[[list[Any]], Any]:
    """
    Adapta ``callback`` para receber a lista de resultados como argumentos.

    Example:
        >>> results = await all_requests(client.get("/roles"), client.get("/users"))
        >>> spread(lambda roles, users: ...)(results)
    """

    def wrapper(results: list[Any]) -> Any:
        return callback(*results)

    return wrapper
