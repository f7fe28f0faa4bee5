"""CLI para requisições rápidas usando os atalhos HTTP."""

import argparse
import asyncio
import json
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from http_shortcuts.http import HttpClient, HttpError
from http_shortcuts.models import ClientResponse
from http_shortcuts.utils import get_logger, setup_logging

logger = get_logger(__name__)
console = Console()

METHODS = ("GET", "DELETE", "HEAD", "OPTIONS", "POST", "PUT", "PATCH")
BODY_METHODS = ("POST", "PUT", "PATCH")


def parse_header(value: str) -> tuple[str, str]:
    """Converte 'Nome: valor' em tupla."""
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Header inválido (use 'Nome: valor'): {value}")
    return name.strip(), header_value.strip()


def parse_data(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"JSON inválido em --data: {e}")


def parse_file(value: str) -> tuple[str, Path]:
    """Converte 'campo=caminho' em tupla."""
    field, sep, path = value.partition("=")
    if not sep or not field or not path:
        raise argparse.ArgumentTypeError(f"Arquivo inválido (use campo=caminho): {value}")
    return field, Path(path)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse argumentos de linha de comando."""
    parser = argparse.ArgumentParser(
        description="Requisições HTTP com headers padrão e erros normalizados",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  # GET usando a URL base do ambiente
  BASE_URL=https://api.github.com/repositories http-shortcuts GET /

  # POST com corpo JSON
  http-shortcuts POST /users --base-url https://api.example.com --data '{"age": 11}'

  # Upload multipart
  http-shortcuts POST /files --base-url https://api.example.com --file image=image.png
        """,
    )

    parser.add_argument("method", type=str.upper, choices=METHODS, help="Verbo HTTP")
    parser.add_argument("url", nargs="?", default="", help="Caminho ou URL absoluta")

    request_group = parser.add_argument_group("Configurações da Requisição")
    request_group.add_argument(
        "--base-url",
        default=None,
        help="URL base (padrão: $BASE_URL ou $REACT_APP_BASE_URL)",
    )
    request_group.add_argument(
        "--header",
        "-H",
        dest="headers",
        action="append",
        type=parse_header,
        default=[],
        help="Header extra no formato 'Nome: valor' (repetível)",
    )
    request_group.add_argument(
        "--data", "-d", type=parse_data, help="Corpo da requisição em JSON"
    )
    request_group.add_argument(
        "--file",
        "-F",
        dest="files",
        action="append",
        type=parse_file,
        default=[],
        help="Arquivo para upload multipart no formato campo=caminho (repetível)",
    )
    request_group.add_argument(
        "--multipart", action="store_true", help="Enviar o corpo como multipart"
    )
    request_group.add_argument(
        "--timeout", type=float, help="Timeout em segundos (padrão: 30s de leitura)"
    )
    request_group.add_argument(
        "--max-retries",
        type=int,
        default=1,
        help="Número máximo de tentativas (padrão: 1, sem retry)",
    )

    log_group = parser.add_argument_group("Configurações de Log")
    log_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=os.getenv("HTTP_SHORTCUTS_LOG_LEVEL", "WARNING"),
        help="Nível de logging (padrão: WARNING ou $HTTP_SHORTCUTS_LOG_LEVEL)",
    )
    log_group.add_argument(
        "--log-file", type=Path, help="Arquivo para salvar logs (opcional)"
    )

    args = parser.parse_args(argv)
    if args.files and args.data is not None and not isinstance(args.data, dict):
        parser.error("--data deve ser um objeto JSON quando usado com --file")
    return args


def build_options(args: argparse.Namespace) -> dict[str, Any]:
    """Monta as opções do cliente a partir dos argumentos."""
    return {
        "base_url": args.base_url,
        "headers": dict(args.headers),
        "timeout": args.timeout,
        "max_retries": args.max_retries,
    }


async def send(client: HttpClient, args: argparse.Namespace, stack: ExitStack) -> Any:
    """Despacha a requisição para o atalho correspondente ao verbo."""
    options = {"multipart": True} if args.multipart else {}

    if args.files:
        data = dict(args.data or {})
        for field, path in args.files:
            data[field] = stack.enter_context(path.open("rb"))
        options["method"] = args.method if args.method in BODY_METHODS else "POST"
        return await client.send_file(args.url, data, options)

    if args.method in BODY_METHODS:
        shortcut = getattr(client, args.method.lower())
        return await shortcut(args.url, args.data, options)

    shortcut = getattr(client, args.method.lower())
    return await shortcut(args.url, options)


def display_response(result: Any) -> None:
    """Exibe dados ou, para HEAD/OPTIONS, status e headers."""
    if isinstance(result, ClientResponse):
        table = Table(title=f"{result.status} {result.status_text}", show_header=True)
        table.add_column("Header", style="cyan")
        table.add_column("Valor", style="green")
        for name, value in result.headers.items():
            table.add_row(name, value)
        console.print(table)
    elif isinstance(result, (dict, list)):
        console.print_json(data=result)
    elif result is not None:
        console.print(result)


def display_error(error: HttpError) -> None:
    console.print(f"[bold red]❌ {error.status} {error.description}[/bold red]")
    if error.message and error.message != error.description:
        console.print(f"[red]{error.message}[/red]")


async def cli(argv: list[str] | None = None) -> int:
    """Função principal assíncrona."""
    args = parse_arguments(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        with ExitStack() as stack:
            async with HttpClient(build_options(args)) as client:
                result = await send(client, args, stack)
    except HttpError as e:
        logger.debug(f"Falha na requisição: {e!r}")
        display_error(e)
        return 1
    except OSError as e:
        console.print(f"[bold red]❌ Erro ao abrir arquivo: {e}[/bold red]")
        return 1

    display_response(result)
    return 0


def main():
    sys.exit(asyncio.run(cli()))


if __name__ == "__main__":
    main()
