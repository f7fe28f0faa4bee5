"""Normalização do corpo das requisições e conversão para multipart."""

import json
from collections.abc import Mapping
from typing import Any

from ..core.config import ClientConfig
from ..utils import get_logger

logger = get_logger(__name__)


class FormData:
    """
    Corpo multipart/form-data montado campo a campo.

    Apenas acumula as partes; a codificação (boundary, Content-Disposition)
    fica a cargo do httpx, que recebe as partes via ``files=``.
    """

    def __init__(self):
        self.entries: list[tuple[str, Any]] = []

    def append(self, key: str, value: Any) -> None:
        """
        Adiciona uma parte ao formulário.

        Args:
            key: Nome do campo
            value: ``bytes``, arquivo aberto em modo binário, tupla
                ``(filename, conteúdo[, content_type])`` ou valor texto
        """
        if isinstance(value, tuple) or hasattr(value, "read"):
            self.entries.append((key, value))
        elif isinstance(value, (bytes, bytearray)):
            self.entries.append((key, (key, bytes(value))))
        elif isinstance(value, (Mapping, list)):
            self.entries.append((key, (None, json.dumps(value))))
        else:
            # Sem filename o httpx gera um campo texto comum
            self.entries.append((key, (None, str(value))))

    @property
    def fields(self) -> list[str]:
        return [key for key, _ in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"<FormData fields={self.fields}>"


def is_form_data(value: Any) -> bool:
    """Determina se o valor já é um FormData."""
    return isinstance(value, FormData)


def to_form_data(data: Mapping[str, Any] | None = None) -> FormData:
    """
    Converte um dicionário simples em FormData.

    Campos com chave vazia ou valor falsy são ignorados.
    """
    form = FormData()
    for key, value in (data or {}).items():
        if key and value:
            form.append(key, value)
    return form


def _content_type(headers: Mapping[str, str]) -> str:
    for name, value in headers.items():
        if name.lower() == "content-type":
            return value or ""
    return ""


def normalize_request(request: dict[str, Any]) -> dict[str, Any]:
    """
    Normaliza as opções da requisição.

    - garante ``response_type`` (padrão: json);
    - detecta multipart pela flag ``multipart``, pelo header Content-Type
      ou por um FormData já pronto em ``data``;
    - converte dicionários para FormData quando multipart (outros corpos,
      como texto ou bytes já codificados, seguem como estão);
    - remove o Content-Type de corpos FormData para que o transporte
      gere o ``multipart/form-data; boundary=...``.

    Args:
        request: Opções da requisição (não é modificado)

    Returns:
        Novo dicionário com as opções normalizadas
    """
    request = dict(request)
    headers = dict(request.get("headers") or {})
    data = request.get("data", {})
    response_type = request.get("response_type") or ClientConfig.RESPONSE_TYPE
    multipart = bool(request.pop("multipart", False))

    multipart = (
        multipart
        or _content_type(headers).lower().startswith("multipart")
        or is_form_data(data)
    )

    if multipart and isinstance(data, Mapping):
        data = to_form_data(data)

    if is_form_data(data):
        headers = {
            name: value
            for name, value in headers.items()
            if name.lower() != "content-type"
        }
        logger.debug(f"Corpo multipart com campos: {data.fields}")

    request["headers"] = headers
    request["response_type"] = response_type
    if data is None:
        request.pop("data", None)
    else:
        request["data"] = data

    return request
