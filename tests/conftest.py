"""Pytest configuration and fixtures for http_shortcuts tests."""

import pytest
import pytest_asyncio

from http_shortcuts.http import dispose_http_client

BASE_URL = "https://127.0.0.1/v1/"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove variáveis de URL base herdadas do ambiente."""
    monkeypatch.delenv("BASE_URL", raising=False)
    monkeypatch.delenv("REACT_APP_BASE_URL", raising=False)


@pytest.fixture
def base_url(monkeypatch) -> str:
    """Define BASE_URL no ambiente."""
    monkeypatch.setenv("BASE_URL", BASE_URL)
    return BASE_URL


@pytest_asyncio.fixture
async def shared_client():
    """Descarta o cliente da fábrica padrão ao final do teste."""
    await dispose_http_client()
    yield
    await dispose_http_client()
