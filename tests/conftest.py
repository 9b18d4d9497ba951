"""
Configuración de fixtures para pytest.

La API de KPI-Drive se reemplaza por un `requests.Session` falso en memoria:
ningún test hace llamadas de red.
"""
import json
from typing import Any, Optional

import pytest
import requests

from kpi_sync.core.config import Settings


class FakeResponse:
    """Respuesta mínima con la interfaz que usa KpiDriveSession."""

    def __init__(self, raw: bytes, status_code: int = 200, read_error: Optional[Exception] = None):
        self._raw = raw
        self.status_code = status_code
        self._read_error = read_error

    @property
    def content(self) -> bytes:
        if self._read_error is not None:
            raise self._read_error
        return self._raw


class FakeHttpSession:
    """
    Doble de requests.Session.

    Devuelve las respuestas encoladas en orden y registra cada llamada.
    Si el elemento encolado es una excepción, se lanza.
    """

    def __init__(self, *responses: Any):
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    def request(self, method, url, data=None, headers=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "data": data, "headers": dict(headers or {}), "timeout": timeout}
        )
        if not self._responses:
            raise AssertionError(f"Llamada inesperada: {method} {url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


def envelope_bytes(data: Any = None, status: str = "OK", errors: Optional[list] = None) -> bytes:
    """Serializa un envelope como lo devuelve la API."""
    return json.dumps(
        {
            "MESSAGES": {"error": errors or [], "warning": [], "info": []},
            "DATA": data,
            "STATUS": status,
        },
        ensure_ascii=False,
    ).encode("utf-8")


def event_row(
    *,
    user_id: int = 7,
    user_name: str = "Ivan",
    time: str = "2024-02-01T08:15:00.123456Z",
    indicator_to_mo_id: int = 42,
    start: str = "2024-01-01T00:00:00Z",
    end: str = "2024-01-31T23:59:59Z",
) -> dict:
    """Fila de /_api/events con la estructura real de la API."""
    return {
        "author": {"mo_id": 1, "user_id": user_id, "user_name": user_name},
        "time": time,
        "params": {
            "indicator_to_mo_id": indicator_to_mo_id,
            "platform": "web",
            "period": {"start": start, "end": end, "type_id": 3, "type_key": "month"},
        },
    }


def events_page(rows: list, pages_count: int = 1) -> dict:
    return {"page": 1, "pages_count": pages_count, "rows_count": len(rows), "rows": rows}


@pytest.fixture
def ok_envelope():
    """Factory de bytes de envelope."""
    return envelope_bytes


@pytest.fixture
def make_event_row():
    return event_row


@pytest.fixture
def make_events_page():
    return events_page


@pytest.fixture
def fake_http():
    """Sesión HTTP falsa, vacía; cada test encola sus respuestas."""
    return FakeHttpSession()


@pytest.fixture
def response():
    """Factory de FakeResponse."""
    return FakeResponse


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError("connection refused")


@pytest.fixture
def test_settings() -> Settings:
    """Settings completos, sin leer .env ni escribir logs a disco."""
    return Settings(
        _env_file=None,
        KPI_BASE_URL="https://kpi.example.test/",
        KPI_LOGIN="admin",
        KPI_PASSWORD="secret",
        KPI_API_TOKEN="token-123",
        LOG_FILE="",
        AUDIT_LOG_DIR="",
    )
