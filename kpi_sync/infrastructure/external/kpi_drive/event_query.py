"""
Consulta de eventos: GET /_api/events con body JSON.

La API devuelve metadata de paginación (page, pages_count) pero aquí solo
se pide una página con un límite fijo de filas; no se sigue el cursor.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger

from kpi_sync.domain.entities.envelope import Paginated, ResponseEnvelope, decode_envelope
from kpi_sync.domain.entities.event import Event
from kpi_sync.shared.constants.kpi_constants import (
    DEFAULT_EVENT_LIMIT,
    DEFAULT_EVENT_SORT_DIRECTION,
    DEFAULT_EVENT_SORT_FIELD,
    DEFAULT_EVENT_TYPE,
    EVENT_FILTER_KEY,
    EVENT_FILTER_SIGN,
    JSON_CONTENT_TYPE,
    ApiPath,
)

from .session_client import KpiDriveSession


@dataclass(frozen=True)
class EventQuery:
    """Filtro (type LIKE <event_type>), orden de un campo y límite de filas."""

    event_type: str = DEFAULT_EVENT_TYPE
    sort_field: str = DEFAULT_EVENT_SORT_FIELD
    sort_direction: str = DEFAULT_EVENT_SORT_DIRECTION
    limit: int = DEFAULT_EVENT_LIMIT


def build_event_query_payload(query: EventQuery) -> dict[str, Any]:
    """
    Construye el body de /_api/events:

    {"filter": {"field": {"key": "type", "sign": "LIKE", "values": [...]}},
     "sort": {"fields": [...], "direction": "DESC"},
     "limit": 10}
    """
    return {
        "filter": {
            "field": {
                "key": EVENT_FILTER_KEY,
                "sign": EVENT_FILTER_SIGN,
                "values": [query.event_type],
            }
        },
        "sort": {
            "fields": [query.sort_field],
            "direction": query.sort_direction,
        },
        "limit": query.limit,
    }


class EventQueryService:
    """Ejecuta la consulta de eventos a través de una KpiDriveSession."""

    def __init__(self, session: KpiDriveSession) -> None:
        self._session = session

    def fetch(self, query: EventQuery) -> ResponseEnvelope[Paginated[Event]]:
        """
        Trae el lote de eventos a sincronizar.

        Un timestamp inválido en cualquier fila hace fallar todo el lote.

        Raises:
            TransportError: fallo de red
            DecodeError: respuesta con forma inesperada
        """
        body = json.dumps(build_event_query_payload(query)).encode("utf-8")
        raw = self._session.request(
            "GET",
            ApiPath.EVENTS.value,
            body=body,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )
        envelope = decode_envelope(raw, Paginated[Event])

        page = envelope.data
        if page is not None:
            logger.info(
                f"Eventos recibidos: {len(page.rows)} "
                f"(rows_count={page.rows_count}, page={page.page}/{page.pages_count})"
            )
            if page.pages_count > 1:
                logger.warning(
                    f"La consulta tiene {page.pages_count} páginas; solo se procesa la primera "
                    f"(limit={query.limit})"
                )
        return envelope
