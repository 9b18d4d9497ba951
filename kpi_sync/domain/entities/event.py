"""
Entidad Event: ocurrencia de dominio leída de /_api/events.

Solo se construye decodificando la respuesta de la API y nunca se modifica
(modelos frozen).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from kpi_sync.shared.utils.datetime_utils import DateTimeUtils


class EventAuthor(BaseModel):
    """Usuario que generó el evento."""

    model_config = ConfigDict(frozen=True)

    mo_id: StrictInt = 0
    user_id: StrictInt = 0
    user_name: StrictStr = ""


class EventPeriod(BaseModel):
    """Periodo al que aplica el evento. start/end se pasan tal cual al fact."""

    model_config = ConfigDict(frozen=True)

    start: StrictStr = ""
    end: StrictStr = ""
    type_id: StrictInt = 0
    type_key: StrictStr = ""


class EventParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    indicator_to_mo_id: StrictInt = 0
    platform: StrictStr = ""
    period: EventPeriod = Field(default_factory=EventPeriod)


class Event(BaseModel):
    """
    Evento de la API.

    `time` es obligatorio y debe cumplir exactamente el formato
    YYYY-MM-DDTHH:MM:SS[.fraccion]Z; cualquier desviación hace fallar la
    validación del evento (y con ello la de todo el listado).
    """

    model_config = ConfigDict(frozen=True)

    author: EventAuthor = Field(default_factory=EventAuthor)
    time: datetime
    params: EventParams = Field(default_factory=EventParams)

    @field_validator("time", mode="before")
    @classmethod
    def _parse_time(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value
        return DateTimeUtils.parse_event_time(value)
