"""
Envelope genérico de respuesta de la API de KPI-Drive.

Toda respuesta tiene la forma:
    {"MESSAGES": {"error": [], "warning": [], "info": []}, "DATA": <T>, "STATUS": "OK"}

DATA cambia según el endpoint (listado paginado, id del fact creado, ...),
por eso el envelope se modela como un BaseModel genérico y se decodifica
siempre a través de `decode_envelope`.
"""
from __future__ import annotations

from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from kpi_sync.shared.constants.kpi_constants import STATUS_OK, UNKNOWN_APPLICATION_ERROR
from kpi_sync.shared.exceptions.kpi import DecodeError

T = TypeVar("T")


class ResponseMessages(BaseModel):
    """Mensajes legibles que acompañan a la respuesta."""

    model_config = ConfigDict(frozen=True)

    error: List[StrictStr] = Field(default_factory=list)
    warning: List[StrictStr] = Field(default_factory=list)
    info: List[StrictStr] = Field(default_factory=list)

    @field_validator("error", "warning", "info", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Paginated(BaseModel, Generic[T]):
    """DATA de los endpoints de listado."""

    model_config = ConfigDict(frozen=True)

    page: StrictInt = 0
    pages_count: StrictInt = 0
    rows_count: StrictInt = 0
    rows: List[T] = Field(default_factory=list)

    @field_validator("rows", mode="before")
    @classmethod
    def _null_rows_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FactSaved(BaseModel):
    """DATA de /_api/facts/save_fact."""

    model_config = ConfigDict(frozen=True)

    indicator_to_mo_fact_id: StrictInt = 0


class ResponseEnvelope(BaseModel, Generic[T]):
    """
    Wrapper uniforme de toda respuesta.

    - status: marcador opaco; "OK" indica éxito
    - messages.error: motivos de fallo, solo se consultan si status no es "OK"
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    messages: ResponseMessages = Field(default_factory=ResponseMessages, alias="MESSAGES")
    data: Optional[T] = Field(default=None, alias="DATA")
    status: StrictStr = Field(default="", alias="STATUS")

    @field_validator("messages", "status", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return {} if info.field_name == "messages" else ""
        return value

    @field_validator("data", mode="before")
    @classmethod
    def _empty_data_as_none(cls, value: Any) -> Any:
        # En respuestas de error la API suele mandar DATA: [] o "".
        if value == [] or value == "":
            return None
        return value

    @property
    def is_ok(self) -> bool:
        return self.status == STATUS_OK

    def first_error(self) -> str:
        """
        Primer mensaje de error, o un mensaje genérico si la lista viene vacía.
        """
        if self.messages.error:
            return self.messages.error[0]
        return UNKNOWN_APPLICATION_ERROR.format(status=self.status)


def decode_envelope(raw: bytes, payload_type: Type[T]) -> ResponseEnvelope[T]:
    """
    Decodifica bytes crudos en ResponseEnvelope[payload_type].

    Raises:
        DecodeError: si el body no es JSON o no coincide con el modelo.
    """
    target = f"ResponseEnvelope[{getattr(payload_type, '__name__', payload_type)}]"
    try:
        return ResponseEnvelope[payload_type].model_validate_json(raw)
    except ValidationError as e:
        preview = raw[:200].decode("utf-8", errors="replace") if raw else ""
        raise DecodeError(
            f"Respuesta inválida para {target}: {e.error_count()} error(es); {_first_validation_error(e)}",
            target=target,
            body_preview=preview,
        ) from e


def _first_validation_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first.get('msg', '')}"
