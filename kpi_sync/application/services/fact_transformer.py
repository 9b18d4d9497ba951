"""
Transformación pura Event -> Fact.

Sin I/O: misma entrada, mismo Fact (byte a byte).

Reglas:
- period_start / period_end: se copian del periodo del evento sin reformatear
- fact_time: solo la fecha de calendario de event.time
- indicator_to_mo_fact_id: event.params.indicator_to_mo_id como texto
- supertags: JSON con un único TagAssignment (tag "client" = autor del evento)
- el resto de campos sale del FactTemplate
"""
from __future__ import annotations

import json
from typing import List, Sequence

from kpi_sync.domain.entities.event import Event
from kpi_sync.domain.entities.fact import Fact, FactTemplate, Tag, TagAssignment
from kpi_sync.shared.constants.kpi_constants import (
    CLIENT_TAG_KEY,
    CLIENT_TAG_NAME,
    CLIENT_TAG_VALUES_SOURCE,
)
from kpi_sync.shared.utils.datetime_utils import DateTimeUtils


def client_tag_assignment(event: Event) -> TagAssignment:
    """Tag de enriquecimiento con el usuario que generó el evento."""
    return TagAssignment(
        tag=Tag(
            id=event.author.user_id,
            name=CLIENT_TAG_NAME,
            key=CLIENT_TAG_KEY,
            values_source=CLIENT_TAG_VALUES_SOURCE,
        ),
        value=event.author.user_name,
    )


def serialize_super_tags(assignments: Sequence[TagAssignment]) -> str:
    """
    Primera etapa de la codificación: lista de TagAssignment -> texto JSON.

    Compacto y con caracteres no-ASCII tal cual; el form-encoding posterior
    se encarga de escaparlos.
    """
    return json.dumps(
        [assignment.to_dict() for assignment in assignments],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def parse_super_tags(raw: str) -> List[TagAssignment]:
    """Inversa de serialize_super_tags."""
    return [TagAssignment.from_dict(item) for item in json.loads(raw)]


def transform_event(event: Event, template: FactTemplate) -> Fact:
    """
    Deriva el Fact de un Event.

    Args:
        event: Evento ya decodificado
        template: Campos fijos provistos por configuración

    Returns:
        Fact: listo para FactWriter.save
    """
    return Fact(
        period_start=event.params.period.start,
        period_end=event.params.period.end,
        period_key=template.period_key,
        indicator_to_mo_id=template.indicator_to_mo_id,
        indicator_to_mo_fact_id=str(event.params.indicator_to_mo_id),
        value=template.value,
        fact_time=DateTimeUtils.to_fact_date(event.time),
        is_plan=template.is_plan,
        super_tags=serialize_super_tags([client_tag_assignment(event)]),
        auth_user_id=template.auth_user_id,
        comment=template.comment,
    )
