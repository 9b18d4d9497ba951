from kpi_sync.domain.entities.envelope import (
    FactSaved,
    Paginated,
    ResponseEnvelope,
    ResponseMessages,
    decode_envelope,
)
from kpi_sync.domain.entities.event import Event, EventAuthor, EventParams, EventPeriod
from kpi_sync.domain.entities.fact import Fact, FactTemplate, Tag, TagAssignment

__all__ = [
    "Event",
    "EventAuthor",
    "EventParams",
    "EventPeriod",
    "Fact",
    "FactSaved",
    "FactTemplate",
    "Paginated",
    "ResponseEnvelope",
    "ResponseMessages",
    "Tag",
    "TagAssignment",
    "decode_envelope",
]
