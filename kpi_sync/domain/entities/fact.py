"""
Entidades de escritura: Fact, Tag, TagAssignment y FactTemplate.

Se mantienen libres de I/O para poder testearlas fácilmente.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Tag:
    """Dimensión de clasificación de un fact."""

    id: int
    name: str
    key: str
    values_source: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "key": self.key,
            "values_source": self.values_source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tag":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            key=str(data["key"]),
            values_source=int(data.get("values_source", 0)),
        )


@dataclass(frozen=True)
class TagAssignment:
    """Valor concreto de un Tag para un fact."""

    tag: Tag
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"tag": self.tag.to_dict(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TagAssignment":
        return cls(tag=Tag.from_dict(data["tag"]), value=str(data["value"]))


@dataclass(frozen=True)
class FactTemplate:
    """
    Campos fijos de todo fact, provistos por configuración.

    No incluye indicator_to_mo_fact_id: ese campo se deriva del evento.
    """

    period_key: str
    indicator_to_mo_id: str
    auth_user_id: str
    value: str = "1"
    is_plan: str = ""
    comment: str = ""


@dataclass(frozen=True)
class Fact:
    """
    Unidad de escritura de /_api/facts/save_fact.

    Todos los campos viajan como texto en un body form-urlencoded.
    - indicator_to_mo_fact_id: "0" significa "crear", N significa "actualizar el fact N"
    - super_tags: JSON (lista de TagAssignment) embebido como string en un campo del form
    """

    period_start: str
    period_end: str
    period_key: str
    indicator_to_mo_id: str
    indicator_to_mo_fact_id: str
    value: str
    fact_time: str
    is_plan: str
    super_tags: str
    auth_user_id: str
    comment: str
