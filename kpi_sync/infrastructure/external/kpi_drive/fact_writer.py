"""
Escritura de facts: POST /_api/facts/save_fact.

El body es form-urlencoded con los once campos del Fact. El campo
`supertags` ya es un string JSON: aquí solo se asigna como valor de un
campo del form (segunda etapa de la codificación).
"""

from __future__ import annotations

from typing import Dict
from urllib.parse import parse_qsl, urlencode

from kpi_sync.domain.entities.envelope import FactSaved, ResponseEnvelope, decode_envelope
from kpi_sync.domain.entities.fact import Fact
from kpi_sync.shared.constants.kpi_constants import FORM_CONTENT_TYPE, ApiPath
from kpi_sync.shared.exceptions.kpi import DecodeError

from .session_client import KpiDriveSession

# Atributo de Fact -> nombre del campo en el form
FACT_FORM_FIELDS: Dict[str, str] = {
    "period_start": "period_start",
    "period_end": "period_end",
    "period_key": "period_key",
    "indicator_to_mo_id": "indicator_to_mo_id",
    "indicator_to_mo_fact_id": "indicator_to_mo_fact_id",
    "value": "value",
    "fact_time": "fact_time",
    "is_plan": "is_plan",
    "super_tags": "supertags",
    "auth_user_id": "auth_user_id",
    "comment": "comment",
}


def encode_fact_form(fact: Fact) -> bytes:
    """Codifica todos los campos del Fact como body form-urlencoded (UTF-8)."""
    pairs = [(form_name, getattr(fact, attr)) for attr, form_name in FACT_FORM_FIELDS.items()]
    return urlencode(pairs).encode("ascii")


def fact_from_form(body: bytes) -> Fact:
    """
    Operación inversa de encode_fact_form.

    Raises:
        DecodeError: si falta algún campo del Fact
    """
    values = dict(parse_qsl(body.decode("ascii"), keep_blank_values=True))
    missing = [name for name in FACT_FORM_FIELDS.values() if name not in values]
    if missing:
        raise DecodeError(f"Form de fact incompleto, faltan: {', '.join(missing)}", target="Fact")
    return Fact(**{attr: values[form_name] for attr, form_name in FACT_FORM_FIELDS.items()})


class FactWriter:
    """Persiste un Fact. No interpreta STATUS: eso lo decide el orquestador."""

    def __init__(self, session: KpiDriveSession) -> None:
        self._session = session

    def save(self, auth_token: str, fact: Fact) -> ResponseEnvelope[FactSaved]:
        """
        Envía el fact con Authorization: Bearer <auth_token>.

        Raises:
            TransportError: fallo de red
            DecodeError: respuesta con forma inesperada
        """
        body = encode_fact_form(fact)
        headers = {
            "Content-Type": FORM_CONTENT_TYPE,
            "Content-Length": str(len(body)),
            "Authorization": f"Bearer {auth_token}",
        }
        raw = self._session.request("POST", ApiPath.SAVE_FACT.value, body=body, headers=headers)
        return decode_envelope(raw, FactSaved)
