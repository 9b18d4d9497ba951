"""
Orquestador del job: eventos de KPI-Drive -> facts.

Diseño (resumen):
- Autentica una vez
- Consulta el lote de eventos una vez
- Recorre el lote en el orden devuelto por la API (time DESC)
- Por cada evento: transforma y escribe
- Fail-fast: el primer error de escritura detiene el lote

Sin reintentos ni rollback: los facts ya escritos quedan escritos y los
eventos restantes simplemente no se intentan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from loguru import logger

from kpi_sync.application.services.fact_transformer import transform_event
from kpi_sync.core.config import Settings
from kpi_sync.domain.entities.event import Event
from kpi_sync.domain.entities.fact import FactTemplate
from kpi_sync.infrastructure.external.kpi_drive.event_query import EventQuery, EventQueryService
from kpi_sync.infrastructure.external.kpi_drive.fact_writer import FactWriter
from kpi_sync.infrastructure.external.kpi_drive.session_client import KpiDriveSession
from kpi_sync.shared.exceptions.base import AppException
from kpi_sync.shared.exceptions.kpi import ApplicationError
from kpi_sync.shared.utils.datetime_utils import DateTimeUtils


@dataclass(frozen=True)
class Credentials:
    login: str
    password: str
    api_token: str


@dataclass(frozen=True)
class SavedFact:
    """Fact escrito con éxito."""

    event_index: int
    fact_id: Optional[int]


@dataclass(frozen=True)
class SyncFailure:
    """Error que detuvo el lote."""

    event_index: int
    message: str
    error_code: str


@dataclass
class SyncResult:
    """
    Resultado secuencial de una corrida: facts escritos + error terminal.

    - saved: en el mismo orden en que se escribieron
    - failure: None si se procesó todo el lote
    """

    events_fetched: int = 0
    saved: List[SavedFact] = field(default_factory=list)
    failure: Optional[SyncFailure] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def saved_fact_ids(self) -> List[Optional[int]]:
        return [s.fact_id for s in self.saved]

    @property
    def not_attempted(self) -> int:
        """Eventos que quedaron sin procesar por el fail-fast."""
        if self.failure is None:
            return 0
        return self.events_fetched - self.failure.event_index - 1


class EventsToFactsSync:
    """
    Orquestador del pipeline autenticación -> consulta -> transformación -> escritura.
    """

    def __init__(
        self,
        *,
        session: KpiDriveSession,
        event_query: EventQueryService,
        fact_writer: FactWriter,
        template: FactTemplate,
    ) -> None:
        self._session = session
        self._event_query = event_query
        self._fact_writer = fact_writer
        self._template = template

    def run_once(self, *, credentials: Credentials, query: EventQuery) -> SyncResult:
        """
        Ejecuta una corrida completa.

        Los errores de preparación (login, consulta) se propagan antes de
        escribir nada. Los errores de escritura terminan el lote y quedan
        en SyncResult.failure.

        Raises:
            AuthError: el login falló
            TransportError / DecodeError: la consulta de eventos falló
            ApplicationError: la consulta de eventos devolvió STATUS de fallo
        """
        result = SyncResult(started_at=DateTimeUtils.now_utc())

        self._session.authenticate(credentials.login, credentials.password)
        events = self._fetch_events(query)
        result.events_fetched = len(events)

        if not events:
            logger.info("No hay eventos para sincronizar")

        for index, event in enumerate(events):
            failure = self._sync_event(index, event, credentials.api_token, result)
            if failure is not None:
                result.failure = failure
                logger.error(
                    f"Lote detenido en el evento {index + 1}/{len(events)}; "
                    f"{result.not_attempted} evento(s) sin procesar"
                )
                break

        result.finished_at = DateTimeUtils.now_utc()
        logger.info(
            f"Sync completado. facts_guardados={len(result.saved)}, "
            f"ids={result.saved_fact_ids}, ok={result.ok}"
        )
        return result

    def close(self) -> None:
        self._session.close()

    def _fetch_events(self, query: EventQuery) -> List[Event]:
        envelope = self._event_query.fetch(query)
        if not envelope.is_ok:
            raise ApplicationError(
                f"Consulta de eventos falló: {envelope.first_error()}",
                status=envelope.status,
                errors=envelope.messages.error,
            )
        if envelope.data is None:
            return []
        return list(envelope.data.rows)

    def _sync_event(
        self, index: int, event: Event, api_token: str, result: SyncResult
    ) -> Optional[SyncFailure]:
        fact = transform_event(event, self._template)

        try:
            envelope = self._fact_writer.save(api_token, fact)
        except AppException as e:
            logger.error(f"Fact save failure, error = {e.message}")
            return SyncFailure(event_index=index, message=e.message, error_code=e.error_code)

        if not envelope.is_ok:
            message = envelope.first_error()
            logger.error(f"Fact save failure, error = {message}")
            return SyncFailure(event_index=index, message=message, error_code="APPLICATION_ERROR")

        fact_id = envelope.data.indicator_to_mo_fact_id if envelope.data is not None else None
        result.saved.append(SavedFact(event_index=index, fact_id=fact_id))
        logger.success(f"Fact saved, id = {fact_id}")
        return None


def build_from_settings(
    settings: Settings,
) -> tuple[EventsToFactsSync, Credentials, EventQuery]:
    """
    Constructor "oficial" del pipeline a partir de Settings.

    Raises:
        ConfigurationError: si falta configuración obligatoria
    """
    settings.validate_for_sync()

    session = KpiDriveSession(
        settings.base_url,
        timeout_s=settings.KPI_TIMEOUT_S,
        verify_auth_status=settings.KPI_AUTH_VERIFY_STATUS,
    )
    service = EventsToFactsSync(
        session=session,
        event_query=EventQueryService(session),
        fact_writer=FactWriter(session),
        template=settings.fact_template(),
    )
    credentials = Credentials(
        login=settings.KPI_LOGIN,
        password=settings.KPI_PASSWORD,
        api_token=settings.KPI_API_TOKEN,
    )
    query = EventQuery(
        event_type=settings.KPI_EVENT_TYPE,
        sort_field=settings.KPI_EVENT_SORT_FIELD,
        sort_direction=settings.KPI_EVENT_SORT_DIRECTION,
        limit=settings.KPI_EVENT_LIMIT,
    )
    return service, credentials, query
