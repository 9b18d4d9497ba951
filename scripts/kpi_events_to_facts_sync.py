"""
CLI: KPI-Drive eventos -> facts (job acotado).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer).
  - Cada corrida: login, una consulta de eventos, un fact por evento,
    y se detiene en el primer error.

Variables de entorno requeridas:
  - KPI_LOGIN
  - KPI_PASSWORD
  - KPI_API_TOKEN
  (ver kpi_sync/core/config.py para el resto)

Ejecución:
  python scripts/kpi_events_to_facts_sync.py
  python scripts/kpi_events_to_facts_sync.py --limit 50 --event-type MATRIX_REQUEST

Códigos de salida:
  0 lote completo, 1 lote detenido por error, 2 configuración inválida,
  3 fallo de login o de la consulta de eventos
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin instalar el paquete.
_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

# Cargar variables desde .env si existe (antes de construir Settings).
load_dotenv(_REPO_ROOT / ".env", override=False)

from kpi_sync.application.use_cases.events_to_facts_sync import build_from_settings
from kpi_sync.core.bootstrap import shutdown, startup
from kpi_sync.core.config import Settings
from kpi_sync.core.config import settings as default_settings
from kpi_sync.shared.exceptions.base import AppException
from kpi_sync.shared.exceptions.kpi import ConfigurationError

EXIT_OK = 0
EXIT_BATCH_HALTED = 1
EXIT_CONFIG_ERROR = 2
EXIT_SETUP_FAILED = 3


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sincroniza eventos de KPI-Drive como facts.")
    parser.add_argument("--limit", type=int, default=None, help="Override de KPI_EVENT_LIMIT.")
    parser.add_argument("--event-type", default=None, help="Override de KPI_EVENT_TYPE.")
    parser.add_argument("--log-level", default=None, help="Override de LOG_LEVEL.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    args = _parse_args(argv)

    overrides = {}
    if args.limit is not None:
        overrides["KPI_EVENT_LIMIT"] = args.limit
    if args.event_type:
        overrides["KPI_EVENT_TYPE"] = args.event_type
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level.upper()

    settings = settings or default_settings
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        startup(settings)
        service, credentials, query = build_from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Configuración inválida: {e.message}")
        shutdown()
        return EXIT_CONFIG_ERROR

    try:
        logger.info("Iniciando KPI-Drive eventos -> facts sync...")
        result = service.run_once(credentials=credentials, query=query)
    except AppException as e:
        logger.error(f"Sync abortado antes de escribir facts [{e.error_code}]: {e.message}")
        return EXIT_SETUP_FAILED
    finally:
        service.close()
        shutdown()

    if not result.ok:
        logger.error(
            f"Sync detenido: {result.failure.message} | "
            f"facts guardados={len(result.saved)} ids={result.saved_fact_ids}"
        )
        return EXIT_BATCH_HALTED

    logger.info(f"Sync OK: facts guardados={len(result.saved)} ids={result.saved_fact_ids}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
