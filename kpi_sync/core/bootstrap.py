"""
Inicio y cierre del job.
Valida la configuracion y configura los sinks de loguru.
"""
import sys

from loguru import logger

from kpi_sync import __version__
from kpi_sync.core.config import Settings
from kpi_sync.shared.utils.audit_logger import AuditLogger


def configure_logging(settings: Settings) -> None:
    """
    Reemplaza el sink por defecto de loguru por stderr + archivo rotativo.
    
    Args:
        settings: Configuracion del job
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
        filter=lambda record: record["extra"].get("context") != "api",
    )
    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            rotation="10 MB",
            retention="10 days",
            level=settings.LOG_LEVEL,
        )
    AuditLogger.initialize(settings.AUDIT_LOG_DIR)


def startup(settings: Settings) -> None:
    """
    Valida la configuracion critica y prepara el logging.
    
    Raises:
        ConfigurationError: si falta configuracion obligatoria
    """
    configure_logging(settings)
    logger.info(f"Iniciando kpi_sync v{__version__}")
    logger.info(f"API: {settings.base_url}")
    settings.validate_for_sync()


def shutdown() -> None:
    """Libera los sinks de archivo."""
    AuditLogger.shutdown()
    logger.info("kpi_sync finalizado")
