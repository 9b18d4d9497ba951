"""
Configuracion central del job.
Gestiona variables de entorno y el template fijo de los facts.
"""
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings

from kpi_sync.domain.entities.fact import FactTemplate
from kpi_sync.shared.constants.kpi_constants import (
    DEFAULT_EVENT_LIMIT,
    DEFAULT_EVENT_SORT_DIRECTION,
    DEFAULT_EVENT_SORT_FIELD,
    DEFAULT_EVENT_TYPE,
)
from kpi_sync.shared.exceptions.kpi import ConfigurationError


class Settings(BaseSettings):
    """
    Clase de configuracion del job.
    Lee variables de entorno (y .env) y proporciona valores por defecto.
    
    Obligatorias para ejecutar el sync:
    - KPI_LOGIN / KPI_PASSWORD: credenciales de /_api/auth/login
    - KPI_API_TOKEN: bearer token para escribir facts
    """
    
    # API de KPI-Drive
    KPI_BASE_URL: str = Field(default="https://development.kpi-drive.ru")
    KPI_LOGIN: str = Field(default="")
    KPI_PASSWORD: str = Field(default="")
    KPI_API_TOKEN: str = Field(default="")
    KPI_TIMEOUT_S: float = Field(default=30.0)
    # Si es True, el login exige STATUS == "OK" en la respuesta
    KPI_AUTH_VERIFY_STATUS: bool = Field(default=True)
    
    # Consulta de eventos
    KPI_EVENT_TYPE: str = Field(default=DEFAULT_EVENT_TYPE)
    KPI_EVENT_SORT_FIELD: str = Field(default=DEFAULT_EVENT_SORT_FIELD)
    KPI_EVENT_SORT_DIRECTION: str = Field(default=DEFAULT_EVENT_SORT_DIRECTION)
    KPI_EVENT_LIMIT: int = Field(default=DEFAULT_EVENT_LIMIT)
    
    # Template de facts (campos que no se derivan del evento)
    KPI_FACT_PERIOD_KEY: str = Field(default="month")
    KPI_FACT_INDICATOR_TO_MO_ID: str = Field(default="315914")
    KPI_FACT_AUTH_USER_ID: str = Field(default="40")
    KPI_FACT_VALUE: str = Field(default="1")
    KPI_FACT_IS_PLAN: str = Field(default="")
    KPI_FACT_COMMENT: str = Field(default="ArangoDB")
    
    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/kpi_sync.log")
    AUDIT_LOG_DIR: str = Field(default="logs/api_logs")
    
    @computed_field
    @property
    def base_url(self) -> str:
        """URL base sin '/' final."""
        return self.KPI_BASE_URL.rstrip("/")
    
    def fact_template(self) -> FactTemplate:
        """Construye el FactTemplate a partir de las variables KPI_FACT_*."""
        return FactTemplate(
            period_key=self.KPI_FACT_PERIOD_KEY,
            indicator_to_mo_id=self.KPI_FACT_INDICATOR_TO_MO_ID,
            auth_user_id=self.KPI_FACT_AUTH_USER_ID,
            value=self.KPI_FACT_VALUE,
            is_plan=self.KPI_FACT_IS_PLAN,
            comment=self.KPI_FACT_COMMENT,
        )
    
    def validate_for_sync(self) -> None:
        """
        Verifica que la configuracion critica este presente.
        
        Raises:
            ConfigurationError: si falta alguna variable obligatoria o es inválida
        """
        for name in ("KPI_BASE_URL", "KPI_LOGIN", "KPI_PASSWORD", "KPI_API_TOKEN"):
            if not getattr(self, name):
                raise ConfigurationError(
                    f"Falta variable de entorno obligatoria: {name}", setting=name
                )
        if not self.KPI_BASE_URL.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"KPI_BASE_URL debe empezar con http:// o https://. Valor actual: {self.KPI_BASE_URL}",
                setting="KPI_BASE_URL",
            )
        if self.KPI_EVENT_LIMIT <= 0:
            raise ConfigurationError(
                "KPI_EVENT_LIMIT debe ser mayor que 0", setting="KPI_EVENT_LIMIT"
            )
        if self.KPI_TIMEOUT_S <= 0:
            raise ConfigurationError(
                "KPI_TIMEOUT_S debe ser mayor que 0", setting="KPI_TIMEOUT_S"
            )
    
    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


# Instancia global de configuración
settings = Settings()
