"""
Constantes del protocolo de KPI-Drive.
Define rutas, marcadores de estado, filtros de eventos y el tag de enriquecimiento.
"""
from enum import Enum


class ApiPath(str, Enum):
    """Rutas relativas de la API usadas por el job."""
    LOGIN = "/_api/auth/login"
    EVENTS = "/_api/events"
    SAVE_FACT = "/_api/facts/save_fact"


# STATUS que la API devuelve cuando la operación fue exitosa
STATUS_OK = "OK"

# Mensaje cuando la API falla sin indicar motivo en MESSAGES.error
UNKNOWN_APPLICATION_ERROR = "Error de aplicación desconocido (STATUS={status!r})"

# Filtro de eventos por defecto
DEFAULT_EVENT_TYPE = "MATRIX_REQUEST"
EVENT_FILTER_KEY = "type"
EVENT_FILTER_SIGN = "LIKE"
DEFAULT_EVENT_SORT_FIELD = "time"
DEFAULT_EVENT_SORT_DIRECTION = "DESC"
DEFAULT_EVENT_LIMIT = 10

# Tag de enriquecimiento: el usuario que generó el evento ("Клиент" = cliente)
CLIENT_TAG_NAME = "Клиент"
CLIENT_TAG_KEY = "client"
CLIENT_TAG_VALUES_SOURCE = 0

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
