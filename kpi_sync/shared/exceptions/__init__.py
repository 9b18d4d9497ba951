from kpi_sync.shared.exceptions.base import AppException
from kpi_sync.shared.exceptions.kpi import (
    ApplicationError,
    AuthError,
    ConfigurationError,
    DecodeError,
    TransportError,
)

__all__ = [
    "AppException",
    "ApplicationError",
    "AuthError",
    "ConfigurationError",
    "DecodeError",
    "TransportError",
]
