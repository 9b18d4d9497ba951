"""
Excepciones de integración con la API de KPI-Drive.

Taxonomía:
- ConfigurationError: falta configuración obligatoria.
- TransportError: fallo de conexión / lectura del body.
- DecodeError: el body no tiene la forma esperada (incluye timestamps inválidos).
- AuthError: el login falló.
- ApplicationError: la API respondió con STATUS distinto de "OK".
"""
from typing import Any, List, Optional

from kpi_sync.shared.exceptions.base import AppException


class ConfigurationError(AppException):
    """Excepción para configuración faltante o inválida."""
    
    def __init__(self, message: str, setting: Optional[str] = None):
        details = {"setting": setting} if setting else None
        super().__init__(
            message=message,
            error_code="CONFIG_ERROR",
            details=details
        )


class TransportError(AppException):
    """Excepción para errores de red o de lectura de la respuesta."""
    
    def __init__(self, message: str, method: str = "", path: str = ""):
        super().__init__(
            message=message,
            error_code="TRANSPORT_ERROR",
            details={"method": method, "path": path}
        )


class DecodeError(AppException):
    """Excepción cuando la respuesta no coincide con el modelo esperado."""
    
    def __init__(self, message: str, target: str = "", body_preview: str = ""):
        super().__init__(
            message=message,
            error_code="DECODE_ERROR",
            details={"target": target, "body_preview": body_preview}
        )


class AuthError(AppException):
    """Excepción cuando no se pudo establecer la sesión autenticada."""
    
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            message=message,
            error_code="AUTH_ERROR",
            details=details
        )


class ApplicationError(AppException):
    """Excepción cuando la API responde con un STATUS de fallo."""
    
    def __init__(self, message: str, status: Any = None, errors: Optional[List[str]] = None):
        super().__init__(
            message=message,
            error_code="APPLICATION_ERROR",
            details={"status": status, "errors": list(errors or [])}
        )
        self.status = status
        self.errors = list(errors or [])
