"""
Sesión HTTP contra KPI-Drive.

- Un `requests.Session` por instancia: el cookie jar de la sesión guarda la
  cookie de login para todas las llamadas siguientes.
- Dos clientes nunca comparten estado de autenticación.
- Cada llamada lleva timeout (la API no define uno propio).
- Sin reintentos: cualquier fallo de red es fatal para la corrida.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import requests
from loguru import logger

from kpi_sync.domain.entities.envelope import decode_envelope
from kpi_sync.shared.constants.kpi_constants import FORM_CONTENT_TYPE, ApiPath
from kpi_sync.shared.exceptions.kpi import AuthError, DecodeError, TransportError
from kpi_sync.shared.utils.audit_logger import AuditLogger


class KpiDriveSession:
    """
    Cliente HTTP de bajo nivel. Devuelve bytes crudos; decodificar es
    responsabilidad de quien llama.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout_s: float = 30.0,
        verify_auth_status: bool = True,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout_s = timeout_s
        self._verify_auth_status = verify_auth_status

    @property
    def base_url(self) -> str:
        return self._base_url

    def authenticate(self, login: str, password: str) -> None:
        """
        POST form-urlencoded a /_api/auth/login.

        Si todo va bien, la cookie de sesión queda en el cookie jar.
        Con verify_auth_status=True además se exige STATUS == "OK".

        Raises:
            AuthError: fallo de red, body ilegible o login rechazado
        """
        body = urlencode({"login": login, "password": password}).encode("ascii")
        try:
            raw = self.request(
                "POST",
                ApiPath.LOGIN.value,
                body=body,
                headers={"Content-Type": FORM_CONTENT_TYPE},
            )
        except TransportError as e:
            raise AuthError(f"Login falló: {e.message}", details=e.details) from e

        if not self._verify_auth_status:
            logger.info("Login completado (sin verificar STATUS)")
            return

        try:
            envelope = decode_envelope(raw, Any)
        except DecodeError as e:
            raise AuthError(
                f"Respuesta de login ilegible: {e.message}", details=e.details
            ) from e

        if not envelope.is_ok:
            raise AuthError(
                f"Login rechazado: {envelope.first_error()}",
                details={"status": envelope.status, "errors": envelope.messages.error},
            )
        logger.info(f"Login OK como '{login}'")

    def request(
        self,
        method: str,
        path: str,
        *,
        body: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> bytes:
        """
        Ejecuta una llamada relativa a base_url y devuelve el body crudo.

        No interpreta el HTTP status: la API informa errores en el envelope.

        Raises:
            TransportError: error de conexión, timeout o body ilegible
        """
        url = f"{self._base_url}{path}"
        request_headers = dict(headers or {})
        AuditLogger.log_request(method, path, body, request_headers)

        try:
            resp = self._session.request(
                method=method,
                url=url,
                data=body,
                headers=request_headers,
                timeout=self._timeout_s,
            )
            raw = resp.content
        except requests.RequestException as e:
            raise TransportError(
                f"{method} {path} falló: {e}", method=method, path=path
            ) from e

        AuditLogger.log_response(method, path, resp.status_code, raw)
        if resp.status_code >= 400:
            logger.warning(f"{method} {path} respondió HTTP {resp.status_code}")
        return raw

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "KpiDriveSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
