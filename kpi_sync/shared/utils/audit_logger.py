"""
AuditLogger - registro de las llamadas a la API de KPI-Drive.

Escribe un archivo por dia en AUDIT_LOG_DIR con cada request (metodo, ruta,
resumen del body) y cada response (HTTP status, tamaño, STATUS del envelope).
Las credenciales y el bearer token nunca se escriben.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple
from urllib.parse import parse_qsl

from loguru import logger


class AuditLogger:
    """
    Gestor del log de auditoria de la API.
    
    Uso:
        AuditLogger.initialize("logs/api_logs")
        AuditLogger.log_request("POST", "/_api/auth/login", body, headers)
        AuditLogger.log_response("POST", "/_api/auth/login", 200, raw)
    """
    
    FILE_TIMESTAMP_FORMAT = "%Y-%m-%d"
    REDACTED = "***"
    SENSITIVE_KEYS = frozenset({"password", "authorization", "token"})
    PREVIEW_CHARS = 500
    
    _api_logger = logger.bind(context="api")
    _sink_id: Optional[int] = None
    
    @classmethod
    def initialize(cls, log_dir: str) -> None:
        """
        Agrega el sink de archivo para el contexto "api".
        Si log_dir es vacio no se registra nada en disco.
        """
        if cls._sink_id is not None or not log_dir:
            return
        
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        today = datetime.now().strftime(cls.FILE_TIMESTAMP_FORMAT)
        
        cls._sink_id = logger.add(
            str(directory / f"api_{today}.log"),
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}",
            filter=lambda record: record["extra"].get("context") == "api",
            rotation="1 day",
            retention="30 days",
            level="DEBUG",
        )
        logger.info(f"AuditLogger inicializado en {directory}")
    
    @classmethod
    def shutdown(cls) -> None:
        """Quita el sink de archivo (usado al terminar el job y en tests)."""
        if cls._sink_id is not None:
            logger.remove(cls._sink_id)
            cls._sink_id = None
    
    @classmethod
    def redact(cls, pairs: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
        """Devuelve un dict con los valores sensibles reemplazados."""
        return {
            key: cls.REDACTED if key.lower() in cls.SENSITIVE_KEYS else value
            for key, value in pairs
        }
    
    @classmethod
    def log_request(
        cls,
        method: str,
        path: str,
        body: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """Registra una request saliente."""
        safe_headers = cls.redact((headers or {}).items())
        cls._api_logger.debug(
            f"REQUEST {method} {path} | headers={json.dumps(safe_headers, ensure_ascii=False)} "
            f"| body={cls._summarize_body(body, safe_headers.get('Content-Type', ''))}"
        )
    
    @classmethod
    def log_response(cls, method: str, path: str, status_code: int, raw: bytes) -> None:
        """Registra la respuesta recibida."""
        preview = raw[: cls.PREVIEW_CHARS].decode("utf-8", errors="replace")
        cls._api_logger.debug(
            f"RESPONSE {method} {path} | http={status_code} | bytes={len(raw)} | body={preview}"
        )
    
    @classmethod
    def _summarize_body(cls, body: Optional[bytes], content_type: str) -> str:
        if not body:
            return "<vacio>"
        text = body.decode("utf-8", errors="replace")
        if "x-www-form-urlencoded" in content_type:
            fields = cls.redact(parse_qsl(text, keep_blank_values=True))
            return json.dumps(fields, ensure_ascii=False)
        return text[: cls.PREVIEW_CHARS]
