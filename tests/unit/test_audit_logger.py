"""
Tests unitarios para AuditLogger: nunca se registran credenciales.
"""
from loguru import logger

from kpi_sync.shared.utils.audit_logger import AuditLogger


def test_redact_sensitive_keys():
    redacted = AuditLogger.redact([("login", "admin"), ("password", "secret"), ("Authorization", "Bearer x")])
    assert redacted == {"login": "admin", "password": "***", "Authorization": "***"}


def test_request_log_hides_password_and_token():
    captured = []
    sink_id = logger.add(lambda message: captured.append(str(message)), level="DEBUG")
    try:
        AuditLogger.log_request(
            "POST",
            "/_api/auth/login",
            b"login=admin&password=secret",
            {"Content-Type": "application/x-www-form-urlencoded", "Authorization": "Bearer token-123"},
        )
    finally:
        logger.remove(sink_id)
    
    text = "".join(captured)
    assert "admin" in text
    assert "secret" not in text
    assert "token-123" not in text


def test_initialize_with_empty_dir_is_noop():
    AuditLogger.initialize("")
    assert AuditLogger._sink_id is None


def test_initialize_writes_api_context_to_file(tmp_path):
    try:
        AuditLogger.initialize(str(tmp_path))
        AuditLogger.log_response("GET", "/_api/events", 200, b'{"STATUS":"OK"}')
    finally:
        AuditLogger.shutdown()
    
    files = list(tmp_path.glob("api_*.log"))
    assert len(files) == 1
    assert "RESPONSE GET /_api/events | http=200" in files[0].read_text(encoding="utf-8")
