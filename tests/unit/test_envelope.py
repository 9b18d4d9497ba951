"""
Tests unitarios para la decodificación del envelope genérico.
"""
import json
from datetime import datetime, timezone

import pytest

from kpi_sync.domain.entities.envelope import FactSaved, Paginated, decode_envelope
from kpi_sync.domain.entities.event import Event
from kpi_sync.shared.exceptions.kpi import DecodeError


class TestDecodeEventsEnvelope:
    """Tests para ResponseEnvelope[Paginated[Event]]."""
    
    def test_decodes_rows(self, ok_envelope, make_event_row, make_events_page):
        raw = ok_envelope(make_events_page([make_event_row(), make_event_row(user_id=8)]))
        
        envelope = decode_envelope(raw, Paginated[Event])
        
        assert envelope.is_ok
        assert envelope.data.rows_count == 2
        first = envelope.data.rows[0]
        assert first.author.user_id == 7
        assert first.author.user_name == "Ivan"
        assert first.time == datetime(2024, 2, 1, 8, 15, 0, 123456, tzinfo=timezone.utc)
        assert first.params.indicator_to_mo_id == 42
        assert first.params.period.start == "2024-01-01T00:00:00Z"
        assert first.params.period.type_key == "month"
    
    def test_zero_rows_is_empty_sequence(self, ok_envelope, make_events_page):
        envelope = decode_envelope(ok_envelope(make_events_page([])), Paginated[Event])
        assert envelope.is_ok
        assert envelope.data.rows == []
    
    def test_null_rows_is_empty_sequence(self, ok_envelope):
        raw = ok_envelope({"page": 1, "pages_count": 0, "rows_count": 0, "rows": None})
        envelope = decode_envelope(raw, Paginated[Event])
        assert envelope.data.rows == []
    
    def test_malformed_time_fails_whole_batch(self, ok_envelope, make_event_row, make_events_page):
        rows = [make_event_row(), make_event_row(time="2024-02-01 08:15:00")]
        with pytest.raises(DecodeError) as exc_info:
            decode_envelope(ok_envelope(make_events_page(rows)), Paginated[Event])
        assert exc_info.value.error_code == "DECODE_ERROR"
        assert "time" in exc_info.value.message
    
    def test_missing_time_fails(self, ok_envelope, make_event_row, make_events_page):
        row = make_event_row()
        del row["time"]
        with pytest.raises(DecodeError):
            decode_envelope(ok_envelope(make_events_page([row])), Paginated[Event])
    
    def test_missing_scalar_fields_default_to_zero_values(self, ok_envelope, make_events_page):
        raw = ok_envelope(make_events_page([{"time": "2024-02-01T08:15:00Z"}]))
        event = decode_envelope(raw, Paginated[Event]).data.rows[0]
        assert event.author.user_id == 0
        assert event.author.user_name == ""
        assert event.params.period.start == ""
    
    def test_invalid_json_raises_decode_error(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_envelope(b"<html>502 Bad Gateway</html>", Paginated[Event])
        assert exc_info.value.details["body_preview"].startswith("<html>")
    
    def test_empty_body_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_envelope(b"", FactSaved)


class TestFactSavedEnvelope:
    """Tests para ResponseEnvelope[FactSaved]."""
    
    def test_decodes_created_id(self, ok_envelope):
        envelope = decode_envelope(ok_envelope({"indicator_to_mo_fact_id": 991}), FactSaved)
        assert envelope.is_ok
        assert envelope.data.indicator_to_mo_fact_id == 991
    
    def test_error_with_empty_data_list(self, ok_envelope):
        raw = ok_envelope([], status="ERROR", errors=["quota exceeded"])
        envelope = decode_envelope(raw, FactSaved)
        assert not envelope.is_ok
        assert envelope.data is None
        assert envelope.first_error() == "quota exceeded"
    
    def test_first_error_with_empty_list_is_defined(self, ok_envelope):
        envelope = decode_envelope(ok_envelope(None, status="ERROR"), FactSaved)
        assert envelope.first_error() == "Error de aplicación desconocido (STATUS='ERROR')"
    
    def test_missing_messages_and_status(self):
        envelope = decode_envelope(json.dumps({"DATA": None}).encode(), FactSaved)
        assert envelope.status == ""
        assert not envelope.is_ok
        assert envelope.messages.error == []


def test_null_messages_and_status_use_defaults():
    raw = json.dumps({"MESSAGES": None, "DATA": None, "STATUS": None}).encode()
    envelope = decode_envelope(raw, FactSaved)
    assert envelope.messages.error == []
    assert envelope.status == ""


@pytest.mark.parametrize(
    "row",
    [
        {"time": "2024-02-01T08:15:00Z", "author": {"user_id": "7"}},
        {"time": "2024-02-01T08:15:00Z", "params": {"indicator_to_mo_id": "42"}},
        {"time": "2024-02-01T08:15:00Z", "author": {"user_name": 7}},
        {"time": "2024-02-01T08:15:00Z", "params": {"period": {"type_id": True}}},
    ],
)
def test_wrong_scalar_types_raise_decode_error(ok_envelope, make_events_page, row):
    with pytest.raises(DecodeError):
        decode_envelope(ok_envelope(make_events_page([row])), Paginated[Event])


def test_string_fact_id_raises_decode_error(ok_envelope):
    with pytest.raises(DecodeError):
        decode_envelope(ok_envelope({"indicator_to_mo_fact_id": "991"}), FactSaved)
