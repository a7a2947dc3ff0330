"""Unit tests for the form domain entities."""

import pytest

from formhistory.domain.entities import FormRecord, FormVersion, parse_version_number
from formhistory.domain.exceptions import InvalidVersionError


@pytest.mark.parametrize("raw, expected", [(1, 1), ("7", 7), (" 12 ", 12)])
def test_parse_version_number_accepts_positive_integers(raw, expected):
    assert parse_version_number(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "  ", 0, -2, "x1", "2.0", True, "²", "①", "٣"])
def test_parse_version_number_rejects_invalid_input(raw):
    with pytest.raises(InvalidVersionError) as exc_info:
        parse_version_number(raw, "v2")
    assert exc_info.value.field == "v2"


def test_replace_payload_advances_version_and_copies():
    record = FormRecord(patient_form_data={"q1": 0})
    payload = {"section": {"q1": 1}}

    record.replace_payload(payload)
    payload["section"]["q1"] = 5

    assert record.current_version == 2
    assert record.patient_form_data == {"section": {"q1": 1}}


def test_completion_time_ignores_bad_timestamps():
    record = FormRecord(patient_form_data={})
    record.replace_payload({"beginFill": "not a date", "completedAt": "2024-01-01T00:00:00Z"})
    assert record.completion_time_seconds is None


def test_fill_status_defaults_to_draft():
    assert FormRecord().fill_status == "draft"
    assert FormRecord(patient_form_data={"fillStatus": "completed"}).fill_status == "completed"


def test_soft_delete_and_undelete():
    record = FormRecord(patient_form_data={"q1": 0})

    record.soft_delete("user-1", "duplicate")
    assert record.is_deleted
    assert record.current_version == 1

    record.undelete()
    assert not record.is_deleted
    assert record.deletion_reason is None


def test_live_head_marker():
    snapshot = FormVersion(form_id="f", version=1, raw_data={}, changed_by="current-record")
    assert snapshot.is_live_head
    assert not FormVersion(form_id="f", version=1, raw_data={}, changed_by="u").is_live_head
