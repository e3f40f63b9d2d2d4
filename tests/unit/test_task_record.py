"""Tests for the TaskRecord model and its state machine."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from asyncproxy.core.exceptions import InvalidTransitionError, TaskMarshalError
from asyncproxy.models.task import TaskRecord, TaskStatus


def test_pending_mints_unique_ids():
    ids = {TaskRecord.pending().request_id for _ in range(50)}
    assert len(ids) == 50


def test_pending_record_is_empty():
    record = TaskRecord.pending()
    assert record.status == TaskStatus.PENDING
    assert record.result == ""
    assert not record.is_created


def test_pending_sets_expiry_from_ttl():
    record = TaskRecord.pending(ttl_seconds=60, now=1000.0)
    assert record.expires_at == 1060
    assert not record.is_expired(now=1059)
    assert record.is_expired(now=1060)


def test_no_ttl_never_expires():
    assert not TaskRecord.pending().is_expired(now=10**12)


def test_complete_moves_to_created():
    record = TaskRecord.pending()
    done = record.complete('{"statusCode": 200}')
    assert done.status == TaskStatus.CREATED
    assert done.result == '{"statusCode": 200}'
    assert done.request_id == record.request_id
    # The original is frozen and unchanged.
    assert record.status == TaskStatus.PENDING


def test_complete_twice_is_rejected():
    done = TaskRecord.pending().complete("r1")
    with pytest.raises(InvalidTransitionError):
        done.complete("r2")


def test_pending_with_result_is_invalid():
    with pytest.raises(ValidationError):
        TaskRecord(request_id="abc", status=TaskStatus.PENDING, result="early")


def test_unknown_status_is_invalid():
    with pytest.raises(ValidationError):
        TaskRecord(request_id="abc", status="FAILED")


def test_item_uses_persisted_attribute_names():
    record = TaskRecord(request_id="abc", status=TaskStatus.CREATED, result="R", expires_at=5)
    assert record.to_item() == {"RequestID": "abc", "Status": "CREATED", "Result": "R", "ExpiresAt": 5}


def test_item_omits_missing_expiry():
    assert "ExpiresAt" not in TaskRecord(request_id="abc").to_item()


def test_from_item_round_trip():
    item = {"RequestID": "abc", "Status": "CREATED", "Result": '{"body": "ok"}'}
    assert TaskRecord.from_item(item).to_item() == item


def test_from_item_wraps_validation_errors():
    with pytest.raises(TaskMarshalError):
        TaskRecord.from_item({"Status": "PENDING"})


def test_from_json_wraps_decode_errors():
    with pytest.raises(TaskMarshalError):
        TaskRecord.from_json("not json")
