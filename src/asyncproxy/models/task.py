"""Task record model and its PENDING -> CREATED state machine."""

from __future__ import annotations

import time
import uuid
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from asyncproxy.core.exceptions import InvalidTransitionError, TaskMarshalError


class TaskStatus(StrEnum):
    PENDING = "PENDING"
    CREATED = "CREATED"


class TaskRecord(BaseModel):
    """One logical operation's completion state, as persisted in the task store.

    Attribute names on the wire are ``RequestID``, ``Status``, ``Result`` and
    ``ExpiresAt``; Python code uses the snake_case field names.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    request_id: str = Field(alias="RequestID", min_length=1)
    status: TaskStatus = Field(default=TaskStatus.PENDING, alias="Status")
    result: str = Field(default="", alias="Result")
    expires_at: Optional[int] = Field(default=None, alias="ExpiresAt")

    @model_validator(mode="after")
    def _pending_has_no_result(self) -> TaskRecord:
        if self.status == TaskStatus.PENDING and self.result:
            raise ValueError("a PENDING task cannot carry a result")
        return self

    @classmethod
    def pending(cls, ttl_seconds: int | None = None, now: float | None = None) -> TaskRecord:
        """Mint a new PENDING record with a fresh request id."""
        expires_at = None
        if ttl_seconds:
            expires_at = int((time.time() if now is None else now) + ttl_seconds)
        return cls(request_id=str(uuid.uuid4()), expires_at=expires_at)

    def complete(self, result: str) -> TaskRecord:
        """Return the CREATED version of this record."""
        if self.status != TaskStatus.PENDING:
            raise InvalidTransitionError(self.request_id, self.status, TaskStatus.CREATED)
        return self.model_copy(update={"status": TaskStatus.CREATED, "result": result})

    @property
    def is_created(self) -> bool:
        return self.status == TaskStatus.CREATED

    def is_expired(self, now: float | None = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (time.time() if now is None else now)

    def to_item(self) -> dict[str, Any]:
        """Serialize to the persisted attribute map."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> TaskRecord:
        """Parse a persisted attribute map, wrapping validation failures."""
        try:
            return cls.model_validate(item)
        except ValidationError as exc:
            raise TaskMarshalError(f"Malformed task record: {exc}") from exc

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, raw: str | bytes) -> TaskRecord:
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise TaskMarshalError(f"Malformed task record: {exc}") from exc
