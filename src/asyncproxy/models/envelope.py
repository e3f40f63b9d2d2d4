"""API Gateway proxy request/response envelopes."""

from __future__ import annotations

import json
from typing import Any, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from asyncproxy.core.exceptions import TaskMarshalError

REQUEST_ID_PARAM = "requestID"
REQUEST_ID_HEADER = "RequestID"


class ProxyRequest(BaseModel):
    """Inbound request as delivered by an API Gateway proxy integration.

    Unknown keys are kept so the worker receives the event exactly as the
    proxy did.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    http_method: str = Field(default="GET", alias="httpMethod")
    path: str = "/"
    resource: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)
    query_string_parameters: dict[str, str] = Field(default_factory=dict, alias="queryStringParameters")
    path_parameters: Optional[dict[str, str]] = Field(default=None, alias="pathParameters")
    body: Optional[str] = None
    is_base64_encoded: bool = Field(default=False, alias="isBase64Encoded")
    request_context: Optional[dict[str, Any]] = Field(default=None, alias="requestContext")

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> ProxyRequest:
        # API Gateway sends null rather than {} for empty maps.
        cleaned = dict(event)
        for key in ("headers", "queryStringParameters"):
            if cleaned.get(key) is None:
                cleaned.pop(key, None)
        try:
            return cls.model_validate(cleaned)
        except ValidationError as exc:
            raise TaskMarshalError(f"Malformed proxy request: {exc}") from exc

    def to_event(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    @property
    def request_id(self) -> str:
        """Resumption id from the ``requestID`` query parameter, or ``""``."""
        return self.query_string_parameters.get(REQUEST_ID_PARAM, "")

    @property
    def worker_request_id(self) -> str:
        """Task id injected into the worker payload, or ``""``."""
        return self.headers.get(REQUEST_ID_HEADER, "")

    def with_request_id(self, request_id: str) -> ProxyRequest:
        headers = {**self.headers, REQUEST_ID_HEADER: request_id}
        return self.model_copy(update={"headers": headers})

    def resume_location(self, request_id: str, stage_name: str = "") -> str:
        prefix = f"/{stage_name.strip('/')}" if stage_name.strip("/") else ""
        return f"{prefix}{self.path}?{urlencode({REQUEST_ID_PARAM: request_id})}"


class ProxyResponse(BaseModel):
    """Outbound response in API Gateway proxy integration format."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status_code: int = Field(alias="statusCode")
    headers: Optional[dict[str, str]] = None
    multi_value_headers: Optional[dict[str, list[str]]] = Field(default=None, alias="multiValueHeaders")
    body: str = ""
    is_base64_encoded: bool = Field(default=False, alias="isBase64Encoded")

    @field_validator("body", mode="before")
    @classmethod
    def _null_body(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("headers", mode="before")
    @classmethod
    def _stringify_headers(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: str(v) for k, v in value.items() if v is not None}
        return value

    @field_validator("multi_value_headers", mode="before")
    @classmethod
    def _stringify_multi_value_headers(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: [str(item) for item in (v or [])] for k, v in value.items()}
        return value

    @classmethod
    def error(cls, status_code: int, message: str) -> ProxyResponse:
        return cls(
            status_code=status_code,
            headers={"Content-Type": "application/json"},
            body=json.dumps({"error": message}),
        )

    @classmethod
    def redirect(cls, location: str) -> ProxyResponse:
        return cls(status_code=303, headers={"Location": location})

    @classmethod
    def from_json(cls, raw: str | bytes) -> ProxyResponse:
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise TaskMarshalError(f"Stored result is not a proxy response: {exc}") from exc

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def to_event(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
