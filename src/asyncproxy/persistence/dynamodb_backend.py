"""DynamoDB backend implementing ITaskStore."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from asyncproxy.core.exceptions import (
    InvalidTransitionError,
    TaskNotFoundError,
    TaskStoreError,
)
from asyncproxy.models.task import TaskRecord, TaskStatus

logger = logging.getLogger(__name__)


def _decode_decimals(item: dict[str, Any]) -> dict[str, Any]:
    """Convert Decimal values in a DynamoDB item to int/float."""
    out: dict[str, Any] = {}
    for k, v in item.items():
        if isinstance(v, Decimal):
            out[k] = int(v) if v == int(v) else float(v)
        elif isinstance(v, dict):
            out[k] = _decode_decimals(v)
        else:
            out[k] = v
    return out


def _is_conditional_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class DynamoDBTaskStore:
    """Production ITaskStore backed by a DynamoDB table keyed on ``RequestID``."""

    def __init__(self, table_name: str, region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_name = table_name
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(table_name)

    def create(self, record: TaskRecord) -> None:
        try:
            self._table.put_item(
                Item=record.to_item(),
                ConditionExpression="attribute_not_exists(RequestID)",
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                raise TaskStoreError(f"Task {record.request_id} already exists") from exc
            raise TaskStoreError(f"DynamoDB put failed for {record.request_id!r}: {exc}") from exc
        except BotoCoreError as exc:
            raise TaskStoreError(f"DynamoDB put failed for {record.request_id!r}: {exc}") from exc

    def get(self, request_id: str) -> TaskRecord:
        try:
            resp = self._table.get_item(Key={"RequestID": request_id}, ConsistentRead=True)
        except (ClientError, BotoCoreError) as exc:
            raise TaskStoreError(f"DynamoDB get failed for {request_id!r}: {exc}") from exc

        item = resp.get("Item")
        if item is None:
            raise TaskNotFoundError(request_id)
        record = TaskRecord.from_item(_decode_decimals(item))
        # TTL deletion is lazy; an expired item may still be returned.
        if record.is_expired():
            raise TaskNotFoundError(request_id)
        return record

    def complete(self, request_id: str, result: str) -> None:
        try:
            self._table.update_item(
                Key={"RequestID": request_id},
                UpdateExpression="SET #s = :created, #r = :result",
                ConditionExpression="attribute_exists(RequestID) AND #s = :pending",
                ExpressionAttributeNames={"#s": "Status", "#r": "Result"},
                ExpressionAttributeValues={
                    ":created": TaskStatus.CREATED.value,
                    ":pending": TaskStatus.PENDING.value,
                    ":result": result,
                },
            )
        except ClientError as exc:
            if not _is_conditional_failure(exc):
                raise TaskStoreError(f"DynamoDB update failed for {request_id!r}: {exc}") from exc
            # Work out which half of the condition failed.
            current = self.get(request_id)
            raise InvalidTransitionError(request_id, current.status, TaskStatus.CREATED) from exc
        except BotoCoreError as exc:
            raise TaskStoreError(f"DynamoDB update failed for {request_id!r}: {exc}") from exc

    def delete(self, request_id: str) -> None:
        try:
            self._table.delete_item(Key={"RequestID": request_id})
        except (ClientError, BotoCoreError) as exc:
            raise TaskStoreError(f"DynamoDB delete failed for {request_id!r}: {exc}") from exc
        logger.debug("Deleted task %s", request_id)
