"""AWS Lambda bindings for worker dispatch and the downstream function."""

from __future__ import annotations

import json
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from asyncproxy.core.exceptions import DispatchError, DownstreamInvocationError
from asyncproxy.models.envelope import ProxyRequest, ProxyResponse

logger = logging.getLogger(__name__)


def _lambda_client(region: str, endpoint_url: str | None) -> Any:
    kwargs: dict = {"region_name": region}
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return boto3.client("lambda", **kwargs)


class LambdaDispatcher:
    """IDispatcher that starts the worker function with an ``Event`` invocation."""

    def __init__(self, function_name: str, region: str = "us-east-1",
                 endpoint_url: str | None = None, client: Any = None) -> None:
        self._function_name = function_name
        self._client = client if client is not None else _lambda_client(region, endpoint_url)

    def dispatch(self, request: ProxyRequest) -> None:
        try:
            resp = self._client.invoke(
                FunctionName=self._function_name,
                InvocationType="Event",
                Payload=json.dumps(request.to_event()).encode(),
            )
        except (ClientError, BotoCoreError) as exc:
            raise DispatchError(f"Could not start worker {self._function_name!r}: {exc}") from exc

        status = resp.get("StatusCode")
        if status != 202:
            raise DispatchError(f"Worker {self._function_name!r} rejected event (status {status})")
        logger.debug("Dispatched worker %s for task %s", self._function_name, request.worker_request_id)


class LambdaDownstream:
    """IDownstream that invokes the business function and waits for its payload."""

    def __init__(self, function_name: str, region: str = "us-east-1",
                 endpoint_url: str | None = None, client: Any = None) -> None:
        self._function_name = function_name
        self._client = client if client is not None else _lambda_client(region, endpoint_url)

    def invoke(self, request: ProxyRequest) -> str:
        try:
            resp = self._client.invoke(
                FunctionName=self._function_name,
                InvocationType="RequestResponse",
                Payload=json.dumps(request.to_event()).encode(),
            )
            payload = resp["Payload"].read().decode("utf-8")
        except (ClientError, BotoCoreError) as exc:
            raise DownstreamInvocationError(
                f"Could not invoke {self._function_name!r}: {exc}"
            ) from exc

        if resp.get("FunctionError"):
            # The function ran and raised; its error is the caller's result.
            try:
                message = json.loads(payload).get("errorMessage", payload)
            except (ValueError, AttributeError):
                message = payload
            logger.warning("Downstream %s raised: %s", self._function_name, message)
            return ProxyResponse.error(502, str(message)).to_json()

        return payload
