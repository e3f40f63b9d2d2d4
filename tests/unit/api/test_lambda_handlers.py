"""End-to-end tests of the Lambda entry points against moto DynamoDB."""

from __future__ import annotations

import json

import boto3
import pytest
from moto import mock_aws

from asyncproxy.api.lambda_handlers import make_proxy_handler, make_worker_handler
from asyncproxy.bootstrap import AppContext
from asyncproxy.core.config import AppSettings, TimingConfig
from asyncproxy.dispatch.local_backend import CallableDownstream
from asyncproxy.persistence.dynamodb_backend import DynamoDBTaskStore
from tests.fakes import RecordingDispatcher

TABLE_NAME = "async-proxy-tasks-test"
REGION = "us-east-1"


@pytest.fixture
def store():
    with mock_aws():
        boto3.client("dynamodb", region_name=REGION).create_table(
            TableName=TABLE_NAME,
            KeySchema=[{"AttributeName": "RequestID", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "RequestID", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield DynamoDBTaskStore(table_name=TABLE_NAME, region=REGION)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def app_context(store, dispatcher):
    settings = AppSettings(
        stage_name="dev",
        timing=TimingConfig(poll_interval=0.05, early_failure_threshold=0.5, poll_budget=0.5),
    )
    downstream = CallableDownstream(lambda r: {"statusCode": 200, "headers": {"X-Path": r.path}, "body": "done"})
    return AppContext(settings=settings, store=store, dispatcher=dispatcher, downstream=downstream)


def _event(path: str = "/orders", query: dict | None = None) -> dict:
    return {
        "httpMethod": "POST",
        "path": path,
        "headers": {"Content-Type": "application/json"},
        "queryStringParameters": query,
        "body": '{"item": 1}',
        "isBase64Encoded": False,
    }


def test_redirect_then_resume_after_worker_runs(app_context, dispatcher):
    proxy = make_proxy_handler(app_context)
    worker = make_worker_handler(app_context)

    first = proxy(_event(), None)
    assert first["statusCode"] == 303
    location = first["headers"]["Location"]
    assert location.startswith("/dev/orders?requestID=")
    request_id = location.split("requestID=")[1]

    [worker_request] = dispatcher.requests
    worker_result = worker(worker_request.to_event(), None)
    assert worker_result["statusCode"] == 201

    second = proxy(_event(query={"requestID": request_id}), None)
    assert second["statusCode"] == 200
    assert second["body"] == "done"
    assert second["headers"] == {"X-Path": "/orders"}

    third = proxy(_event(query={"requestID": request_id}), None)
    assert third["statusCode"] == 404
    assert len(dispatcher.requests) == 1


def test_unknown_request_id_returns_404(app_context):
    response = make_proxy_handler(app_context)(_event(query={"requestID": "missing"}), None)
    assert response["statusCode"] == 404
    assert json.loads(response["body"]) == {"error": "RequestID is wrong."}


def test_malformed_event_returns_400(app_context):
    response = make_proxy_handler(app_context)({"path": 42, "headers": "nope"}, None)
    assert response["statusCode"] == 400


def test_worker_without_request_id_returns_400(app_context):
    response = make_worker_handler(app_context)(_event(), None)
    assert response["statusCode"] == 400
