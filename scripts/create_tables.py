"""Create the DynamoDB task table and enable TTL on ExpiresAt.

Usage:
    python scripts/create_tables.py --table-name async-proxy-tasks-dev \
        --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3

TTL_ATTRIBUTE = "ExpiresAt"


def create_task_table(ddb: Any, table_name: str) -> bool:
    """Create the task table keyed on RequestID. Skips if it already exists.

    Returns:
        True if the table was created, False if it was already there.
    """
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])
    if table_name in existing:
        print(f"  Table {table_name} already exists, skipping")
        return False

    client.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": "RequestID", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "RequestID", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter("table_exists").wait(TableName=table_name)
    print(f"  Created table {table_name}")
    return True


def enable_ttl(ddb: Any, table_name: str) -> None:
    """Turn on DynamoDB TTL so orphaned tasks are reclaimed."""
    client = ddb.meta.client
    current = client.describe_time_to_live(TableName=table_name)["TimeToLiveDescription"]
    if current.get("TimeToLiveStatus") in ("ENABLED", "ENABLING"):
        print(f"  TTL already enabled on {table_name}")
        return
    client.update_time_to_live(
        TableName=table_name,
        TimeToLiveSpecification={"Enabled": True, "AttributeName": TTL_ATTRIBUTE},
    )
    print(f"  Enabled TTL on {table_name}.{TTL_ATTRIBUTE}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the async proxy task table")
    parser.add_argument("--table-name", default="async-proxy-tasks")
    parser.add_argument("--region", default="us-east-1")
    parser.add_argument("--endpoint-url", default=None, help="LocalStack endpoint")
    args = parser.parse_args()

    kwargs: dict = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url
    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating task table...")
    create_task_table(ddb, args.table_name)
    enable_ttl(ddb, args.table_name)
    print("Done.")


if __name__ == "__main__":
    main()
