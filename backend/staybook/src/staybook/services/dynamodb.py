"""Thin DynamoDB access layer shared by the engine services.

Table names are `{prefix}-{table}`, the prefix coming from
DYNAMODB_TABLE_PREFIX or `staybook-{ENVIRONMENT}`. Reads that can span
several pages are followed to the end. Conditional-check failures are
turned into return values; every other botocore failure propagates and is
classified by the services as UPSTREAM_ERRORS.
"""

import os
from collections.abc import Callable, Iterator
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from boto3.dynamodb.types import TypeSerializer
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

_dynamodb_service_instance: "DynamoDBService | None" = None

# Store failures: timeouts, throttling, outages
UPSTREAM_ERRORS = (BotoCoreError, ClientError)

BATCH_GET_LIMIT = 100

SEQUENCES_TABLE = "sequences"

_serializer = TypeSerializer()


def get_dynamodb_service(environment: str | None = None) -> "DynamoDBService":
    """Return the process-wide DynamoDBService, creating it on first use."""
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService(environment)
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Drop the cached service so the next call builds fresh clients."""
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


def _client_config() -> Config:
    # One attempt only: a failed call surfaces at once as UPSTREAM_UNAVAILABLE
    timeout = float(os.getenv("STAYBOOK_STORE_TIMEOUT_SECONDS", "5"))
    return Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def serialize_item(item: dict[str, Any]) -> dict[str, Any]:
    """Encode a plain dict as low-level attribute values, skipping None.

    TransactWriteItems is only offered by the low-level client, so
    transaction payloads are built with this.
    """
    return {name: _serializer.serialize(v) for name, v in item.items() if v is not None}


def _pages(call: Callable[..., dict[str, Any]], params: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield items from a Query or Scan until LastEvaluatedKey runs out."""
    while True:
        page = call(**params)
        yield from page.get("Items", [])
        cursor = page.get("LastEvaluatedKey")
        if not cursor:
            return
        params = {**params, "ExclusiveStartKey": cursor}


class DynamoDBService:
    """Table operations used by the catalog, availability and booking services."""

    def __init__(self, environment: str | None = None) -> None:
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        self.name_prefix = os.getenv("DYNAMODB_TABLE_PREFIX", f"staybook-{self.environment}")
        config = _client_config()
        self._dynamodb = boto3.resource("dynamodb", config=config)
        self._client = boto3.client("dynamodb", config=config)

    def table_name(self, table: str) -> str:
        return f"{self.name_prefix}-{table}"

    def _get_table(self, table: str) -> Any:
        return self._dynamodb.Table(self.table_name(table))

    # Single items

    def get_item(
        self,
        table: str,
        key: dict[str, Any],
        consistent_read: bool = False,
    ) -> dict[str, Any] | None:
        response = self._get_table(table).get_item(Key=key, ConsistentRead=consistent_read)
        item: dict[str, Any] | None = response.get("Item")
        return item

    def put_item(self, table: str, item: dict[str, Any]) -> None:
        """Unconditionally write an item (catalog seeding)."""
        self._get_table(table).put_item(Item=item)

    def delete_item(
        self,
        table: str,
        key: dict[str, Any],
        condition_expression: Any | None = None,
    ) -> dict[str, Any] | None:
        """Delete an item and return what was removed.

        Args:
            table: Table name without prefix
            key: Primary key of the item
            condition_expression: boto3 condition the stored item must satisfy

        Returns:
            The removed item; None when the item was absent or the condition
            did not hold
        """
        params: dict[str, Any] = {"Key": key, "ReturnValues": "ALL_OLD"}
        if condition_expression is not None:
            params["ConditionExpression"] = condition_expression
        try:
            response = self._get_table(table).delete_item(**params)
        except ClientError as e:
            if _error_code(e) == "ConditionalCheckFailedException":
                return None
            raise
        removed: dict[str, Any] | None = response.get("Attributes")
        return removed

    def next_sequence(self, name: str) -> int:
        """Allocate the next value of a named counter; the first value is 1."""
        response = self._get_table(SEQUENCES_TABLE).update_item(
            Key={"name": name},
            UpdateExpression="ADD #v :one",
            ExpressionAttributeNames={"#v": "value"},
            ExpressionAttributeValues={":one": 1},
            ReturnValues="UPDATED_NEW",
        )
        return int(response["Attributes"]["value"])

    # Multi-item reads

    def query(
        self,
        table: str,
        key_condition: Any,
        index_name: str | None = None,
        filter_expression: Any | None = None,
        consistent_read: bool = False,
    ) -> list[dict[str, Any]]:
        """Every item matching a key condition, in sort-key order.

        `consistent_read` is only valid on the base table, not on a GSI.
        """
        params: dict[str, Any] = {"KeyConditionExpression": key_condition}
        if index_name:
            params["IndexName"] = index_name
        if filter_expression is not None:
            params["FilterExpression"] = filter_expression
        if consistent_read:
            params["ConsistentRead"] = True
        return list(_pages(self._get_table(table).query, params))

    def query_by_gsi(
        self,
        table: str,
        index_name: str,
        partition_key_name: str,
        partition_key_value: str,
    ) -> list[dict[str, Any]]:
        return self.query(
            table,
            Key(partition_key_name).eq(partition_key_value),
            index_name=index_name,
        )

    def scan(self, table: str, filter_expression: Any | None = None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if filter_expression is not None:
            params["FilterExpression"] = filter_expression
        return list(_pages(self._get_table(table).scan, params))

    def batch_get(self, table: str, keys: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Fetch items by key, BATCH_GET_LIMIT keys per request.

        Unprocessed keys are re-requested until DynamoDB has returned them
        all. Missing items are simply absent from the result, whose order is
        unspecified.
        """
        full_name = self.table_name(table)
        found: list[dict[str, Any]] = []
        for offset in range(0, len(keys), BATCH_GET_LIMIT):
            pending: dict[str, Any] = {full_name: {"Keys": keys[offset : offset + BATCH_GET_LIMIT]}}
            while pending:
                response = self._dynamodb.batch_get_item(RequestItems=pending)
                found.extend(response.get("Responses", {}).get(full_name, []))
                pending = response.get("UnprocessedKeys") or {}
        return found

    # Transactions

    def transact_write(self, items: list[dict[str, Any]]) -> bool:
        """Commit low-level TransactWriteItems entries all-or-nothing.

        Returns:
            False if DynamoDB cancelled the transaction (a condition failed
            or a concurrent transaction touched the same items)
        """
        try:
            self._client.transact_write_items(TransactItems=items)  # type: ignore[arg-type]
        except ClientError as e:
            if _error_code(e) == "TransactionCanceledException":
                return False
            raise
        return True
