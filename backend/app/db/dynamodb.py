"""DynamoDB connection and table management for the shared cache."""

import json
import time
from typing import Any

import aioboto3
from botocore.config import Config

from app.config import Settings


class DynamoDBClient:
    """Async DynamoDB client for cache entries.

    Each entry is one item keyed by ``pk`` (``ENTRY#<key>``, ``TAG#<tag>`` or
    ``PAGE#<path>``) with a constant sort key. Expiry uses DynamoDB TTL on the
    ``ttl`` attribute, and reads re-check it since TTL deletion is lazy.
    """

    SORT_KEY = "META"

    def __init__(self, settings: Settings):
        self.settings = settings
        self.table_name = settings.cache_table_name
        self.session = aioboto3.Session(
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
            region_name=settings.aws_region,
        )
        # No retries in the request path
        self.config = Config(retries={"max_attempts": 1, "mode": "standard"})

    def get_client(self):
        """Get DynamoDB client context manager."""
        kwargs: dict[str, Any] = {"config": self.config}
        if self.settings.dynamodb_endpoint_url:
            kwargs["endpoint_url"] = self.settings.dynamodb_endpoint_url
        return self.session.client("dynamodb", **kwargs)

    async def create_table_if_not_exists(self) -> None:
        """Create the cache table if it doesn't exist."""
        async with self.get_client() as client:
            try:
                await client.describe_table(TableName=self.table_name)
            except client.exceptions.ResourceNotFoundException:
                await client.create_table(
                    TableName=self.table_name,
                    KeySchema=[
                        {"AttributeName": "pk", "KeyType": "HASH"},  # Partition key
                        {"AttributeName": "sk", "KeyType": "RANGE"},  # Sort key
                    ],
                    AttributeDefinitions=[
                        {"AttributeName": "pk", "AttributeType": "S"},
                        {"AttributeName": "sk", "AttributeType": "S"},
                    ],
                    BillingMode="PAY_PER_REQUEST",
                )
                # Wait for table to be active
                waiter = client.get_waiter("table_exists")
                await waiter.wait(TableName=self.table_name)
                await client.update_time_to_live(
                    TableName=self.table_name,
                    TimeToLiveSpecification={"Enabled": True, "AttributeName": "ttl"},
                )

    async def put_entry(self, pk: str, payload: dict[str, Any], ttl_seconds: int | None) -> None:
        """Store a JSON payload under ``pk``."""
        item: dict[str, Any] = {
            "pk": {"S": pk},
            "sk": {"S": self.SORT_KEY},
            "payload": {"S": json.dumps(payload, ensure_ascii=False)},
            "stored_at": {"N": repr(time.time())},
        }
        if ttl_seconds is not None:
            item["ttl"] = {"N": str(int(time.time()) + ttl_seconds)}

        async with self.get_client() as client:
            await client.put_item(TableName=self.table_name, Item=item)

    async def get_entry(self, pk: str) -> dict[str, Any] | None:
        """Return the stored payload, or None if missing or expired."""
        async with self.get_client() as client:
            response = await client.get_item(
                TableName=self.table_name,
                Key={"pk": {"S": pk}, "sk": {"S": self.SORT_KEY}},
                ConsistentRead=True,
            )

        item = response.get("Item")
        if not item:
            return None
        ttl = item.get("ttl", {}).get("N")
        if ttl is not None and int(ttl) <= time.time():
            return None
        return json.loads(item["payload"]["S"])

    async def delete_entry(self, pk: str) -> None:
        async with self.get_client() as client:
            await client.delete_item(
                TableName=self.table_name,
                Key={"pk": {"S": pk}, "sk": {"S": self.SORT_KEY}},
            )
