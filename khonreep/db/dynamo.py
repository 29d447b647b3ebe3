# khonreep/db/dynamo.py
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from khonreep.config import Settings
from khonreep.db.store import StoreReadError, StoreWriteError
from khonreep.models.location import Location, LocationIn

log = logging.getLogger(__name__)


def _to_dynamo(value: Any) -> Any:
    # DynamoDB rejects floats; go through str to keep the decimal digits stable
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def _from_dynamo(item: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in item.items():
        out[key] = float(value) if isinstance(value, Decimal) else value
    return out


def _error_message(e: Exception) -> str:
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Message", str(e))
    return str(e)


class DynamoLocationStore:
    """
    `locations` table, PK: id (string).
    Only full scans and single puts; this client never updates or deletes.
    """

    def __init__(self, table: Any, *, page_limit: int = 1000):
        self.table = table
        self.page_limit = page_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> "DynamoLocationStore":
        dynamodb = boto3.resource("dynamodb", region_name=settings.aws_region)
        return cls(dynamodb.Table(settings.locations_table))

    def select(self) -> List[Location]:
        """Scan the whole table, transparently auto-paginating until done."""
        items: List[Dict[str, Any]] = []
        lek: Optional[Dict[str, Any]] = None

        try:
            while True:
                kwargs: Dict[str, Any] = {"Limit": self.page_limit}
                if lek:
                    kwargs["ExclusiveStartKey"] = lek

                resp = self.table.scan(**kwargs)
                items.extend(resp.get("Items", []))
                lek = resp.get("LastEvaluatedKey")
                if not lek:
                    break
        except (ClientError, BotoCoreError) as e:
            raise StoreReadError(_error_message(e)) from e

        try:
            return [Location(**_from_dynamo(it)) for it in items]
        except ValidationError as e:
            raise StoreReadError(f"Malformed location row: {e}") from e

    def insert(self, record: LocationIn) -> Location:
        now_iso = datetime.now(timezone.utc).isoformat()
        item = {
            "id": str(uuid.uuid4()),
            **record.model_dump(),
            "created_at": now_iso,
            "updated_at": now_iso,
        }

        try:
            self.table.put_item(
                Item={k: _to_dynamo(v) for k, v in item.items()},
                ConditionExpression="attribute_not_exists(id)",
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreWriteError(_error_message(e)) from e

        log.info("Stored location %s (%s)", item["id"], record.type)
        return Location(**item)
