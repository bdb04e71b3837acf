"""Record repositories for life-tracking entities.

The core only depends on the RecordRepository protocol; MongoRecordRepository
is the MongoDB adapter.
"""

import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import Any, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from ..models import RecordKind
from .client import retry_on_connection_failure

logger = logging.getLogger(__name__)

# Field a date-scoped query filters on, per kind
DATE_FIELDS: dict[RecordKind, str] = {
    RecordKind.TASK: "due_date",
    RecordKind.TIME_BLOCK: "start_time",
    RecordKind.NUTRITION: "timestamp",
    RecordKind.FITNESS: "timestamp",
    RecordKind.VALUE: "timestamp",
    RecordKind.REFLECTION: "timestamp",
    RecordKind.NOTE: "timestamp",
    RecordKind.WEIGHT: "timestamp",
}


class RecordRepository(Protocol):
    """Protocol for record persistence, scoped by user and optionally date."""

    def create(self, kind: RecordKind, user_id: str, record: dict[str, Any]) -> str:
        """Insert a record and return its ID."""
        ...

    def get(self, kind: RecordKind, record_id: str) -> dict[str, Any] | None:
        """Fetch a record by ID."""
        ...

    def update(self, kind: RecordKind, record_id: str, changes: dict[str, Any]) -> bool:
        """Apply changes to a record; False if it does not exist."""
        ...

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        """Delete a record; False if it does not exist."""
        ...

    def find(self, kind: RecordKind, user_id: str, on: date | None = None) -> list[dict[str, Any]]:
        """List a user's records, optionally only those dated on."""
        ...


def _to_storage(value: Any) -> Any:
    """Store datetimes as naive UTC, the driver's convention."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    if isinstance(value, dict):
        return {key: _to_storage(item) for key, item in value.items()}
    return value


def _from_storage(doc: dict[str, Any]) -> dict[str, Any]:
    result = {key: value for key, value in doc.items() if key != "_id"}
    result["id"] = str(doc["_id"])
    return result


def _object_id(record_id: str) -> ObjectId | None:
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError):
        return None


class MongoRecordRepository:
    """Repository keeping each record kind in its own collection."""

    def __init__(self, database: Database[dict[str, Any]]) -> None:
        """Initialize repository with a MongoDB database.

        Args:
            database: Database holding the record collections.
        """
        self._database = database
        self._indexed: set[RecordKind] = set()

    def _collection(self, kind: RecordKind) -> Collection[dict[str, Any]]:
        collection = self._database[kind.value]
        if kind not in self._indexed:
            self._ensure_indexes(kind, collection)
            self._indexed.add(kind)
        return collection

    def _ensure_indexes(self, kind: RecordKind, collection: Collection[dict[str, Any]]) -> None:
        """Create indexes for efficient queries."""
        collection.create_index("user_id")
        date_field = DATE_FIELDS.get(kind)
        if date_field:
            collection.create_index([("user_id", ASCENDING), (date_field, DESCENDING)])

    @retry_on_connection_failure()
    def create(self, kind: RecordKind, user_id: str, record: dict[str, Any]) -> str:
        """Insert a record and return its ID.

        Args:
            kind: Collection to insert into.
            user_id: Owner of the record.
            record: Record fields.

        Returns:
            The generated document ID.
        """
        doc = _to_storage({**record, "user_id": user_id})
        doc.pop("id", None)
        doc["created_at"] = doc.get("created_at") or _to_storage(datetime.now(UTC))
        result = self._collection(kind).insert_one(doc)
        return str(result.inserted_id)

    @retry_on_connection_failure()
    def get(self, kind: RecordKind, record_id: str) -> dict[str, Any] | None:
        """Fetch a record by ID.

        Returns:
            The record with its 'id', or None if not found.
        """
        object_id = _object_id(record_id)
        if object_id is None:
            return None
        doc = self._collection(kind).find_one({"_id": object_id})
        return _from_storage(doc) if doc is not None else None

    @retry_on_connection_failure()
    def update(self, kind: RecordKind, record_id: str, changes: dict[str, Any]) -> bool:
        """Apply changes to a record.

        Returns:
            True if a record matched.
        """
        object_id = _object_id(record_id)
        if object_id is None:
            return False
        fields = _to_storage(
            {key: value for key, value in changes.items() if key not in ("id", "_id")}
        )
        result = self._collection(kind).update_one({"_id": object_id}, {"$set": fields})
        return result.matched_count > 0

    @retry_on_connection_failure()
    def delete(self, kind: RecordKind, record_id: str) -> bool:
        """Delete a record.

        Returns:
            True if a record was deleted.
        """
        object_id = _object_id(record_id)
        if object_id is None:
            return False
        result = self._collection(kind).delete_one({"_id": object_id})
        return result.deleted_count > 0

    @retry_on_connection_failure()
    def find(self, kind: RecordKind, user_id: str, on: date | None = None) -> list[dict[str, Any]]:
        """List a user's records.

        Args:
            kind: Collection to read.
            user_id: Owner of the records.
            on: Optional UTC calendar date the records must fall on.

        Returns:
            Matching records, oldest first when the kind is dated.
        """
        query: dict[str, Any] = {"user_id": user_id}
        date_field = DATE_FIELDS.get(kind)

        if on is not None and date_field is not None:
            if kind == RecordKind.TASK:
                query[date_field] = on.isoformat()
            else:
                start = datetime.combine(on, time.min)
                query[date_field] = {"$gte": start, "$lt": start + timedelta(days=1)}
        elif on is not None:
            logger.debug(f"Ignoring date filter for undated records: {kind.value}")

        cursor = self._collection(kind).find(query)
        if date_field is not None:
            cursor = cursor.sort(date_field, ASCENDING)
        return [_from_storage(doc) for doc in cursor]


__all__ = ["DATE_FIELDS", "MongoRecordRepository", "RecordRepository"]
