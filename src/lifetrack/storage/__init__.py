"""MongoDB storage module for lifetrack.

Provides the record repository protocol and its MongoDB adapter.
"""

from .client import MongoStorageClient, retry_on_connection_failure
from .repository import DATE_FIELDS, MongoRecordRepository, RecordRepository

__all__ = [
    "DATE_FIELDS",
    "MongoRecordRepository",
    "MongoStorageClient",
    "RecordRepository",
    "retry_on_connection_failure",
]
