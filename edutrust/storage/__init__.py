"""Storage collaborator -- append-only and updatable JSON record collections."""

from edutrust.storage.record_store import RecordStore

__all__ = ["RecordStore"]
