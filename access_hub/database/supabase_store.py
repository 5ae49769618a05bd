"""Supabase (PostgREST) backend for the document store.

Single-table reads and conditional updates go straight through PostgREST.
Multi-document commits and list appends run inside the ``commit_batch`` and
``append_to_list`` database functions (see supabase/schema.sql), so each is
one Postgres transaction.
"""

import logging

from postgrest.exceptions import APIError
from supabase import Client

from access_hub.database.client import with_retry
from access_hub.database.store import Create, DocumentStore
from access_hub.errors import (
    DocumentNotFound,
    PermissionDenied,
    PreconditionFailed,
    ValidationError,
)

logger = logging.getLogger(__name__)

# SQLSTATE codes raised by the schema's functions and constraints
SQLSTATE_SERIALIZATION_FAILURE = "40001"
SQLSTATE_INSUFFICIENT_PRIVILEGE = "42501"
SQLSTATE_NO_DATA_FOUND = "P0002"
SQLSTATE_VALIDATION = {"23502", "23514", "22P02"}


def translate_api_error(error: APIError) -> Exception:
    """Map a PostgREST error onto the app's error taxonomy (or return it unchanged)."""
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error)
    if code == SQLSTATE_SERIALIZATION_FAILURE:
        return PreconditionFailed(message)
    if code == SQLSTATE_INSUFFICIENT_PRIVILEGE:
        return PermissionDenied(message)
    if code in SQLSTATE_VALIDATION:
        return ValidationError(message)
    return error


def _serialize_write(write) -> dict:
    if isinstance(write, Create):
        return {"op": "create", "table": write.collection, "data": write.data}
    return {
        "op": "update",
        "table": write.collection,
        "id": write.doc_id,
        "changes": write.changes,
        "expected": write.expected,
    }


class SupabaseDocumentStore(DocumentStore):
    """Document store backed by a Supabase project."""

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, builder, missing: tuple = None):
        try:
            return builder.execute()
        except APIError as e:
            if missing and getattr(e, "code", None) == SQLSTATE_NO_DATA_FOUND:
                raise DocumentNotFound(*missing) from e
            translated = translate_api_error(e)
            if translated is e:
                raise
            raise translated from e

    def insert(self, collection: str, data: dict) -> str:
        result = self._execute(self.client.from_(collection).insert(data))
        return result.data[0]["id"] if result.data else None

    @with_retry()
    def get(self, collection: str, doc_id: str) -> dict | None:
        result = self._execute(
            self.client.from_(collection).select("*").eq("id", doc_id).limit(1)
        )
        return result.data[0] if result.data else None

    @with_retry()
    def query(self, collection, filters=None, contains=None, order_by="created_at", desc=True) -> list[dict]:
        builder = self.client.from_(collection).select("*")
        for key, value in (filters or {}).items():
            builder = builder.eq(key, value)
        for key, value in (contains or {}).items():
            builder = builder.contains(key, [value])
        if order_by:
            builder = builder.order(order_by, desc=desc)
        result = self._execute(builder)
        return result.data or []

    def update(self, collection, doc_id, changes, expected=None) -> bool:
        builder = self.client.from_(collection).update(changes).eq("id", doc_id)
        for key, value in (expected or {}).items():
            builder = builder.eq(key, value)
        result = self._execute(builder)
        if result.data:
            return True
        # Zero rows touched: either the row is gone or the condition failed
        if self.get(collection, doc_id) is None:
            raise DocumentNotFound(collection, doc_id)
        return False

    def commit(self, writes: list) -> list[str]:
        payload = [_serialize_write(w) for w in writes]
        result = self._execute(
            self.client.rpc("commit_batch", {"writes": payload}),
            missing=("commit_batch", "update target"),
        )
        logger.debug("Committed %d writes via commit_batch", len(writes))
        return list(result.data or [])

    def append(self, collection, doc_id, list_field, item, expected=None) -> dict:
        params = {
            "p_table": collection,
            "p_id": doc_id,
            "p_field": list_field,
            "p_item": item,
            "p_expected": expected or {},
        }
        result = self._execute(
            self.client.rpc("append_to_list", params), missing=(collection, doc_id)
        )
        return result.data
