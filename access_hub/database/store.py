"""Document store interface and the in-process backend.

Every store exposes the same primitives the volunteer workflow needs:
insert / get / query, a conditional update, an atomic multi-write ``commit``
and an atomic list append. Conditions are compare-and-swap checks against
the current document: a mismatch raises PreconditionFailed and writes nothing.
"""

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from access_hub.errors import DocumentNotFound, PreconditionFailed
from access_hub.utils import utc_now

logger = logging.getLogger(__name__)

NowFn = Callable[[], datetime]


@dataclass
class Create:
    """Insert a new document. The store assigns ``id`` and ``created_at``."""
    collection: str
    data: dict


@dataclass
class Update:
    """Merge ``changes`` into a document if every ``expected`` field still matches."""
    collection: str
    doc_id: str
    changes: dict
    expected: dict = field(default_factory=dict)


class DocumentStore(ABC):
    """Minimal document-store contract shared by the Supabase and in-memory backends."""

    @abstractmethod
    def insert(self, collection: str, data: dict) -> str:
        """Insert a document and return its server-assigned id."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> dict | None:
        """Return one document or None."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: dict = None,
        contains: dict = None,
        order_by: str = "created_at",
        desc: bool = True,
    ) -> list[dict]:
        """Return documents whose fields equal ``filters`` and whose list
        fields include every value in ``contains``."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, changes: dict, expected: dict = None) -> bool:
        """Conditionally update one document. Returns False when ``expected`` no longer matches."""

    @abstractmethod
    def commit(self, writes: list) -> list[str]:
        """Apply every write or none of them. Returns ids of created documents in order."""

    @abstractmethod
    def append(self, collection: str, doc_id: str, list_field: str, item: dict, expected: dict = None) -> dict:
        """Atomically append ``item`` (stamped with a server ``timestamp``) to a list field."""


def _matches(doc: dict, expected: dict) -> bool:
    return all(doc.get(key) == value for key, value in (expected or {}).items())


class InMemoryDocumentStore(DocumentStore):
    """
    Simple in-memory document store.

    One lock serialises every write so commit and append behave like the
    hosted store's transactions. Documents are deep-copied in and out.
    """

    def __init__(self, now_fn: NowFn = utc_now) -> None:
        self._collections: dict[str, dict[str, dict]] = {}
        self._lock = threading.Lock()
        self._now_fn = now_fn

    def _table(self, collection: str) -> dict[str, dict]:
        return self._collections.setdefault(collection, {})

    def _new_doc(self, data: dict) -> dict:
        doc = copy.deepcopy(data)
        doc["id"] = uuid.uuid4().hex
        doc["created_at"] = self._now_fn()
        return doc

    def insert(self, collection: str, data: dict) -> str:
        with self._lock:
            doc = self._new_doc(data)
            self._table(collection)[doc["id"]] = doc
        return doc["id"]

    def get(self, collection: str, doc_id: str) -> dict | None:
        with self._lock:
            doc = self._table(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def query(self, collection, filters=None, contains=None, order_by="created_at", desc=True) -> list[dict]:
        with self._lock:
            docs = [copy.deepcopy(d) for d in self._table(collection).values()]

        results = [
            d for d in docs
            if _matches(d, filters)
            and all(value in (d.get(key) or []) for key, value in (contains or {}).items())
        ]
        if order_by:
            results.sort(key=lambda d: d.get(order_by), reverse=desc)
        return results

    def update(self, collection, doc_id, changes, expected=None) -> bool:
        with self._lock:
            doc = self._table(collection).get(doc_id)
            if doc is None:
                raise DocumentNotFound(collection, doc_id)
            if not _matches(doc, expected):
                return False
            doc.update(copy.deepcopy(changes))
        return True

    def commit(self, writes: list) -> list[str]:
        with self._lock:
            # Check every condition before touching anything
            for write in writes:
                if isinstance(write, Update):
                    doc = self._table(write.collection).get(write.doc_id)
                    if doc is None:
                        raise DocumentNotFound(write.collection, write.doc_id)
                    if not _matches(doc, write.expected):
                        raise PreconditionFailed(
                            f"{write.collection}/{write.doc_id} changed: expected {write.expected}"
                        )

            created_ids = []
            for write in writes:
                if isinstance(write, Create):
                    doc = self._new_doc(write.data)
                    self._table(write.collection)[doc["id"]] = doc
                    created_ids.append(doc["id"])
                else:
                    self._table(write.collection)[write.doc_id].update(copy.deepcopy(write.changes))

        logger.debug("Committed %d writes", len(writes))
        return created_ids

    def append(self, collection, doc_id, list_field, item, expected=None) -> dict:
        with self._lock:
            doc = self._table(collection).get(doc_id)
            if doc is None:
                raise DocumentNotFound(collection, doc_id)
            if not _matches(doc, expected):
                raise PreconditionFailed(f"{collection}/{doc_id} changed: expected {expected}")
            stored = {**copy.deepcopy(item), "timestamp": self._now_fn()}
            doc.setdefault(list_field, []).append(stored)
        return copy.deepcopy(stored)

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()
