"""Support session reads. Sessions are only created by the matcher."""

from access_hub.config import SESSIONS
from access_hub.database.store import DocumentStore
from access_hub.errors import DocumentNotFound
from access_hub.models import Session


def get_session(store: DocumentStore, session_id: str) -> Session:
    """Get a single session, chat log included."""
    row = store.get(SESSIONS, session_id)
    if row is None:
        raise DocumentNotFound(SESSIONS, session_id)
    return Session.from_record(row)


def list_sessions_for_participant(store: DocumentStore, user_id: str) -> list[Session]:
    """Get sessions the user takes part in, newest first."""
    rows = store.query(SESSIONS, contains={"participant_ids": user_id})
    return [Session.from_record(r) for r in rows]
