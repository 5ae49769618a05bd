"""Session chat log: append-only, server-timestamped messages."""

import logging

from access_hub.config import ANONYMOUS_SENDER, SESSIONS
from access_hub.database import DocumentStore, get_session, require_user
from access_hub.errors import PermissionDenied, PreconditionFailed, ValidationError
from access_hub.models import ChatMessage, SessionStatus, UserIdentity

logger = logging.getLogger(__name__)


def append_message(
    store: DocumentStore,
    user: UserIdentity | None,
    session_id: str,
    content: str,
) -> ChatMessage:
    """Append one message to a session's chat log.

    The store stamps the message with its own clock, so ordering across
    participants follows append order rather than client clocks. Completed
    sessions are read-only.
    """
    user = require_user(user)
    text = (content or "").strip()
    if not text:
        raise ValidationError("Message cannot be empty.")

    session = get_session(store, session_id)
    if not session.has_participant(user.uid):
        raise PermissionDenied("Only session participants can send messages.")

    try:
        stored = store.append(
            SESSIONS, session_id, "chat_log",
            {
                "sender_id": user.uid,
                "sender_name": (user.name or "").strip() or ANONYMOUS_SENDER,
                "content": text,
            },
            expected={"status": SessionStatus.ACTIVE.value},
        )
    except PreconditionFailed:
        logger.warning("Message to closed session %s from %s refused", session_id, user.uid)
        raise

    logger.info("Message appended to session %s by %s", session_id, user.uid)
    return ChatMessage.from_record(stored)


def poll_new_messages(
    store: DocumentStore,
    user: UserIdentity | None,
    session_id: str,
    seen_count: int = 0,
) -> list[ChatMessage]:
    """Return messages appended after the first ``seen_count``.

    Polling stand-in for a live subscription: the UI keeps the count it has
    rendered and asks for anything newer on each refresh. Only participants
    and coordinators may read a session's log.
    """
    user = require_user(user)
    session = get_session(store, session_id)
    if not session.has_participant(user.uid) and not user.is_coordinator:
        raise PermissionDenied("Only session participants can read this chat.")
    return session.chat_log[max(seen_count, 0):]
