"""Help request operations."""

import logging

from access_hub.config import DEFAULT_DURATION_HOURS, HELP_REQUESTS
from access_hub.database.store import DocumentStore
from access_hub.errors import DocumentNotFound, NotAuthenticated, ValidationError
from access_hub.models import HelpRequest, RequestStatus, UserIdentity

logger = logging.getLogger(__name__)


def require_user(user: UserIdentity | None) -> UserIdentity:
    """Return the caller or raise NotAuthenticated."""
    if user is None or not user.uid:
        raise NotAuthenticated("You must be signed in to do that.")
    return user


def submit_request(
    store: DocumentStore,
    user: UserIdentity | None,
    description: str,
    duration_hours: int = DEFAULT_DURATION_HOURS,
) -> str:
    """Create a new open help request and return its ID."""
    user = require_user(user)
    if not description or not description.strip():
        raise ValidationError("Please describe what you need help with.")
    if duration_hours is None or duration_hours < 1:
        raise ValidationError("duration_hours must be at least 1")

    request_id = store.insert(HELP_REQUESTS, {
        "owner_id": user.uid,
        "description": description.strip(),
        "status": RequestStatus.OPEN.value,
        "duration_hours": duration_hours,
    })
    logger.info("Help request %s created by %s", request_id, user.uid)
    return request_id


def list_open_requests(store: DocumentStore) -> list[HelpRequest]:
    """Get open requests, newest first."""
    rows = store.query(HELP_REQUESTS, filters={"status": RequestStatus.OPEN.value})
    return [HelpRequest.from_record(r) for r in rows]


def list_requests_for_owner(store: DocumentStore, owner_id: str) -> list[HelpRequest]:
    """Get every request a user has posted, newest first."""
    rows = store.query(HELP_REQUESTS, filters={"owner_id": owner_id})
    return [HelpRequest.from_record(r) for r in rows]


def get_request(store: DocumentStore, request_id: str) -> HelpRequest:
    """Get a single request by ID."""
    row = store.get(HELP_REQUESTS, request_id)
    if row is None:
        raise DocumentNotFound(HELP_REQUESTS, request_id)
    return HelpRequest.from_record(row)
