"""Volunteer offer operations."""

import logging

from access_hub.config import ANONYMOUS_VOLUNTEER, VOLUNTEER_OFFERS
from access_hub.database.requests import require_user
from access_hub.database.store import DocumentStore
from access_hub.errors import DocumentNotFound, ValidationError
from access_hub.models import OfferStatus, UserIdentity, VolunteerOffer

logger = logging.getLogger(__name__)


def submit_offer(store: DocumentStore, user: UserIdentity | None, request_id: str) -> str:
    """Pledge one hour of help on a request and return the offer ID.

    No business rules are checked here; the matcher enforces them on accept.
    """
    user = require_user(user)
    if not request_id:
        raise ValidationError("request_id is required")

    offer_id = store.insert(VOLUNTEER_OFFERS, {
        "request_id": request_id,
        "volunteer_id": user.uid,
        "volunteer_name": (user.name or "").strip() or ANONYMOUS_VOLUNTEER,
        "status": OfferStatus.PENDING.value,
    })
    logger.info("Offer %s on request %s from %s", offer_id, request_id, user.uid)
    return offer_id


def list_pending_offers(store: DocumentStore, request_id: str) -> list[VolunteerOffer]:
    """Get pending offers for a request, oldest first."""
    rows = store.query(
        VOLUNTEER_OFFERS,
        filters={"request_id": request_id, "status": OfferStatus.PENDING.value},
        desc=False,
    )
    return [VolunteerOffer.from_record(r) for r in rows]


def list_offers_for_volunteer(store: DocumentStore, volunteer_id: str) -> list[VolunteerOffer]:
    """Get every offer a volunteer has made, newest first."""
    rows = store.query(VOLUNTEER_OFFERS, filters={"volunteer_id": volunteer_id})
    return [VolunteerOffer.from_record(r) for r in rows]


def get_offer(store: DocumentStore, offer_id: str) -> VolunteerOffer:
    """Get a single offer by ID."""
    row = store.get(VOLUNTEER_OFFERS, offer_id)
    if row is None:
        raise DocumentNotFound(VOLUNTEER_OFFERS, offer_id)
    return VolunteerOffer.from_record(row)
