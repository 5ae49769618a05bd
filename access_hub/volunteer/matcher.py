"""Volunteer matching: accept an offer, decline an offer, complete a session.

``accept_offer`` is the only way a Session comes into existence. It writes the
new session and both status flips in one compare-and-swap commit, so two
racing accepts on the same request cannot both succeed.
"""

import logging

from access_hub.config import HELP_REQUESTS, SESSIONS, VOLUNTEER_OFFERS, SiblingOfferPolicy
from access_hub.database import (
    Create,
    DocumentStore,
    Update,
    get_offer,
    get_request,
    get_session,
    list_pending_offers,
    require_user,
)
from access_hub.errors import PermissionDenied, PreconditionFailed, ValidationError
from access_hub.models import (
    HelpRequest,
    OfferStatus,
    RequestStatus,
    Session,
    SessionStatus,
    UserIdentity,
    VolunteerOffer,
)

logger = logging.getLogger(__name__)


def _check_request_owner(user: UserIdentity, request: HelpRequest):
    if user.uid != request.owner_id and not user.is_coordinator:
        raise PermissionDenied("Only the requester or a coordinator can manage offers on this request.")


def accept_offer(
    store: DocumentStore,
    user: UserIdentity | None,
    request: HelpRequest,
    offer: VolunteerOffer,
    sibling_policy: str = SiblingOfferPolicy.KEEP_PENDING,
) -> Session:
    """Accept a volunteer's offer and open a support session.

    Atomically creates the session, flips the request open -> matched and the
    offer pending -> accepted. The status checks run again at commit time;
    if another caller got there first this raises PreconditionFailed and
    nothing is written.

    Args:
        store: Document store
        user: Signed-in caller (request owner or coordinator)
        request: The request being matched
        offer: A pending offer on that request
        sibling_policy: KEEP_PENDING leaves other pending offers untouched,
            REJECT_SIBLINGS rejects them in the same commit

    Returns:
        The newly created Session
    """
    user = require_user(user)
    if offer.request_id != request.id:
        raise ValidationError(f"Offer {offer.id} does not belong to request {request.id}")
    _check_request_owner(user, request)
    if offer.volunteer_id == request.owner_id:
        raise ValidationError("A requester cannot accept their own offer.")
    if sibling_policy not in SiblingOfferPolicy.ALL:
        raise ValidationError(f"Unknown sibling offer policy: {sibling_policy}")

    # Fail fast on stale copies. The commit re-checks the statuses, and the
    # owner and volunteer ids, against the stored rows
    if request.status != RequestStatus.OPEN:
        raise PreconditionFailed(f"Request {request.id} is {request.status.value}, not open")
    if offer.status != OfferStatus.PENDING:
        raise PreconditionFailed(f"Offer {offer.id} is {offer.status.value}, not pending")

    writes = [
        Create(SESSIONS, {
            "request_id": request.id,
            "participant_ids": [request.owner_id, offer.volunteer_id],
            "status": SessionStatus.ACTIVE.value,
            "chat_log": [],
        }),
        Update(
            HELP_REQUESTS, request.id,
            changes={"status": RequestStatus.MATCHED.value},
            expected={"status": RequestStatus.OPEN.value, "owner_id": request.owner_id},
        ),
        Update(
            VOLUNTEER_OFFERS, offer.id,
            changes={"status": OfferStatus.ACCEPTED.value},
            expected={
                "status": OfferStatus.PENDING.value,
                "request_id": request.id,
                "volunteer_id": offer.volunteer_id,
            },
        ),
    ]

    if sibling_policy == SiblingOfferPolicy.REJECT_SIBLINGS:
        siblings = [o for o in list_pending_offers(store, request.id) if o.id != offer.id]
        writes.extend(
            Update(
                VOLUNTEER_OFFERS, sibling.id,
                changes={"status": OfferStatus.REJECTED.value},
                expected={"status": OfferStatus.PENDING.value},
            )
            for sibling in siblings
        )

    try:
        session_id, = store.commit(writes)
    except PreconditionFailed:
        logger.warning("Accept of offer %s on request %s was refused at commit", offer.id, request.id)
        raise

    logger.info(
        "Request %s matched with volunteer %s (offer %s, session %s)",
        request.id, offer.volunteer_id, offer.id, session_id,
    )
    return get_session(store, session_id)


def decline_offer(store: DocumentStore, user: UserIdentity | None, offer_id: str) -> VolunteerOffer:
    """Reject one pending offer. The request stays open for other volunteers."""
    user = require_user(user)
    offer = get_offer(store, offer_id)
    request = get_request(store, offer.request_id)
    _check_request_owner(user, request)

    declined = store.update(
        VOLUNTEER_OFFERS, offer_id,
        changes={"status": OfferStatus.REJECTED.value},
        expected={"status": OfferStatus.PENDING.value},
    )
    if not declined:
        raise PreconditionFailed(f"Offer {offer_id} is no longer pending")

    logger.info("Offer %s on request %s declined by %s", offer_id, request.id, user.uid)
    return get_offer(store, offer_id)


def complete_session(store: DocumentStore, user: UserIdentity | None, session_id: str) -> Session:
    """Close a session and mark its request completed, atomically."""
    user = require_user(user)
    session = get_session(store, session_id)
    if not session.has_participant(user.uid) and not user.is_coordinator:
        raise PermissionDenied("Only a participant can complete this session.")
    if session.status != SessionStatus.ACTIVE:
        raise PreconditionFailed(f"Session {session_id} is already {session.status.value}")

    store.commit([
        Update(
            SESSIONS, session_id,
            changes={"status": SessionStatus.COMPLETED.value},
            expected={"status": SessionStatus.ACTIVE.value},
        ),
        Update(
            HELP_REQUESTS, session.request_id,
            changes={"status": RequestStatus.COMPLETED.value},
            expected={"status": RequestStatus.MATCHED.value},
        ),
    ])

    logger.info("Session %s completed by %s", session_id, user.uid)
    return get_session(store, session_id)
