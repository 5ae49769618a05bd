"""
Tests for the volunteer matcher: accept, decline and complete.
"""
import threading

import pytest

from access_hub.config import SiblingOfferPolicy
from access_hub.database import (
    get_offer,
    get_request,
    list_open_requests,
    list_pending_offers,
    list_sessions_for_participant,
    submit_offer,
    submit_request,
)
from access_hub.errors import (
    NotAuthenticated,
    PermissionDenied,
    PreconditionFailed,
    ValidationError,
)
from access_hub.models import OfferStatus, RequestStatus, SessionStatus, UserIdentity
from access_hub.volunteer import accept_offer, complete_session, decline_offer


class TestAcceptOffer:
    """Tests for accept_offer."""

    def test_creates_session_and_flips_statuses(self, store, requester, open_request, pending_offer):
        session = accept_offer(store, requester, open_request, pending_offer)

        assert session.participant_ids == ["U1", "U2"]
        assert session.status == SessionStatus.ACTIVE
        assert session.chat_log == []
        assert session.request_id == open_request.id
        assert get_request(store, open_request.id).status == RequestStatus.MATCHED
        assert get_offer(store, pending_offer.id).status == OfferStatus.ACCEPTED

    def test_exactly_one_session_exists(self, store, requester, volunteer, open_request, pending_offer):
        accept_offer(store, requester, open_request, pending_offer)

        assert len(list_sessions_for_participant(store, requester.uid)) == 1
        assert len(list_sessions_for_participant(store, volunteer.uid)) == 1

    def test_matched_request_leaves_open_list(self, store, requester, open_request, pending_offer):
        accept_offer(store, requester, open_request, pending_offer)

        assert open_request.id not in [r.id for r in list_open_requests(store)]

    def test_second_offer_fails_after_match(self, store, requester, other_volunteer, open_request, pending_offer):
        second = get_offer(store, submit_offer(store, other_volunteer, open_request.id))
        accept_offer(store, requester, open_request, pending_offer)

        # Stale copy of R1 still says "open"; the commit must catch it
        with pytest.raises(PreconditionFailed):
            accept_offer(store, requester, open_request, second)

        assert get_offer(store, second.id).status == OfferStatus.PENDING
        assert len(list_sessions_for_participant(store, requester.uid)) == 1

    def test_fresh_matched_request_fails_fast(self, store, requester, other_volunteer, open_request, pending_offer):
        second = get_offer(store, submit_offer(store, other_volunteer, open_request.id))
        accept_offer(store, requester, open_request, pending_offer)

        with pytest.raises(PreconditionFailed):
            accept_offer(store, requester, get_request(store, open_request.id), second)

    def test_concurrent_accepts_only_one_wins(self, store, requester, open_request):
        offers = []
        for i in range(5):
            helper = UserIdentity(uid=f"V{i}", name=f"Volunteer {i}")
            offers.append(get_offer(store, submit_offer(store, helper, open_request.id)))

        barrier = threading.Barrier(len(offers))
        outcomes = []
        lock = threading.Lock()

        def attempt(offer):
            barrier.wait()
            try:
                accept_offer(store, requester, open_request, offer)
                result = "ok"
            except PreconditionFailed:
                result = "conflict"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(o,)) for o in offers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("conflict") == len(offers) - 1
        assert len(list_sessions_for_participant(store, requester.uid)) == 1
        accepted = [o for o in offers if get_offer(store, o.id).status == OfferStatus.ACCEPTED]
        assert len(accepted) == 1

    def test_siblings_stay_pending_by_default(self, store, requester, other_volunteer, open_request, pending_offer):
        sibling_id = submit_offer(store, other_volunteer, open_request.id)
        accept_offer(store, requester, open_request, pending_offer)

        assert get_offer(store, sibling_id).status == OfferStatus.PENDING

    def test_reject_siblings_policy(self, store, requester, other_volunteer, open_request, pending_offer):
        sibling_id = submit_offer(store, other_volunteer, open_request.id)
        accept_offer(
            store, requester, open_request, pending_offer,
            sibling_policy=SiblingOfferPolicy.REJECT_SIBLINGS,
        )

        assert get_offer(store, sibling_id).status == OfferStatus.REJECTED
        assert get_offer(store, pending_offer.id).status == OfferStatus.ACCEPTED
        assert list_pending_offers(store, open_request.id) == []

    def test_requires_signed_in_user(self, store, open_request, pending_offer):
        with pytest.raises(NotAuthenticated):
            accept_offer(store, None, open_request, pending_offer)

    def test_stranger_cannot_accept(self, store, other_volunteer, open_request, pending_offer):
        with pytest.raises(PermissionDenied):
            accept_offer(store, other_volunteer, open_request, pending_offer)

        assert get_request(store, open_request.id).status == RequestStatus.OPEN

    def test_volunteer_cannot_accept_own_offer(self, store, volunteer, open_request, pending_offer):
        with pytest.raises(PermissionDenied):
            accept_offer(store, volunteer, open_request, pending_offer)

    def test_coordinator_can_accept(self, store, coordinator, open_request, pending_offer):
        session = accept_offer(store, coordinator, open_request, pending_offer)

        assert session.participant_ids == ["U1", "U2"]

    def test_offer_for_other_request_rejected(self, store, requester, volunteer, open_request):
        other_request_id = submit_request(store, requester, "Read my mail to me")
        stray = get_offer(store, submit_offer(store, volunteer, other_request_id))

        with pytest.raises(ValidationError):
            accept_offer(store, requester, open_request, stray)

    def test_requester_offering_on_own_request(self, store, requester, open_request):
        own = get_offer(store, submit_offer(store, requester, open_request.id))

        with pytest.raises(ValidationError):
            accept_offer(store, requester, open_request, own)

    def test_forged_request_owner_rejected(self, store, open_request, pending_offer):
        mallory = UserIdentity(uid="M1", name="Mallory")
        forged = open_request.model_copy(update={"owner_id": "M1"})

        with pytest.raises(PreconditionFailed):
            accept_offer(store, mallory, forged, pending_offer)

        assert get_request(store, open_request.id).status == RequestStatus.OPEN
        assert get_offer(store, pending_offer.id).status == OfferStatus.PENDING
        assert list_sessions_for_participant(store, "M1") == []

    def test_forged_offer_volunteer_rejected(self, store, requester, open_request, pending_offer):
        forged = pending_offer.model_copy(update={"volunteer_id": "X9"})

        with pytest.raises(PreconditionFailed):
            accept_offer(store, requester, open_request, forged)

        assert get_offer(store, pending_offer.id).status == OfferStatus.PENDING
        assert list_sessions_for_participant(store, requester.uid) == []

    def test_session_holds_stored_owner_and_volunteer(self, store, requester, volunteer, open_request, pending_offer):
        session = accept_offer(store, requester, open_request, pending_offer)

        assert session.participant_ids == [get_request(store, open_request.id).owner_id,
                                           get_offer(store, pending_offer.id).volunteer_id]
        assert session.has_participant(volunteer.uid)

    def test_declined_offer_cannot_be_accepted(self, store, requester, open_request, pending_offer):
        decline_offer(store, requester, pending_offer.id)

        with pytest.raises(PreconditionFailed):
            accept_offer(store, requester, open_request, pending_offer)

        assert get_request(store, open_request.id).status == RequestStatus.OPEN


class TestDeclineOffer:
    """Tests for decline_offer."""

    def test_owner_declines(self, store, requester, open_request, pending_offer):
        declined = decline_offer(store, requester, pending_offer.id)

        assert declined.status == OfferStatus.REJECTED
        assert get_request(store, open_request.id).status == RequestStatus.OPEN

    def test_stranger_cannot_decline(self, store, other_volunteer, pending_offer):
        with pytest.raises(PermissionDenied):
            decline_offer(store, other_volunteer, pending_offer.id)

    def test_decline_twice_fails(self, store, requester, pending_offer):
        decline_offer(store, requester, pending_offer.id)

        with pytest.raises(PreconditionFailed):
            decline_offer(store, requester, pending_offer.id)


class TestCompleteSession:
    """Tests for complete_session."""

    def test_participant_completes(self, store, requester, volunteer, open_request, pending_offer):
        session = accept_offer(store, requester, open_request, pending_offer)

        completed = complete_session(store, volunteer, session.id)

        assert completed.status == SessionStatus.COMPLETED
        assert get_request(store, open_request.id).status == RequestStatus.COMPLETED

    def test_outsider_cannot_complete(self, store, requester, other_volunteer, open_request, pending_offer):
        session = accept_offer(store, requester, open_request, pending_offer)

        with pytest.raises(PermissionDenied):
            complete_session(store, other_volunteer, session.id)

    def test_complete_twice_fails(self, store, requester, open_request, pending_offer):
        session = accept_offer(store, requester, open_request, pending_offer)
        complete_session(store, requester, session.id)

        with pytest.raises(PreconditionFailed):
            complete_session(store, requester, session.id)
