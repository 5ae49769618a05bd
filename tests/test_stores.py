"""
Unit tests for the in-memory document store and the record-level operations.
"""
import pytest

from access_hub.config import HELP_REQUESTS, SESSIONS, VOLUNTEER_OFFERS
from access_hub.database import (
    Create,
    Update,
    get_request,
    list_offers_for_volunteer,
    list_open_requests,
    list_pending_offers,
    list_requests_for_owner,
    list_sessions_for_participant,
    submit_offer,
    submit_request,
)
from access_hub.errors import DocumentNotFound, NotAuthenticated, PreconditionFailed, ValidationError
from access_hub.models import OfferStatus, RequestStatus


class TestInMemoryCommit:
    """Tests for the atomic multi-write primitive."""

    def test_all_writes_applied(self, store):
        doc_id = store.insert(HELP_REQUESTS, {"status": "open"})

        created = store.commit([
            Create(SESSIONS, {"request_id": doc_id}),
            Update(HELP_REQUESTS, doc_id, {"status": "matched"}, expected={"status": "open"}),
        ])

        assert len(created) == 1
        assert store.get(SESSIONS, created[0])["request_id"] == doc_id
        assert store.get(HELP_REQUESTS, doc_id)["status"] == "matched"

    def test_failed_condition_writes_nothing(self, store):
        first = store.insert(HELP_REQUESTS, {"status": "open"})
        second = store.insert(HELP_REQUESTS, {"status": "matched"})

        with pytest.raises(PreconditionFailed):
            store.commit([
                Create(SESSIONS, {"request_id": first}),
                Update(HELP_REQUESTS, first, {"status": "matched"}, expected={"status": "open"}),
                Update(HELP_REQUESTS, second, {"status": "completed"}, expected={"status": "open"}),
            ])

        assert store.get(HELP_REQUESTS, first)["status"] == "open"
        assert store.get(HELP_REQUESTS, second)["status"] == "matched"
        assert store.query(SESSIONS) == []

    def test_missing_target(self, store):
        with pytest.raises(DocumentNotFound):
            store.commit([Update(HELP_REQUESTS, "nope", {"status": "matched"})])

    def test_conditional_update(self, store):
        doc_id = store.insert(VOLUNTEER_OFFERS, {"status": "pending"})

        assert store.update(VOLUNTEER_OFFERS, doc_id, {"status": "rejected"}, expected={"status": "pending"})
        assert not store.update(VOLUNTEER_OFFERS, doc_id, {"status": "accepted"}, expected={"status": "pending"})
        assert store.get(VOLUNTEER_OFFERS, doc_id)["status"] == "rejected"

    def test_reads_are_copies(self, store):
        doc_id = store.insert(SESSIONS, {"chat_log": []})

        store.get(SESSIONS, doc_id)["chat_log"].append({"content": "sneaky"})

        assert store.get(SESSIONS, doc_id)["chat_log"] == []


class TestRequests:
    """Tests for help request operations."""

    def test_submit_assigns_defaults(self, store, clock, requester):
        request = get_request(store, submit_request(store, requester, "  Read a letter aloud "))

        assert request.owner_id == "U1"
        assert request.description == "Read a letter aloud"
        assert request.status == RequestStatus.OPEN
        assert request.duration_hours == 1
        assert request.created_at == clock.current

    def test_submit_requires_user(self, store):
        with pytest.raises(NotAuthenticated):
            submit_request(store, None, "Anything")

    @pytest.mark.parametrize("description", ["", "   ", None])
    def test_submit_requires_description(self, store, requester, description):
        with pytest.raises(ValidationError):
            submit_request(store, requester, description)

    def test_open_requests_newest_first(self, store, requester, other_volunteer):
        first = submit_request(store, requester, "first")
        second = submit_request(store, other_volunteer, "second")
        third = submit_request(store, requester, "third")
        store.update(HELP_REQUESTS, second, {"status": "matched"})

        assert [r.id for r in list_open_requests(store)] == [third, first]

    def test_requests_for_owner(self, store, requester, volunteer):
        mine = submit_request(store, requester, "mine")
        submit_request(store, volunteer, "theirs")

        assert [r.id for r in list_requests_for_owner(store, requester.uid)] == [mine]

    def test_get_missing_request(self, store):
        with pytest.raises(DocumentNotFound):
            get_request(store, "missing")


class TestOffers:
    """Tests for volunteer offer operations."""

    def test_submit_uses_caller_name(self, store, open_request, volunteer):
        submit_offer(store, volunteer, open_request.id)

        offer, = list_pending_offers(store, open_request.id)
        assert offer.volunteer_id == "U2"
        assert offer.volunteer_name == "Sam"
        assert offer.status == OfferStatus.PENDING

    def test_submit_requires_user(self, store, open_request):
        with pytest.raises(NotAuthenticated):
            submit_offer(store, None, open_request.id)

    def test_pending_offers_exclude_rejected(self, store, open_request, volunteer, other_volunteer):
        kept = submit_offer(store, volunteer, open_request.id)
        dropped = submit_offer(store, other_volunteer, open_request.id)
        store.update(VOLUNTEER_OFFERS, dropped, {"status": "rejected"})

        assert [o.id for o in list_pending_offers(store, open_request.id)] == [kept]

    def test_offers_for_volunteer(self, store, requester, volunteer):
        first = submit_offer(store, volunteer, submit_request(store, requester, "a"))
        second = submit_offer(store, volunteer, submit_request(store, requester, "b"))

        assert [o.id for o in list_offers_for_volunteer(store, volunteer.uid)] == [second, first]


class TestSessions:
    """Tests for session queries."""

    def test_sessions_for_participant(self, store):
        store.insert(SESSIONS, {"request_id": "R1", "participant_ids": ["U1", "U2"], "status": "active", "chat_log": []})
        store.insert(SESSIONS, {"request_id": "R2", "participant_ids": ["U3", "U4"], "status": "active", "chat_log": []})

        assert [s.request_id for s in list_sessions_for_participant(store, "U2")] == ["R1"]
        assert list_sessions_for_participant(store, "U9") == []
