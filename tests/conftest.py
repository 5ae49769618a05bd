"""Shared fixtures: an in-memory store with a ticking clock and a few users."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from access_hub.config import COORDINATOR_ROLE
from access_hub.database import InMemoryDocumentStore, get_offer, get_request, submit_offer, submit_request
from access_hub.llm import AIClients
from access_hub.models import UserIdentity


class TickingClock:
    """Returns a strictly increasing UTC time on every call."""

    def __init__(self, start: datetime = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    return InMemoryDocumentStore(now_fn=clock)


@pytest.fixture
def requester():
    return UserIdentity(uid="U1", name="Dana")


@pytest.fixture
def volunteer():
    return UserIdentity(uid="U2", name="Sam")


@pytest.fixture
def other_volunteer():
    return UserIdentity(uid="U3", name="Priya")


@pytest.fixture
def coordinator():
    return UserIdentity(uid="C1", name="Coordinator", roles=frozenset({COORDINATOR_ROLE}))


@pytest.fixture
def open_request(store, requester):
    """R1: an open request owned by U1."""
    return get_request(store, submit_request(store, requester, "Help me practise for a job interview"))


@pytest.fixture
def pending_offer(store, open_request, volunteer):
    """O1: U2's pending offer on R1."""
    return get_offer(store, submit_offer(store, volunteer, open_request.id))


@pytest.fixture
def gemini():
    return MagicMock(name="gemini")


@pytest.fixture
def clients(gemini):
    return AIClients(gemini=gemini)
