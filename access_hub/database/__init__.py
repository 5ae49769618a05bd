# Database layer - document stores and volunteer record operations

from access_hub.config import STORE_MEMORY, Settings

from access_hub.database.client import (
    create_supabase_client,
    with_retry,
)

from access_hub.database.store import (
    Create,
    Update,
    DocumentStore,
    InMemoryDocumentStore,
)

from access_hub.database.supabase_store import SupabaseDocumentStore

from access_hub.database.requests import (
    require_user,
    submit_request,
    list_open_requests,
    list_requests_for_owner,
    get_request,
)

from access_hub.database.offers import (
    submit_offer,
    list_pending_offers,
    list_offers_for_volunteer,
    get_offer,
)

from access_hub.database.sessions import (
    get_session,
    list_sessions_for_participant,
)


def create_store(settings: Settings) -> DocumentStore:
    """Build the document store selected by STORE_BACKEND."""
    if settings.store_backend == STORE_MEMORY:
        return InMemoryDocumentStore()
    return SupabaseDocumentStore(create_supabase_client(settings))


__all__ = [
    # Client
    "create_supabase_client",
    "with_retry",
    "create_store",
    # Stores
    "Create",
    "Update",
    "DocumentStore",
    "InMemoryDocumentStore",
    "SupabaseDocumentStore",
    # Requests
    "require_user",
    "submit_request",
    "list_open_requests",
    "list_requests_for_owner",
    "get_request",
    # Offers
    "submit_offer",
    "list_pending_offers",
    "list_offers_for_volunteer",
    "get_offer",
    # Sessions
    "get_session",
    "list_sessions_for_participant",
]
