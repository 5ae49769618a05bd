"""Supabase client construction with retry logic."""

import functools
import logging
import time

import httpx
from supabase import Client, create_client

from access_hub.config import Settings
from access_hub.errors import ConfigurationError

logger = logging.getLogger(__name__)

# httpcore error class names treated as transient when they escape httpx unwrapped
TRANSIENT_ERROR_NAMES = ("ReadError", "ConnectError", "Timeout", "RemoteProtocolError")


def create_supabase_client(settings: Settings) -> Client:
    """Initialize and return a Supabase client for the configured project."""
    if not settings.supabase_url or not settings.supabase_key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
    return create_client(settings.supabase_url, settings.supabase_key)


def is_transient(error: Exception) -> bool:
    """Network failures and timeouts (httpx.TransportError) are worth retrying."""
    if isinstance(error, httpx.TransportError):
        return True
    error_type = type(error).__name__
    return any(name in error_type for name in TRANSIENT_ERROR_NAMES)


def with_retry(max_retries: int = 3, delay: float = 0.5):
    """Decorator to retry read operations on transient network errors.

    Catches httpx.ReadError and similar connection issues, retrying with
    exponential backoff. Only wrap reads: a retried write could replay a
    commit that already landed.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not is_transient(e) or attempt == max_retries - 1:
                        raise
                    logger.warning(
                        "%s failed with %s (attempt %d/%d), retrying",
                        func.__name__, type(e).__name__, attempt + 1, max_retries,
                    )
                    time.sleep(delay * (2 ** attempt))  # Exponential backoff
        return wrapper
    return decorator
