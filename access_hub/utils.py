"""Shared utility functions for text processing and formatting."""

import hashlib
from datetime import datetime, timezone

import json_repair


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` wrapper if the model added one."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0].strip()
    return text


def parse_llm_json(text: str):
    """Parse JSON from an LLM response (use json_repair to handle malformed output).

    Returns whatever json_repair produces; callers validate the shape.
    """
    if not text:
        return None
    return json_repair.loads(strip_code_fences(text))


def user_id_for_name(name: str) -> str:
    """Derive a stable short user id from a display name."""
    return hashlib.sha256(name.strip().lower().encode()).hexdigest()[:16]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_chat_time(dt_input) -> str:
    """Format a message timestamp as HH:MM for chat bubbles.

    Accepts ISO string or datetime object.
    """
    if dt_input is None:
        return ""
    try:
        if isinstance(dt_input, str):
            dt = datetime.fromisoformat(dt_input.replace('Z', '+00:00'))
        else:
            dt = dt_input
        return dt.strftime("%H:%M")
    except ValueError:
        return str(dt_input)


def format_relative_date(dt_input, now: datetime = None) -> str:
    """Format a created_at value as 'today', 'yesterday' or 'N days ago'."""
    if dt_input is None:
        return ""
    if isinstance(dt_input, str):
        dt_input = datetime.fromisoformat(dt_input.replace('Z', '+00:00'))
    if dt_input.tzinfo is None:
        dt_input = dt_input.replace(tzinfo=timezone.utc)
    now = now or utc_now()
    days = (now.date() - dt_input.date()).days
    if days <= 0:
        return "today"
    if days == 1:
        return "yesterday"
    return f"{days} days ago"


def initials(name: str) -> str:
    """Two-letter avatar label for a display name."""
    return name[:2].upper() if name else "??"
