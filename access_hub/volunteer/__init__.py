# Volunteer layer - matching workflow and session chat

from access_hub.volunteer.matcher import (
    accept_offer,
    decline_offer,
    complete_session,
)

from access_hub.volunteer.chat_log import (
    append_message,
    poll_new_messages,
)

__all__ = [
    # Matcher
    "accept_offer",
    "decline_offer",
    "complete_session",
    # Chat log
    "append_message",
    "poll_new_messages",
]
