"""Companion chat that adapts its persona to the tone of the user's message."""

import logging
from typing import Literal

from pydantic import BaseModel

from access_hub.config import (
    AGENT_PERSONAS,
    COMPANION_FALLBACK_REPLY,
    DEFAULT_MODEL,
    TONE_ANALYSIS_PROMPT,
)
from access_hub.errors import ValidationError
from access_hub.llm import (
    AIClients,
    generate_chat,
    generate_multimodal,
    generate_structured,
)
from access_hub.tools.media import image_part

logger = logging.getLogger(__name__)

# Turns of history sent with each message
MAX_HISTORY_MESSAGES = 20

Tone = Literal["Friendly", "Formal", "Frustrated", "Inquisitive", "Neutral"]


class ToneAnalysis(BaseModel):
    tone: Tone


def analyze_tone(clients: AIClients, message: str, model: str = DEFAULT_MODEL) -> str:
    """Classify the primary tone of a message. Empty messages are Neutral."""
    if not message or not message.strip():
        return "Neutral"
    result = generate_structured(clients, TONE_ANALYSIS_PROMPT.format(message=message), ToneAnalysis, model)
    return result.tone


def _render_history(history: list) -> str:
    return "\n".join(
        f"{'User' if m['role'] == 'user' else 'Assistant'}: {m['content']}"
        for m in history
        if m.get("content")
    )


def chat_with_companion(
    clients: AIClients,
    history: list,
    message: str,
    image_bytes: bytes = None,
    model: str = DEFAULT_MODEL,
) -> dict:
    """Answer the user's latest message in the persona matching its tone.

    Args:
        clients: Configured AI clients
        history: Previous turns [{"role": "user" | "model", "content": "..."}]
        message: Latest user message
        image_bytes: Optional photo attached to the message (sent to Gemini)
        model: Model to use for generation

    Returns:
        {"response": str, "tone": str}
    """
    if not (message and message.strip()) and not image_bytes:
        raise ValidationError("Say something or attach a photo.")

    try:
        tone = analyze_tone(clients, message, model)
    except ValidationError:
        # Unparseable tone falls back to the neutral persona
        tone = "Neutral"
    system = AGENT_PERSONAS[tone]

    turns = [m for m in history[-MAX_HISTORY_MESSAGES:] if m.get("content")]

    if image_bytes:
        prompt = f"{system}\n\n{_render_history(turns)}\n\nUser: {message or 'What is in this photo?'}"
        reply = generate_multimodal(clients, [image_part(image_bytes)], prompt, model)
    else:
        reply = generate_chat(clients, system, turns + [{"role": "user", "content": message}], model)

    logger.info("Companion replied with %s persona", tone)
    return {"response": reply.strip() or COMPANION_FALLBACK_REPLY, "tone": tone}
