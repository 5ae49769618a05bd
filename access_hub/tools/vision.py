"""Reading text aloud, describing surroundings and interpreting sign language (Gemini only)."""

import logging

from pydantic import BaseModel

from access_hub.config import (
    DEFAULT_MULTIMODAL_MODEL,
    DESCRIBE_SURROUNDINGS_PROMPT,
    INTERPRET_SIGN_PROMPT,
    READ_TEXT_PROMPT,
)
from access_hub.llm import AIClients, generate_structured
from access_hub.tools.media import image_part, upload_video_to_gemini

logger = logging.getLogger(__name__)


class ExtractedText(BaseModel):
    text: str


class SceneDescription(BaseModel):
    description: str


def read_text_from_image(clients: AIClients, image_bytes: bytes, model: str = DEFAULT_MULTIMODAL_MODEL) -> str:
    """Extract all visible text from a photo (OCR)."""
    result = generate_structured(
        clients, READ_TEXT_PROMPT, ExtractedText, model, parts=[image_part(image_bytes)]
    )
    return result.text.strip()


def describe_surroundings(clients: AIClients, image_bytes: bytes, model: str = DEFAULT_MULTIMODAL_MODEL) -> str:
    """Describe a scene for a visually impaired user."""
    result = generate_structured(
        clients, DESCRIBE_SURROUNDINGS_PROMPT, SceneDescription, model, parts=[image_part(image_bytes)]
    )
    return result.description.strip()


def interpret_sign_language(
    clients: AIClients,
    video_bytes: bytes,
    suffix: str = ".mp4",
    model: str = DEFAULT_MULTIMODAL_MODEL,
) -> str:
    """Translate a sign-language video clip into English text."""
    video = upload_video_to_gemini(clients, video_bytes, suffix)
    try:
        result = generate_structured(clients, INTERPRET_SIGN_PROMPT, ExtractedText, model, parts=[video])
    finally:
        clients.gemini.files.delete(name=video.name)
    logger.info("Interpreted sign video %s", video.name)
    return result.text.strip()
