"""Image and video preparation for Gemini requests."""

import io
import logging
import os
import tempfile
import time

from PIL import Image, UnidentifiedImageError
from google.genai import types

from access_hub.config import MAX_IMAGE_SIZE_BYTES, MAX_VIDEO_SIZE_BYTES
from access_hub.errors import ValidationError
from access_hub.llm import AIClients

logger = logging.getLogger(__name__)

# Supported image MIME types for Gemini
SUPPORTED_IMAGE_TYPES = {"jpeg", "png", "gif", "webp"}

# Seconds between file state checks while Gemini processes an upload
UPLOAD_POLL_SECONDS = 2

# Longest wait for Gemini to finish processing an upload
UPLOAD_TIMEOUT_SECONDS = 120


def normalize_image_for_gemini(img_bytes: bytes) -> tuple[bytes, str]:
    """Normalize image format for Gemini API compatibility.

    Args:
        img_bytes: Raw image bytes

    Returns:
        Tuple of (normalized_bytes, mime_type)
    """
    if not img_bytes:
        raise ValidationError("No image provided.")
    if len(img_bytes) > MAX_IMAGE_SIZE_BYTES:
        raise ValidationError("Image is too large.")
    try:
        img = Image.open(io.BytesIO(img_bytes))
    except UnidentifiedImageError as e:
        raise ValidationError("That file is not a readable image.") from e
    fmt = (img.format or "JPEG").lower()

    # Convert unsupported formats (MPO, HEIC, etc.) to JPEG
    if fmt not in SUPPORTED_IMAGE_TYPES:
        if img.mode != "RGB":
            img = img.convert("RGB")
        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=90)
        return buffer.getvalue(), "image/jpeg"

    mime_type = f"image/{fmt}"
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"

    return img_bytes, mime_type


def image_part(img_bytes: bytes) -> types.Part:
    """Build a Gemini content part from raw image bytes."""
    normalized_bytes, mime_type = normalize_image_for_gemini(img_bytes)
    return types.Part.from_bytes(data=normalized_bytes, mime_type=mime_type)


def upload_video_to_gemini(clients: AIClients, video_bytes: bytes, suffix: str = ".mp4"):
    """Upload a video clip to Gemini and wait for processing."""
    if not video_bytes:
        raise ValidationError("No video provided.")
    if len(video_bytes) > MAX_VIDEO_SIZE_BYTES:
        raise ValidationError("Video is too large.")

    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        tmp.write(video_bytes)
        tmp_path = tmp.name

    try:
        uploaded = clients.gemini.files.upload(file=tmp_path)

        # Wait for processing
        deadline = time.monotonic() + UPLOAD_TIMEOUT_SECONDS
        while uploaded.state.name == "PROCESSING":
            if time.monotonic() >= deadline:
                clients.gemini.files.delete(name=uploaded.name)
                raise ValidationError("Gemini took too long to process the video.")
            time.sleep(UPLOAD_POLL_SECONDS)
            uploaded = clients.gemini.files.get(name=uploaded.name)

        if uploaded.state.name == "FAILED":
            clients.gemini.files.delete(name=uploaded.name)
            raise ValidationError("Gemini could not process the video.")

        logger.info("Uploaded video %s to Gemini", uploaded.name)
        return uploaded
    finally:
        os.unlink(tmp_path)
