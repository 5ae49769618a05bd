"""AI client initialization for Gemini, OpenAI, and Anthropic."""

from dataclasses import dataclass
from typing import Any

import anthropic
from google import genai
from openai import OpenAI

from access_hub.config import Settings
from access_hub.errors import ConfigurationError


@dataclass(frozen=True)
class AIClients:
    """Hosted model clients. Gemini is required; the others are optional."""
    gemini: Any
    openai: Any = None
    anthropic: Any = None


def init_ai_clients(settings: Settings) -> AIClients:
    """Initialize AI clients with API keys from settings."""
    if not settings.gemini_api_key:
        raise ConfigurationError("GEMINI_API_KEY must be set")
    gemini_client = genai.Client(api_key=settings.gemini_api_key)

    # OpenAI client (optional)
    openai_client = OpenAI(api_key=settings.openai_api_key) if settings.openai_api_key else None

    # Anthropic client (optional)
    anthropic_client = (
        anthropic.Anthropic(api_key=settings.anthropic_api_key) if settings.anthropic_api_key else None
    )

    return AIClients(gemini=gemini_client, openai=openai_client, anthropic=anthropic_client)
