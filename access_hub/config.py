"""Configuration constants and environment settings."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from access_hub.errors import ConfigurationError

# Collections (Supabase tables)
HELP_REQUESTS = "help_requests"
VOLUNTEER_OFFERS = "volunteer_offers"
SESSIONS = "sessions"
POSTS = "posts"

# Store backends
STORE_SUPABASE = "supabase"
STORE_MEMORY = "memory"

# Volunteer workflow
DEFAULT_DURATION_HOURS = 1
ANONYMOUS_VOLUNTEER = "Anonymous Volunteer"
ANONYMOUS_SENDER = "Anonymous"
COORDINATOR_ROLE = "coordinator"

# Chat polling interval for open session pages
CHAT_REFRESH_SECONDS = 3

# Community feed
ANONYMOUS_AUTHOR = "Anonymous"
REACTION_RETRIES = 3

# AAC phrase board, in display order
AAC_PHRASES = ["Drink", "Eat", "Happy", "Sad", "Tired", "Home", "Day", "Night", "Yes", "No", "Help", "Please"]

# LLM Models by provider
LLM_MODELS = {
    "Gemini": ["gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.0-flash"],
    "OpenAI": ["gpt-4o", "gpt-4o-mini"],
    "Anthropic": ["claude-sonnet-4-20250514"],
}

# All models for text generation
ALL_LLM_MODELS = [model for models in LLM_MODELS.values() for model in models]

# Default model for text generation
DEFAULT_MODEL = "gemini-2.5-flash"

# Image and video understanding always runs on Gemini
DEFAULT_MULTIMODAL_MODEL = "gemini-2.5-flash"

# Upload limits
MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
MAX_VIDEO_SIZE_BYTES = 20 * 1024 * 1024  # 20MB

# File extensions without dots (for Streamlit file_uploader)
IMAGE_EXTENSIONS = ["png", "jpg", "jpeg", "webp", "heic", "heif"]
VIDEO_EXTENSIONS = ["mp4", "mov", "webm"]

# UI Dimensions
UI_CHAT_HEIGHT = 420
UI_TEXT_AREA_HEIGHT = 100


class SessionKey:
    """Session state key names to avoid typos."""
    PASSWORD_OK = "password_correct"
    PASSWORD_INPUT = "password"
    SELECTED_MODEL = "selected_model"
    SELECTED_SESSION = "selected_session"
    CURRENT_USER_NAME = "current_user_name"
    COMPANION_HISTORY = "companion_history"
    AAC_SENTENCE = "aac_sentence"


class SiblingOfferPolicy:
    """What happens to other pending offers when one offer is accepted."""
    KEEP_PENDING = "keep_pending"
    REJECT_SIBLINGS = "reject_siblings"

    ALL = (KEEP_PENDING, REJECT_SIBLINGS)


@dataclass(frozen=True)
class Settings:
    """Process-wide settings. Built once at startup and passed to constructors."""
    supabase_url: str = ""
    supabase_key: str = ""
    gemini_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    app_password: str = ""
    store_backend: str = STORE_SUPABASE
    sibling_offer_policy: str = SiblingOfferPolicy.KEEP_PENDING
    coordinator_names: frozenset = field(default_factory=frozenset)
    default_model: str = DEFAULT_MODEL
    log_level: str = "INFO"


def _lookup(key: str, secrets: Mapping | None, default: str = "") -> str:
    """Read a value from the environment first, then from the secrets mapping."""
    value = os.environ.get(key)
    if value is not None:
        return value
    if secrets is not None:
        try:
            return str(secrets.get(key, default))
        except FileNotFoundError:
            # Streamlit raises when no secrets.toml exists
            return default
    return default


def load_settings(secrets: Mapping | None = None) -> Settings:
    """Build Settings from the environment and an optional secrets mapping."""
    store_backend = _lookup("STORE_BACKEND", secrets, STORE_SUPABASE).strip().lower()
    if store_backend not in (STORE_SUPABASE, STORE_MEMORY):
        raise ConfigurationError(f"Unknown STORE_BACKEND: {store_backend}")

    policy = _lookup("SIBLING_OFFER_POLICY", secrets, SiblingOfferPolicy.KEEP_PENDING).strip().lower()
    if policy not in SiblingOfferPolicy.ALL:
        raise ConfigurationError(f"Unknown SIBLING_OFFER_POLICY: {policy}")

    coordinators = _lookup("COORDINATOR_NAMES", secrets)
    coordinator_names = frozenset(
        name.strip().lower() for name in coordinators.split(",") if name.strip()
    )

    default_model = _lookup("DEFAULT_MODEL", secrets, DEFAULT_MODEL)
    if default_model not in ALL_LLM_MODELS:
        raise ConfigurationError(f"Unknown model: {default_model}")

    return Settings(
        supabase_url=_lookup("SUPABASE_URL", secrets),
        supabase_key=_lookup("SUPABASE_SERVICE_KEY", secrets),
        gemini_api_key=_lookup("GEMINI_API_KEY", secrets),
        openai_api_key=_lookup("OPENAI_API_KEY", secrets),
        anthropic_api_key=_lookup("ANTHROPIC_API_KEY", secrets),
        app_password=_lookup("APP_PASSWORD", secrets),
        store_backend=store_backend,
        sibling_offer_policy=policy,
        coordinator_names=coordinator_names,
        default_model=default_model,
        log_level=_lookup("LOG_LEVEL", secrets, "INFO").upper(),
    )


def configure_logging(level: str = "INFO"):
    """Set the root log format once at app start."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Prompts with placeholders go through str.format, so their literal braces are doubled.

TONE_ANALYSIS_PROMPT = """You are a tone analysis expert. Analyze the following user message and classify its primary tone.
Available tones are: Friendly, Formal, Frustrated, Inquisitive, Neutral.

Message: {message}

## OUTPUT FORMAT (JSON object only, no markdown)
{{"tone": "Neutral"}}"""

AGENT_PERSONAS = {
    "Friendly": "You are a warm and friendly AI assistant named Kai. Your goal is to be encouraging and personable. Use emojis occasionally.",
    "Formal": "You are a professional and precise AI assistant. Your responses should be formal, structured, and highly informative.",
    "Frustrated": "You are an empathetic and patient AI assistant named Alex. Acknowledge the user's potential frustration and offer calm, clear, step-by-step help.",
    "Inquisitive": "You are an enthusiastic and curious AI assistant named Charlie. Encourage exploration, ask clarifying questions, and share interesting related facts.",
    "Neutral": "You are a helpful and direct AI assistant. Get straight to the point and provide the information requested.",
}

COMPANION_FALLBACK_REPLY = "I am not sure how to respond to that. Could you please rephrase?"

EASY_READ_PROMPT = """You are an expert in simplifying complex text into an easy-to-read format.

Please convert the following text into an easy-to-read version, suitable for people with learning disabilities or those who prefer simpler language. Maintain the original meaning and intent.

Text: {text}

## OUTPUT FORMAT (JSON object only, no markdown)
{{"easy_read_version": "..."}}"""

SIGN_CARDS_PROMPT = """You are an expert in linguistics and sign language. Analyze the following text and break it down into a series of individual concepts or words that can be represented as sign language flashcards.
Focus on the most important keywords and ideas.

Text: {text}

## OUTPUT FORMAT (JSON object only, no markdown)
{{"sign_cards": ["word", "concept"]}}"""

SUMMARIZE_ARTICLE_PROMPT = """You are an AI assistant that summarizes news articles and generates related content in various formats.

Article Text: {article_text}

Instructions:
1. Create a text summary of the article, suitable for text-to-speech. This will be the value for "audio_summary".
2. Extract key facts from the article.
3. Generate easy-to-read bullet points summarizing the article.
4. Generate sign cards (short keywords) related to the article content.

## OUTPUT FORMAT (JSON object only, no markdown)
{{"audio_summary": "...", "easy_read_bullets": ["..."], "key_facts": ["..."], "sign_cards": ["..."]}}"""

LESSON_QUIZ_PROMPT = """You are an expert curriculum developer. Based on the following lesson text, create a multiple-choice quiz with 3 to 5 questions to test the user's understanding.
For each question, provide 4 options and identify the index of the correct answer. Ensure the questions are directly related to the provided text.

Lesson Text: {lesson_text}

## OUTPUT FORMAT (JSON object only, no markdown)
{{"quiz": [{{"question": "...", "options": ["a", "b", "c", "d"], "correct_answer_index": 0}}]}}"""

DAILY_REFLECTION_PROMPT = """You are a supportive AI companion designed to provide reflections on user input. The input can be a single word, a short sentence, or even an indication of silence.

Your reflections should be:
- Tentative: Offer possible interpretations rather than definitive statements.
- Open to validation: Encourage the user to confirm or deny the accuracy of the reflection.
- Non-judgmental: Avoid any form of criticism, advice, or evaluation.

Here's the user's input: {entry}

Provide a brief reflection that embodies these qualities.

## OUTPUT FORMAT (JSON object only, no markdown)
{{"reflection": "..."}}"""

READ_TEXT_PROMPT = """You are an Optical Character Recognition (OCR) expert. Extract all text from this image.
Preserve reading order and line breaks.

## OUTPUT FORMAT (JSON object only, no markdown)
{"text": "..."}"""

DESCRIBE_SURROUNDINGS_PROMPT = """You are an expert at describing scenes for visually impaired users. Your descriptions should be clear, concise, and focus on the most important elements, including objects, people, and potential obstacles.

Analyze this image and provide a helpful description.

## OUTPUT FORMAT (JSON object only, no markdown)
{"description": "..."}"""

INTERPRET_SIGN_PROMPT = """You are an expert American Sign Language (ASL) interpreter. Watch this video clip and translate the signs into written English text.

## OUTPUT FORMAT (JSON object only, no markdown)
{"text": "..."}"""
