"""Easy-read text, sign cards and news article summaries."""

from pydantic import BaseModel, Field

from access_hub.config import (
    DEFAULT_MODEL,
    EASY_READ_PROMPT,
    SIGN_CARDS_PROMPT,
    SUMMARIZE_ARTICLE_PROMPT,
)
from access_hub.errors import ValidationError
from access_hub.llm import AIClients, generate_structured

# Characters of article text sent to the model
MAX_ARTICLE_CHARS = 12000


class EasyReadVersion(BaseModel):
    easy_read_version: str = Field(min_length=1)


class SignCards(BaseModel):
    sign_cards: list[str]


class ArticleSummary(BaseModel):
    audio_summary: str = Field(min_length=1)
    easy_read_bullets: list[str]
    key_facts: list[str]
    sign_cards: list[str]


def _require_text(text: str, label: str) -> str:
    if not text or not text.strip():
        raise ValidationError(f"{label} cannot be empty.")
    return text.strip()


def generate_easy_read_version(clients: AIClients, text: str, model: str = DEFAULT_MODEL) -> str:
    """Rewrite text in plain, easy-to-read language."""
    text = _require_text(text, "Text")
    result = generate_structured(clients, EASY_READ_PROMPT.format(text=text), EasyReadVersion, model)
    return result.easy_read_version


def generate_sign_cards(clients: AIClients, text: str, model: str = DEFAULT_MODEL) -> list[str]:
    """Break text into key concepts, one per sign-language flashcard."""
    text = _require_text(text, "Text")
    result = generate_structured(clients, SIGN_CARDS_PROMPT.format(text=text), SignCards, model)
    return [card.strip() for card in result.sign_cards if card.strip()]


def summarize_article(clients: AIClients, article_text: str, model: str = DEFAULT_MODEL) -> ArticleSummary:
    """Summarize a news article as a spoken summary, easy-read bullets, key facts and sign cards."""
    article_text = _require_text(article_text, "Article")
    prompt = SUMMARIZE_ARTICLE_PROMPT.format(article_text=article_text[:MAX_ARTICLE_CHARS])
    return generate_structured(clients, prompt, ArticleSummary, model)
