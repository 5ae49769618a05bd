"""AAC phrase board: tap labels to build a sentence."""

from access_hub.config import AAC_PHRASES
from access_hub.errors import ValidationError


def add_phrase(sentence: str, label: str) -> str:
    """Append a board label to the sentence, separated by a space."""
    if label not in AAC_PHRASES:
        raise ValidationError(f"Unknown phrase: {label}")
    return f"{sentence} {label}" if sentence else label


def remove_last_phrase(sentence: str) -> str:
    """Drop the most recently tapped word."""
    words = (sentence or "").split()
    return " ".join(words[:-1])
