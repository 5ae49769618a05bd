# Tools layer - accessibility tools (AAC board, companion, reading, learning, vision)

from access_hub.tools.aac import (
    add_phrase,
    remove_last_phrase,
)

from access_hub.tools.companion import (
    analyze_tone,
    chat_with_companion,
)

from access_hub.tools.reading import (
    generate_easy_read_version,
    generate_sign_cards,
    summarize_article,
)

from access_hub.tools.learning import (
    generate_lesson_quiz,
    daily_reflection,
)

from access_hub.tools.vision import (
    read_text_from_image,
    describe_surroundings,
    interpret_sign_language,
)

__all__ = [
    # AAC
    "add_phrase",
    "remove_last_phrase",
    # Companion
    "analyze_tone",
    "chat_with_companion",
    # Reading
    "generate_easy_read_version",
    "generate_sign_cards",
    "summarize_article",
    # Learning
    "generate_lesson_quiz",
    "daily_reflection",
    # Vision
    "read_text_from_image",
    "describe_surroundings",
    "interpret_sign_language",
]
