# LLM layer - AI client initialization and text generation

from access_hub.llm.clients import (
    AIClients,
    init_ai_clients,
)

from access_hub.llm.generation import (
    generate_with_llm,
    generate_chat,
    generate_multimodal,
    generate_structured,
    validate_response,
    get_available_models,
    get_gemini_model_for_multimodal,
)

__all__ = [
    # Clients
    "AIClients",
    "init_ai_clients",
    # Generation
    "generate_with_llm",
    "generate_chat",
    "generate_multimodal",
    "generate_structured",
    "validate_response",
    "get_available_models",
    "get_gemini_model_for_multimodal",
]
