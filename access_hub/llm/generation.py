"""LLM text generation abstraction across providers, plus schema-validated JSON output."""

import logging

from google.genai import types
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from access_hub.config import DEFAULT_MULTIMODAL_MODEL, LLM_MODELS
from access_hub.errors import ConfigurationError, ValidationError
from access_hub.llm.clients import AIClients
from access_hub.utils import parse_llm_json

logger = logging.getLogger(__name__)


def get_gemini_model_for_multimodal(model: str) -> str:
    """Map model preference to Gemini model for multimodal requests.

    For image and video input, we must use Gemini.
    """
    if model and model.startswith("gemini"):
        return model
    return DEFAULT_MULTIMODAL_MODEL


def generate_with_llm(clients: AIClients, prompt: str, model: str) -> str:
    """Generate text using the specified LLM model."""
    return generate_chat(clients, None, [{"role": "user", "content": prompt}], model)


def generate_chat(clients: AIClients, system: str | None, messages: list, model: str) -> str:
    """Generate a reply to a conversation.

    Args:
        clients: Configured AI clients
        system: Optional system instruction
        messages: List of {"role": "user" | "model", "content": str}, oldest first
        model: Model to use

    Returns:
        The reply text ("" if the provider returned nothing)
    """
    if model.startswith("gemini"):
        contents = [
            types.Content(role=m["role"], parts=[types.Part.from_text(text=m["content"])])
            for m in messages
        ]
        config = types.GenerateContentConfig(system_instruction=system) if system else None
        response = clients.gemini.models.generate_content(
            model=model,
            contents=contents,
            config=config,
        )
        return response.text or ""
    elif model.startswith("gpt"):
        if not clients.openai:
            raise ConfigurationError("OpenAI API key not configured")
        chat = [{"role": "system", "content": system}] if system else []
        chat += [
            {"role": "assistant" if m["role"] == "model" else "user", "content": m["content"]}
            for m in messages
        ]
        response = clients.openai.chat.completions.create(model=model, messages=chat)
        return response.choices[0].message.content or ""
    elif model.startswith("claude"):
        if not clients.anthropic:
            raise ConfigurationError("Anthropic API key not configured")
        kwargs = {"system": system} if system else {}
        response = clients.anthropic.messages.create(
            model=model,
            max_tokens=4096,
            messages=[
                {"role": "assistant" if m["role"] == "model" else "user", "content": m["content"]}
                for m in messages
            ],
            **kwargs,
        )
        return response.content[0].text if response.content else ""
    else:
        raise ConfigurationError(f"Unknown model: {model}")


def generate_multimodal(clients: AIClients, parts: list, prompt: str, model: str) -> str:
    """Send media parts (images, uploaded files) followed by a prompt to Gemini."""
    response = clients.gemini.models.generate_content(
        model=get_gemini_model_for_multimodal(model),
        contents=[*parts, prompt],
    )
    return response.text or ""


def validate_response(text: str, schema: type[BaseModel]):
    """Parse an LLM response as JSON and validate it against ``schema``.

    Raises ValidationError when the output does not match; the caller may
    retry or show the error.
    """
    data = parse_llm_json(text)
    try:
        return schema.model_validate(data)
    except SchemaError as e:
        logger.warning("%s response did not match schema: %s", schema.__name__, e.errors()[:3])
        raise ValidationError(f"The AI response did not match {schema.__name__}.") from e


def generate_structured(
    clients: AIClients,
    prompt: str,
    schema: type[BaseModel],
    model: str,
    parts: list = None,
):
    """Generate and validate a JSON response. With ``parts`` the request goes to Gemini."""
    if parts:
        text = generate_multimodal(clients, parts, prompt, model)
    else:
        text = generate_with_llm(clients, prompt, model)
    return validate_response(text, schema)


def get_available_models(clients: AIClients) -> list:
    """Return list of models that have API keys configured."""
    available = LLM_MODELS["Gemini"].copy()  # Gemini always available
    if clients.openai:
        available.extend(LLM_MODELS["OpenAI"])
    if clients.anthropic:
        available.extend(LLM_MODELS["Anthropic"])
    return available
