"""
LLM access - structured chat completions against an OpenAI-compatible API
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Tuple, Type, TypeVar

import requests
from pydantic import BaseModel

from clean_inbox.config import settings
from clean_inbox.models import UserEmailWithAI


logger = logging.getLogger(__name__)

PROVIDER_API_BASES = {
    "openai": "https://api.openai.com/v1",
    "openrouter": "https://openrouter.ai/api/v1",
}

T = TypeVar("T", bound=BaseModel)


class LLMError(RuntimeError):
    """The provider could not be reached or returned something unusable"""


@dataclass
class ChatCompletionResult(Generic[T]):
    object: T
    usage: Dict[str, Any] = field(default_factory=dict)


# === Model Selection ===

def get_default_model(user: UserEmailWithAI) -> Tuple[str, str]:
    """The user's own provider/model, falling back to the configured default"""
    if user.ai_provider and user.ai_model:
        return user.ai_provider, user.ai_model
    return settings.default_llm_provider, settings.default_llm_model


def get_economy_model(user: UserEmailWithAI) -> Tuple[str, str]:
    """Cheaper model for high-context tasks, when one is configured"""
    if settings.economy_llm_provider and settings.economy_llm_model:
        return settings.economy_llm_provider, settings.economy_llm_model
    return get_default_model(user)


def _api_base(provider: Optional[str]) -> str:
    return PROVIDER_API_BASES.get(provider or "", settings.llm_api_base).rstrip('/')


def _resolve_api_key(user_ai: UserEmailWithAI) -> str:
    if user_ai.ai_api_key:
        return user_ai.ai_api_key
    if settings.llm_api_key:
        return settings.llm_api_key
    raise LLMError("Provide an API key via the user's AI settings or the LLM_API_KEY environment variable.")


# === Completions ===

def _post_chat_completion(api_base: str, api_key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    try:
        response = requests.post(
            f"{api_base}/chat/completions",
            json=payload,
            headers=headers,
            timeout=settings.llm_timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise LLMError(f"Failed to reach LLM provider: {exc}") from exc

    try:
        return response.json()
    except ValueError as exc:
        raise LLMError(f"LLM provider returned invalid JSON: {exc}") from exc


async def chat_completion_object(
    system: str,
    prompt: str,
    schema: Type[T],
    usage_label: str,
    user_ai: UserEmailWithAI,
    user_email: Optional[str] = None
) -> ChatCompletionResult[T]:
    """Run one completion and validate the reply against a pydantic schema

    Raises LLMError for transport/response problems and pydantic's
    ValidationError when the content does not match the schema.
    """
    provider, model = get_default_model(user_ai)

    payload = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": schema.__name__,
                "schema": schema.model_json_schema(),
            },
        },
    }

    data = await asyncio.to_thread(
        _post_chat_completion, _api_base(provider), _resolve_api_key(user_ai), payload
    )

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise LLMError(f"Unexpected response format from LLM provider: {exc}") from exc

    usage = data.get("usage") or {}
    logger.info(f"LLM usage [{usage_label}] {provider}/{model} for {user_email or user_ai.email}: {usage}")

    return ChatCompletionResult(object=schema.model_validate_json(content), usage=usage)
