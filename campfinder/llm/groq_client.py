from __future__ import annotations

import json
import logging
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)


class LLMUnavailable(RuntimeError):
    """The LLM is disabled or has no credentials."""


def chat_json(
    messages: list[dict[str, str]],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    max_tokens: int | None = None,
    temperature: float = 0.1,
) -> dict[str, Any]:
    """
    Run a JSON-mode chat completion and return the decoded object.

    Raises ``LLMUnavailable`` when disabled; API errors and invalid JSON
    propagate so callers can choose their own fallback.
    """
    if not config.enabled or not config.api_key:
        raise LLMUnavailable("Groq LLM is not configured")

    client = Groq(api_key=config.api_key, timeout=config.timeout)
    response = client.chat.completions.create(
        model=config.model,
        messages=messages,
        max_tokens=max_tokens or config.max_tokens,
        temperature=temperature,
        response_format={"type": "json_object"},
    )

    content = response.choices[0].message.content or "{}"
    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise ValueError("Expected a JSON object from the LLM")
    logger.debug("Groq returned %d keys", len(parsed))
    return parsed
