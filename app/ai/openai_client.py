from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union

from openai import AsyncOpenAI

from app.core.config import settings
from app.core.errors import UpstreamTimeoutError

logger = logging.getLogger(__name__)

Message = Dict[str, str]
PromptOrMessages = Union[str, List[Message]]


@dataclass(frozen=True)
class ModelConfig:
    model: str
    temperature: float
    max_tokens: int


GenerateFn = Callable[[PromptOrMessages, ModelConfig], Awaitable[Optional[str]]]

_client: Optional[AsyncOpenAI] = None

if settings.openai_api_key:
    # Retries are left to the caller.
    _client = AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0)


def get_client() -> Optional[AsyncOpenAI]:
    """Returns AsyncOpenAI client if api key is configured."""
    return _client


async def generate(prompt: PromptOrMessages, config: ModelConfig) -> Optional[str]:
    """
    Run one chat completion and return the first choice's text, or None when the
    provider is not configured or returned nothing. Raises UpstreamTimeoutError when
    the call exceeds ``settings.model_timeout_seconds``.
    """
    client = get_client()
    if not client:
        logger.warning("OpenAI API key not configured; no model output for %s", config.model)
        return None

    messages = [{"role": "user", "content": prompt}] if isinstance(prompt, str) else prompt
    try:
        resp = await asyncio.wait_for(
            client.chat.completions.create(
                model=config.model,
                messages=messages,  # type: ignore[arg-type]
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            ),
            timeout=settings.model_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning("Model %s timed out after %ss", config.model, settings.model_timeout_seconds)
        raise UpstreamTimeoutError()
    if not resp.choices:
        return None
    return resp.choices[0].message.content
