from __future__ import annotations

import logging

from app.ai.openai_client import GenerateFn, ModelConfig
from app.ai.prompts import build_banner_prompt
from app.core.config import Settings
from app.domain.cache import TimeBucketCache

logger = logging.getLogger(__name__)

BANNER_TEMPERATURE = 0.6
BANNER_MAX_TOKENS = 40


class BannerUnavailable(Exception):
    pass


class BannerService:
    """Daily promotional phrase. Decorative only, so every failure falls back to a fixed phrase."""

    def __init__(self, generate: GenerateFn, cache: TimeBucketCache[str], settings: Settings):
        self.generate = generate
        self.cache = cache
        self.settings = settings
        self.model_config = ModelConfig(
            model=settings.openai_model_chat,
            temperature=BANNER_TEMPERATURE,
            max_tokens=BANNER_MAX_TOKENS,
        )

    async def compute(self) -> str:
        try:
            return await self.cache.get_or_compute(self._generate_phrase)
        except Exception as exc:
            logger.warning("Banner generation failed, using fallback phrase: %s", exc)
            return self.settings.banner_fallback

    async def _generate_phrase(self) -> str:
        text = await self.generate(build_banner_prompt(self.settings.language), self.model_config)
        phrase = (text or "").strip().strip('"').strip()
        if not phrase:
            # Not cached, so the next request asks the model again.
            raise BannerUnavailable("empty banner text")
        return phrase
