from __future__ import annotations

import logging
from typing import Any, Dict

from app.ai.itinerary_graph import PLAN_MAX_TOKENS, run_plan_graph
from app.ai.openai_client import GenerateFn, ModelConfig
from app.core.config import Settings
from app.core.errors import APIError, InternalError, InvalidFieldsError, MissingFieldError
from app.core.sanitize import sanitize_text
from app.domain.models import HistoryEntry
from app.domain.repositories import HistoryRepository

logger = logging.getLogger(__name__)

PLAN_FIELDS = ("destination", "days", "budget", "interests", "group")


class ItineraryService:
    def __init__(self, repo: HistoryRepository, generate: GenerateFn, settings: Settings):
        self.repo = repo
        self.generate = generate
        self.settings = settings
        self.model_config = ModelConfig(
            model=settings.openai_model_plan,
            temperature=settings.plan_temperature,
            max_tokens=PLAN_MAX_TOKENS,
        )

    async def create_plan(self, body: Any, user_hash: str) -> Dict[str, Any]:
        request = self.normalize_request(body)
        try:
            payload = await run_plan_graph(request, self.settings.language, self.generate, self.model_config)
        except APIError:
            raise
        except Exception as exc:
            logger.exception("Plan generation failed for %r: %s", request["destination"], exc)
            raise InternalError()

        await self.repo.append(HistoryEntry(user_hash=user_hash, request=request, response=payload))
        return payload

    def normalize_request(self, body: Any) -> Dict[str, Any]:
        """
        Reject unknown keys and non-scalar values, sanitize every value as text and
        require a destination. Numbers are accepted and stored as their text form.
        Runs before any model call.
        """
        if not isinstance(body, dict):
            raise InvalidFieldsError()
        if any(key not in PLAN_FIELDS for key in body):
            raise InvalidFieldsError()

        request: Dict[str, Any] = {}
        for key in PLAN_FIELDS:
            value = body.get(key)
            if value is None:
                request[key] = None
                continue
            # bool is an int subclass but never a meaningful plan value
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                raise InvalidFieldsError()
            request[key] = sanitize_text(str(value).strip())

        if not request["destination"]:
            raise MissingFieldError()
        return request
