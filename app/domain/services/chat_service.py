from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from app.ai.openai_client import GenerateFn, Message, ModelConfig
from app.ai.parser import try_parse_model_json
from app.ai.prompts import build_chat_system_prompt
from app.core.config import Settings
from app.core.errors import APIError, InternalError, InvalidInputError, UpstreamEmptyError
from app.core.sanitize import sanitize_text
from app.domain.models import HistoryEntry
from app.domain.repositories import HistoryRepository

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.8
CHAT_MAX_TOKENS = 900


class ChatService:
    def __init__(self, repo: HistoryRepository, generate: GenerateFn, settings: Settings):
        self.repo = repo
        self.generate = generate
        self.settings = settings
        self.model_config = ModelConfig(
            model=settings.openai_model_chat,
            temperature=CHAT_TEMPERATURE,
            max_tokens=CHAT_MAX_TOKENS,
        )

    async def handle_chat(self, messages: Any, group: Optional[str], user_hash: str) -> Dict[str, Any]:
        sanitized = self.sanitize_messages(messages)
        if isinstance(group, str):
            group = sanitize_text(group.strip()) or None

        system: Message = {"role": "system", "content": build_chat_system_prompt(self.settings.language, group)}
        try:
            text = await self.generate([system, *sanitized], self.model_config)
        except APIError:
            raise
        except Exception as exc:
            logger.exception("Chat completion failed: %s", exc)
            raise InternalError()
        if not text:
            raise UpstreamEmptyError()

        # Chat replies may be purely conversational; no JSON is a valid outcome.
        parsed = try_parse_model_json(text)
        if parsed and parsed.get("itinerary"):
            snippet = sanitized[-1]["content"] if sanitized else ""
            entry = HistoryEntry(
                user_hash=user_hash,
                request={"chat": True, "group": group, "snippet": snippet},
                response=parsed,
            )
            await self.repo.append(entry)

        return {"text": text, "parsed": parsed}

    def sanitize_messages(self, messages: Any) -> List[Message]:
        if not isinstance(messages, list):
            raise InvalidInputError()
        sanitized: List[Message] = []
        for message in messages:
            if not isinstance(message, dict) or not isinstance(message.get("role"), str):
                raise InvalidInputError()
            content = message.get("content")
            sanitized.append(
                {
                    "role": message["role"],
                    "content": sanitize_text(content) if isinstance(content, str) else "",
                }
            )
        return sanitized
