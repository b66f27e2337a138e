import json
from datetime import datetime
from typing import Any, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.dependencies import (
    get_banner_service,
    get_generate,
    get_history_repo,
    get_trending_service,
)
from app.domain.cache import TimeBucketCache
from app.domain.repositories import InMemoryHistoryRepository
from app.domain.services.banner_service import BannerService
from app.domain.services.trending_service import TrendingService
from app.main import app

TOKYO_PLAN = {
    "summary": "Tres días en Tokio",
    "itinerary": [
        {
            "day": 1,
            "date": "2026-05-01",
            "summary": "Shibuya y Harajuku",
            "activities": [{"time": "Mañana", "title": "Meiji Jingu", "desc": "Paseo por el santuario"}],
        }
    ],
}


class FakeModel:
    """Stands in for the model provider: replays queued replies and records every call."""

    def __init__(self, *replies: Optional[str]):
        self.replies: List[Any] = list(replies)
        self.calls: List[Tuple[Any, Any]] = []

    async def __call__(self, prompt, config):
        self.calls.append((prompt, config))
        reply = self.replies.pop(0) if self.replies else None
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def test_settings() -> Settings:
    return Settings(openai_api_key="", language="Spanish", history_file="unused.json")


@pytest.fixture
def repo() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel(json.dumps(TOKYO_PLAN))


@pytest.fixture
def client(repo, fake_model, test_settings):
    trending_cache = TimeBucketCache("trending")
    banner_cache = TimeBucketCache("banner")
    app.dependency_overrides[get_history_repo] = lambda: repo
    app.dependency_overrides[get_generate] = lambda: fake_model
    app.dependency_overrides[get_trending_service] = lambda: TrendingService(repo=repo, cache=trending_cache)
    app.dependency_overrides[get_banner_service] = lambda: BannerService(
        generate=fake_model, cache=banner_cache, settings=test_settings
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
