from typing import Dict, List

from fastapi import Depends

from app.ai.openai_client import GenerateFn, generate
from app.core.config import Settings, get_settings, settings
from app.domain.cache import TimeBucketCache
from app.domain.repositories import HistoryRepository, JsonFileHistoryRepository
from app.domain.services.banner_service import BannerService
from app.domain.services.chat_service import ChatService
from app.domain.services.itinerary_service import ItineraryService
from app.domain.services.trending_service import TrendingService

# Process-wide state: created at import, refreshed lazily, dropped at exit.
_repo: HistoryRepository = JsonFileHistoryRepository(settings.history_file)
_trending_cache: TimeBucketCache[List[Dict[str, str]]] = TimeBucketCache("trending")
_banner_cache: TimeBucketCache[str] = TimeBucketCache("banner")


def get_history_repo() -> HistoryRepository:
    return _repo


def get_generate() -> GenerateFn:
    return generate


def get_itinerary_service(
    repo: HistoryRepository = Depends(get_history_repo),
    generate_fn: GenerateFn = Depends(get_generate),
    cfg: Settings = Depends(get_settings),
) -> ItineraryService:
    return ItineraryService(repo=repo, generate=generate_fn, settings=cfg)


def get_chat_service(
    repo: HistoryRepository = Depends(get_history_repo),
    generate_fn: GenerateFn = Depends(get_generate),
    cfg: Settings = Depends(get_settings),
) -> ChatService:
    return ChatService(repo=repo, generate=generate_fn, settings=cfg)


def get_trending_service(repo: HistoryRepository = Depends(get_history_repo)) -> TrendingService:
    return TrendingService(repo=repo, cache=_trending_cache)


def get_banner_service(
    generate_fn: GenerateFn = Depends(get_generate),
    cfg: Settings = Depends(get_settings),
) -> BannerService:
    return BannerService(generate=generate_fn, cache=_banner_cache, settings=cfg)


__all__ = [
    "get_history_repo",
    "get_generate",
    "get_itinerary_service",
    "get_chat_service",
    "get_trending_service",
    "get_banner_service",
    "settings",
]
