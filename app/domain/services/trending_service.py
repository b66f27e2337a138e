from __future__ import annotations

import logging
from typing import Dict, List, Optional

from app.domain.cache import TimeBucketCache
from app.domain.models import HistoryEntry
from app.domain.repositories import HistoryRepository

logger = logging.getLogger(__name__)

RETAINED = 20
EXPOSED = 10


def destination_token(entry: HistoryEntry) -> Optional[str]:
    """
    Destination proxy for one history entry: the plan destination, or for chat entries
    the response summary. Collapses "Paris, France" and "paris" into "paris".
    """
    request = entry.request or {}
    raw = request.get("destination")
    if not raw and request.get("chat"):
        response = entry.response if isinstance(entry.response, dict) else {}
        raw = response.get("summary")
    if not raw:
        return None
    token = str(raw).lower().strip().split(",")[0].strip()
    return token or None


def rank_destinations(entries: List[HistoryEntry], limit: int = RETAINED) -> List[Dict[str, str]]:
    counts: Dict[str, int] = {}
    for entry in entries:
        token = destination_token(entry)
        if token:
            counts[token] = counts.get(token, 0) + 1
    # dicts keep insertion order and sorted() is stable, so ties stay first-seen
    ranked = sorted(counts, key=lambda token: counts[token], reverse=True)[:limit]
    return [{"name": token[:1].upper() + token[1:], "tag": token} for token in ranked]


class TrendingService:
    def __init__(self, repo: HistoryRepository, cache: TimeBucketCache[List[Dict[str, str]]]):
        self.repo = repo
        self.cache = cache

    async def compute(self) -> List[Dict[str, str]]:
        try:
            ranked = await self.cache.get_or_compute(self._aggregate)
        except Exception as exc:
            logger.exception("Trending aggregation failed: %s", exc)
            return []
        return ranked[:EXPOSED]

    async def _aggregate(self) -> List[Dict[str, str]]:
        return rank_destinations(await self.repo.all())
