from abc import ABC, abstractmethod
import asyncio
import json
import logging
import math
import os
from pathlib import Path
import tempfile
from typing import Any, Dict, List

from app.core.errors import ForbiddenError, NotFoundError

from .models import HistoryEntry, HistoryPage

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50


class HistoryRepository(ABC):
    """
    Append-only log of itinerary exchanges. Every mutation is a read-modify-write of
    the whole collection, so mutations share one lock; reads do not take it.
    """

    def __init__(self):
        self._write_lock = asyncio.Lock()

    @abstractmethod
    async def _read_all(self) -> List[HistoryEntry]:
        raise NotImplementedError

    @abstractmethod
    async def _write_all(self, entries: List[HistoryEntry]) -> None:
        raise NotImplementedError

    async def all(self) -> List[HistoryEntry]:
        return await self._read_all()

    async def append(self, entry: HistoryEntry) -> HistoryEntry:
        async with self._write_lock:
            entries = await self._read_all()
            entries.append(entry)
            await self._persist(entries)
        return entry

    async def query_by_identity(self, user_hash: str, page: int = 1, limit: int = 10) -> HistoryPage:
        page = max(1, page)
        limit = max(1, min(MAX_PAGE_SIZE, limit))
        owned = [entry for entry in await self._read_all() if entry.user_hash == user_hash]
        owned.sort(key=lambda entry: entry.sort_key(), reverse=True)
        total = len(owned)
        start = (page - 1) * limit
        return HistoryPage(
            page=page,
            total_pages=max(1, math.ceil(total / limit)),
            total=total,
            results=owned[start : start + limit],
        )

    async def delete_by_id(self, entry_id: str, requester_hash: str) -> None:
        async with self._write_lock:
            entries = await self._read_all()
            idx = next((i for i, entry in enumerate(entries) if entry.id == entry_id), None)
            if idx is None:
                raise NotFoundError()
            if entries[idx].user_hash != requester_hash:
                raise ForbiddenError()
            entries.pop(idx)
            await self._persist(entries)

    async def _persist(self, entries: List[HistoryEntry]) -> None:
        # Write failures never reach the caller; the request that produced the entry still succeeds.
        try:
            await self._write_all(entries)
        except Exception as exc:
            logger.exception("Failed to persist history (%d entries): %s", len(entries), exc)


class InMemoryHistoryRepository(HistoryRepository):
    def __init__(self):
        super().__init__()
        self._rows: List[Dict[str, Any]] = []

    async def _read_all(self) -> List[HistoryEntry]:
        return [HistoryEntry.from_dict(row) for row in self._rows]

    async def _write_all(self, entries: List[HistoryEntry]) -> None:
        self._rows = [entry.to_dict() for entry in entries]


class JsonFileHistoryRepository(HistoryRepository):
    """
    Stores the whole history as one pretty-printed JSON array. An unreadable or
    corrupt file reads as an empty history.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)

    def ensure_file(self) -> None:
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("[]", encoding="utf-8")
        logger.info("Initialized empty history file at %s", self.path)

    async def _read_all(self) -> List[HistoryEntry]:
        return await asyncio.to_thread(self._read_sync)

    async def _write_all(self, entries: List[HistoryEntry]) -> None:
        rows = [entry.to_dict() for entry in entries]
        await asyncio.to_thread(self._write_sync, rows)

    def _read_sync(self) -> List[HistoryEntry]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning("Could not read history file %s: %s", self.path, exc)
            return []
        try:
            rows = json.loads(raw or "[]")
        except json.JSONDecodeError as exc:
            logger.warning("History file %s is not valid JSON, treating as empty: %s", self.path, exc)
            return []
        if not isinstance(rows, list):
            logger.warning("History file %s does not hold a JSON array, treating as empty", self.path)
            return []

        entries: List[HistoryEntry] = []
        for row in rows:
            try:
                entries.append(HistoryEntry.from_dict(row))
            except (KeyError, TypeError, AttributeError) as exc:
                logger.warning("Skipping malformed history row: %s", exc)
        return entries

    def _write_sync(self, rows: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".history-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(rows, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
