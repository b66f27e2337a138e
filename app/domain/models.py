from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4


def _new_entry_id() -> str:
    return f"hst_{uuid4().hex}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class HistoryEntry:
    user_hash: str
    request: Dict[str, Any]
    response: Dict[str, Any]
    id: str = field(default_factory=_new_entry_id)
    timestamp: str = field(default_factory=_now_iso)

    def sort_key(self) -> datetime:
        return _parse_dt(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userHash": self.user_hash,
            "timestamp": self.timestamp,
            "request": self.request,
            "response": self.response,
        }

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "HistoryEntry":
        request = row.get("request") or {}
        response = row.get("response") or {}
        if not isinstance(request, dict) or not isinstance(response, dict):
            raise TypeError(f"history row {row.get('id')!r} has a non-object request or response")
        return cls(
            id=str(row["id"]),
            user_hash=str(row.get("userHash", "")),
            timestamp=str(row.get("timestamp") or _now_iso()),
            request=request,
            response=response,
        )


def _parse_dt(value: str) -> datetime:
    if value.endswith("Z"):
        value = value.replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class HistoryPage:
    page: int
    total_pages: int
    total: int
    results: List[HistoryEntry]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "totalPages": self.total_pages,
            "total": self.total,
            "results": [entry.to_dict() for entry in self.results],
        }
