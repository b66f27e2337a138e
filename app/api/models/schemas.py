from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ---------- Chat ----------


class ChatRequest(BaseModel):
    # messages stay loosely typed so a malformed list maps to InvalidInput, not a 422
    messages: Any = None
    group: Optional[str] = None


class ChatResponse(BaseModel):
    text: str
    parsed: Optional[Dict[str, Any]] = None


# ---------- History ----------


class HistoryEntryOut(BaseModel):
    id: str
    userHash: str
    timestamp: str
    request: Dict[str, Any]
    response: Dict[str, Any]


class HistoryPageResponse(BaseModel):
    page: int
    totalPages: int
    total: int
    results: List[HistoryEntryOut]


class DeleteResponse(BaseModel):
    success: bool = True


# ---------- Meta ----------


class TrendingItem(BaseModel):
    name: str
    tag: str


class TrendingResponse(BaseModel):
    results: List[TrendingItem] = Field(default_factory=list)


class BannerResponse(BaseModel):
    text: str
