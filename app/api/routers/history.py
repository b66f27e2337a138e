import re

from fastapi import APIRouter, Depends

from app.api.models.schemas import DeleteResponse, HistoryPageResponse
from app.core.identity import identify
from app.dependencies import get_history_repo
from app.domain.repositories import HistoryRepository

router = APIRouter(prefix="/history", tags=["history"])


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _as_int(value: str | None, default: int) -> int:
    """Leading-digit parse: "5.5" is 5, "2abc" is 2, "abc" falls back to the default."""
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else default


@router.get("", response_model=HistoryPageResponse)
async def list_history(
    page: str | None = None,
    limit: str | None = None,
    user_hash: str = Depends(identify),
    repo: HistoryRepository = Depends(get_history_repo),
):
    result = await repo.query_by_identity(user_hash, _as_int(page, 1), _as_int(limit, 10))
    return result.to_dict()


@router.delete("/{entry_id}", response_model=DeleteResponse)
async def delete_history_entry(
    entry_id: str,
    user_hash: str = Depends(identify),
    repo: HistoryRepository = Depends(get_history_repo),
):
    await repo.delete_by_id(entry_id, user_hash)
    return DeleteResponse(success=True)
