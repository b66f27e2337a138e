from typing import Any

from fastapi import APIRouter, Body, Depends

from app.core.identity import identify
from app.dependencies import get_itinerary_service
from app.domain.services.itinerary_service import ItineraryService

router = APIRouter(tags=["plan"])


@router.post("/plan")
async def create_plan(
    body: Any = Body(default=None),
    user_hash: str = Depends(identify),
    svc: ItineraryService = Depends(get_itinerary_service),
):
    return await svc.create_plan(body, user_hash)
