from fastapi import APIRouter, Depends

from app.api.models.schemas import BannerResponse, TrendingResponse
from app.dependencies import get_banner_service, get_trending_service
from app.domain.services.banner_service import BannerService
from app.domain.services.trending_service import TrendingService

router = APIRouter(tags=["meta"])


@router.get("/trending", response_model=TrendingResponse)
async def trending(svc: TrendingService = Depends(get_trending_service)):
    return {"results": await svc.compute()}


@router.get("/banner", response_model=BannerResponse)
async def banner(svc: BannerService = Depends(get_banner_service)):
    return {"text": await svc.compute()}
