from fastapi import APIRouter, Depends

from app.api.models.schemas import ChatRequest, ChatResponse
from app.core.identity import identify
from app.dependencies import get_chat_service
from app.domain.services.chat_service import ChatService

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    user_hash: str = Depends(identify),
    chat_svc: ChatService = Depends(get_chat_service),
):
    return await chat_svc.handle_chat(body.messages, body.group, user_hash)
