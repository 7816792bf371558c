# restobot/api/routes/chat.py
# Customer chat endpoint

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from restobot.api.dependencies import get_chat_service, get_store
from restobot.api.schemas import ChatRequest, ChatResponse
from restobot.core.chat import ChatService
from restobot.services.llm_client import set_restaurant_context
from restobot.services.store import RestaurantStore

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    store: Annotated[RestaurantStore, Depends(get_store)],
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
):
    if not request.restaurantId or not request.message:
        raise HTTPException(status_code=400, detail="restaurantId and message required")

    restaurant = store.get(request.restaurantId)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")

    set_restaurant_context(request.restaurantId)

    # Collaborator failures come back as a fallback reply, never an error status
    reply = await chat_service.respond(
        restaurant,
        request.message,
        history=[turn.model_dump() for turn in request.history],
    )
    return ChatResponse(reply=reply.text)
