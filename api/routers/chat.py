"""
Chat Router for the AI trainer.

Endpoints:
- POST /fitness-ai-chat - one request/response turn with the trainer

The relay builds a bounded prompt, calls the chat-completion provider,
recommends exercise videos and persists both sides of the exchange. An
upstream failure returns HTTP 500 with a fixed fallback reply so the
client can still render a message.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.deps import get_chat_relay, get_optional_user
from api.schemas.chat import (
    FitnessChatErrorResponse,
    FitnessChatRequest,
    FitnessChatResponse,
    SuggestedVideo,
)
from backend.services.chat_service import ChatRelay, ChatRelayRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Chat"],
)


@router.post(
    "/fitness-ai-chat",
    response_model=FitnessChatResponse,
    responses={500: {"model": FitnessChatErrorResponse}},
)
def fitness_ai_chat(
    request: FitnessChatRequest,
    auth_user_id: Optional[str] = Depends(get_optional_user),
    relay: ChatRelay = Depends(get_chat_relay),
):
    """
    Send one message to the AI trainer.

    Request Body:
        - message: The user's message
        - userId: The user the conversation belongs to
        - category: Optional topic (workout, diet, goals, health)
        - isNewSession: Whether this message starts a new conversation
        - sessionId: Conversation to continue (generated when absent)

    Returns:
        reply, sessionId, suggestedVideos, previousSessions and suggestions.
        On upstream failure: HTTP 500 with error and the fallback reply.
    """
    if auth_user_id and auth_user_id != request.user_id:
        raise HTTPException(status_code=403, detail="Cannot chat on behalf of another user")

    result = relay.relay(
        ChatRelayRequest(
            message=request.message,
            user_id=request.user_id,
            category=request.category,
            is_new_session=request.is_new_session,
            session_id=request.session_id,
        )
    )

    if result.error:
        body = FitnessChatErrorResponse(error=result.error, reply=result.reply)
        return JSONResponse(status_code=result.status_code, content=body.model_dump(by_alias=True))

    return FitnessChatResponse(
        reply=result.reply,
        session_id=result.session_id,
        suggested_videos=[SuggestedVideo(**video.model_dump()) for video in result.suggested_videos],
        previous_sessions=result.previous_sessions,
        suggestions=result.suggestions,
    )
