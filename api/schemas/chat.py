"""
Chat Schemas for the AI trainer endpoint.

Schemas for:
- FitnessChatRequest: Request body for POST /fitness-ai-chat
- FitnessChatResponse: Successful reply with video and session lists
- FitnessChatErrorResponse: Fallback body returned with HTTP 500

The web client speaks camelCase; fields are snake_case with camelCase
aliases and accept either form on input.
"""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field


class FitnessChatRequest(BaseModel):
    """Request body for POST /fitness-ai-chat."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(
        ...,
        description="User's message to the trainer",
        min_length=1,
        max_length=10000,
    )
    user_id: str = Field(..., alias="userId", min_length=1)
    category: Optional[str] = Field(
        default=None,
        description="Conversation topic (workout, diet, goals, health)",
        max_length=50,
    )
    is_new_session: bool = Field(default=True, alias="isNewSession")
    session_id: Optional[str] = Field(
        default=None,
        alias="sessionId",
        description="Existing session ID to continue. Null starts a new session.",
        min_length=1,
        max_length=64,
        pattern=r"^[a-zA-Z0-9\-_]+$",
    )


class SuggestedVideo(BaseModel):
    """An exercise video recommended alongside a reply."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    category: str = ""
    muscle_group: str = Field(default="", alias="muscleGroup")
    difficulty: str = ""
    video_url: str = Field(..., alias="videoUrl")
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")


class ChatSuggestion(BaseModel):
    """A follow-up prompt chip."""
    id: str
    text: str
    category: str


class FitnessChatResponse(BaseModel):
    """Response body for a successful POST /fitness-ai-chat."""
    model_config = ConfigDict(populate_by_name=True)

    reply: str
    session_id: str = Field(..., alias="sessionId")
    suggested_videos: List[SuggestedVideo] = Field(default_factory=list, alias="suggestedVideos")
    previous_sessions: List[Dict[str, Any]] = Field(default_factory=list, alias="previousSessions")
    suggestions: List[ChatSuggestion] = Field(default_factory=list)


class FitnessChatErrorResponse(BaseModel):
    """Body returned with HTTP 500 when the completion call fails."""
    model_config = ConfigDict(populate_by_name=True)

    error: str
    reply: str
    suggested_videos: List[SuggestedVideo] = Field(default_factory=list, alias="suggestedVideos")
    previous_sessions: List[Dict[str, Any]] = Field(default_factory=list, alias="previousSessions")
