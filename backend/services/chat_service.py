"""
Chat relay for the FitCoach AI trainer.

Handles:
- Bounded prompt construction (system instructions, category intake
  questions on new sessions, a short window of session history)
- The chat completion call via the ChatCompletionClient port
- Keyword-based exercise video recommendations
- Persisting both sides of the exchange under one session ID
- Follow-up suggestion chips
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from application.ports.chat_repository import ChatRepository, VideoRepository
from application.ports.completion_client import ChatCompletionClient
from domain.models.video import VideoRecord

logger = logging.getLogger(__name__)


FITNESS_COACH_SYSTEM_PROMPT = """You are FitCoach AI, an expert fitness trainer and nutritionist with over 10 years of experience.

Provide personalized, friendly, and expert advice about:
- Workout routines and exercise form
- Nutrition and dietary guidance for fitness goals
- Motivation and adherence strategies
- General health and wellness tips

Always use emojis 🏋️‍♀️ and friendly language while maintaining professionalism.
Keep responses clear, concise, and actionable."""

FALLBACK_REPLY = (
    "I'm having trouble connecting to my fitness database right now. "
    "Can you try again in a moment? 🏋️‍♂️"
)

MAX_MESSAGE_CHARS = 2000
HISTORY_MESSAGES = 6
MAX_SUGGESTED_VIDEOS = 3
MAX_PREVIOUS_SESSIONS = 10

CATEGORY_QUESTIONS: Dict[str, List[str]] = {
    "workout": [
        "What is your current fitness level (beginner, intermediate, advanced)?",
        "How many days per week can you train, and for how long?",
        "What equipment do you have access to?",
    ],
    "diet": [
        "Do you follow any specific diet or have food allergies?",
        "How many meals do you usually eat per day?",
        "Is your goal to lose fat, build muscle, or maintain?",
    ],
    "goals": [
        "What is the main goal you want to reach?",
        "By when would you like to reach it?",
        "What has stopped you from reaching it before?",
    ],
    "health": [
        "Do you have any injuries or medical conditions I should know about?",
        "How many hours do you sleep on average?",
        "How would you rate your daily stress level?",
    ],
}

# Keyword found in the reply or message -> muscle group / category to search
VIDEO_KEYWORDS: Dict[str, str] = {
    "push-up": "chest",
    "pushup": "chest",
    "bench press": "chest",
    "chest": "chest",
    "squat": "legs",
    "lunge": "legs",
    "legs": "legs",
    "deadlift": "back",
    "pull-up": "back",
    "row": "back",
    "plank": "core",
    "crunch": "core",
    "core": "core",
    "abs": "core",
    "shoulder": "shoulders",
    "bicep": "arms",
    "tricep": "arms",
    "upper body": "upper body",
    "cardio": "cardio",
    "hiit": "cardio",
    "jumping jack": "cardio",
    "burpee": "cardio",
    "stretch": "flexibility",
    "yoga": "flexibility",
    "mobility": "flexibility",
}

DEFAULT_SUGGESTIONS: List[Dict[str, str]] = [
    {"id": "1", "text": "Create a personalized workout", "category": "workout"},
    {"id": "2", "text": "Help me improve my fitness", "category": "goals"},
    {"id": "3", "text": "Nutrition advice for gains", "category": "diet"},
    {"id": "4", "text": "Track my fitness progress", "category": "goals"},
]


@dataclass
class ChatRelayRequest:
    message: str
    user_id: str
    category: Optional[str] = None
    is_new_session: bool = True
    session_id: Optional[str] = None


@dataclass
class ChatRelayResponse:
    """Relay outcome. error is set (and status_code is 500) on upstream failure."""

    reply: str
    session_id: Optional[str] = None
    suggested_videos: List[VideoRecord] = field(default_factory=list)
    previous_sessions: List[Dict[str, Any]] = field(default_factory=list)
    suggestions: List[Dict[str, str]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def status_code(self) -> int:
        return 500 if self.error else 200


def match_video_terms(*texts: str) -> List[str]:
    """Distinct search terms for every keyword found, in table order."""
    haystack = " ".join(texts).lower()
    terms: List[str] = []
    for keyword, term in VIDEO_KEYWORDS.items():
        if keyword in haystack and term not in terms:
            terms.append(term)
    return terms


def generate_suggestions(user_input: str, reply: str) -> List[Dict[str, str]]:
    """Follow-up suggestion chips based on the conversation topic."""
    lower_input = user_input.lower()
    lower_reply = reply.lower()
    suggestions: List[Dict[str, str]] = []

    if "workout" in lower_input or "exercise" in lower_input or "workout plan" in lower_reply:
        suggestions.append({"id": "w1", "text": "Show me upper body exercises", "category": "workout"})
        suggestions.append({"id": "w2", "text": "I need a cardio routine", "category": "workout"})

    if any(word in lower_input for word in ("diet", "food", "eat")) or "nutrition" in lower_reply:
        suggestions.append({"id": "d1", "text": "Protein-rich meal ideas", "category": "diet"})
        suggestions.append({"id": "d2", "text": "Post-workout nutrition", "category": "diet"})

    if "goal" in lower_input or "target" in lower_input or "goal" in lower_reply:
        suggestions.append({"id": "g1", "text": "Set a weight loss goal", "category": "goals"})
        suggestions.append({"id": "g2", "text": "Track my progress", "category": "goals"})

    if not suggestions:
        return list(DEFAULT_SUGGESTIONS)
    return suggestions + DEFAULT_SUGGESTIONS[:2]


class ChatRelay:
    """Stateless request/response relay to the chat-completion provider."""

    def __init__(
        self,
        completion_client: ChatCompletionClient,
        chat_repo: ChatRepository,
        video_repo: VideoRepository,
    ):
        """
        Initialize the relay.

        Args:
            completion_client: Chat-completion provider
            chat_repo: Conversation persistence
            video_repo: Exercise video catalog
        """
        self.completion_client = completion_client
        self.chat_repo = chat_repo
        self.video_repo = video_repo

    def build_messages(self, request: ChatRelayRequest, session_id: str) -> List[Dict[str, str]]:
        """Build the bounded prompt for one turn."""
        system = FITNESS_COACH_SYSTEM_PROMPT
        questions = CATEGORY_QUESTIONS.get((request.category or "").lower())
        if request.is_new_session and questions:
            numbered = "\n".join(f"{i}. {q}" for i, q in enumerate(questions, start=1))
            system += (
                f"\n\nThe user chose the '{request.category}' topic. "
                f"Ask these intake questions before giving a full plan:\n{numbered}"
            )

        messages = [{"role": "system", "content": system}]

        if not request.is_new_session:
            history = self.chat_repo.get_session_messages(
                request.user_id, session_id, limit=HISTORY_MESSAGES
            )
            for row in history:
                messages.append(
                    {
                        "role": "user" if row.get("is_user") else "assistant",
                        "content": str(row.get("message", ""))[:MAX_MESSAGE_CHARS],
                    }
                )

        messages.append({"role": "user", "content": request.message[:MAX_MESSAGE_CHARS]})
        return messages

    def relay(self, request: ChatRelayRequest) -> ChatRelayResponse:
        session_id = request.session_id or str(uuid.uuid4())
        if request.session_id is None:
            logger.info(f"Created new chat session: {session_id} for user: {request.user_id}")

        try:
            messages = self.build_messages(request, session_id)
            reply = self.completion_client.complete(
                messages,
                user_id=request.user_id,
                session_id=session_id,
            )
        except Exception as e:
            logger.error(f"Error processing fitness AI chat: {e}")
            return ChatRelayResponse(reply=FALLBACK_REPLY, error=str(e) or type(e).__name__)

        videos = self._recommend_videos(session_id, request.message, reply)
        self._persist_exchange(request, session_id, reply)
        previous_sessions = self.chat_repo.list_sessions(request.user_id, limit=MAX_PREVIOUS_SESSIONS)

        return ChatRelayResponse(
            reply=reply,
            session_id=session_id,
            suggested_videos=videos,
            previous_sessions=previous_sessions,
            suggestions=generate_suggestions(request.message, reply),
        )

    def _recommend_videos(self, session_id: str, message: str, reply: str) -> List[VideoRecord]:
        terms = match_video_terms(reply, message)
        if not terms:
            return []

        videos: List[VideoRecord] = []
        seen = set()
        for video in self.video_repo.find_by_terms(terms, limit=MAX_SUGGESTED_VIDEOS):
            if video.id not in seen:
                seen.add(video.id)
                videos.append(video)
        videos = videos[:MAX_SUGGESTED_VIDEOS]

        if videos and not self.chat_repo.save_video_recommendations(session_id, [v.id for v in videos]):
            logger.warning(f"Failed to record video recommendations for session {session_id}")
        return videos

    def _persist_exchange(self, request: ChatRelayRequest, session_id: str, reply: str) -> None:
        for text, is_user in ((request.message, True), (reply, False)):
            saved = self.chat_repo.save_message(
                request.user_id,
                session_id,
                text,
                is_user=is_user,
                category=request.category,
            )
            if not saved:
                logger.error(f"Failed to persist chat message for session {session_id}")
