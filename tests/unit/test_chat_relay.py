"""
Unit tests for the AI trainer ChatRelay.

Tests for:
- Prompt construction (system prompt, intake questions, history window)
- Session ID generation and persistence of both sides
- Video recommendations from keywords
- Suggestion chips
- Upstream failure returns the fallback reply with an error
"""

import pytest

pytestmark = pytest.mark.unit

from backend.services.chat_service import (
    CATEGORY_QUESTIONS,
    DEFAULT_SUGGESTIONS,
    FALLBACK_REPLY,
    FITNESS_COACH_SYSTEM_PROMPT,
    HISTORY_MESSAGES,
    MAX_MESSAGE_CHARS,
    ChatRelay,
    ChatRelayRequest,
    generate_suggestions,
    match_video_terms,
)
from tests.fakes import FakeChatCompletionClient, FakeChatRepository, create_video_repo

USER_ID = "user-1"


@pytest.fixture
def completion_client() -> FakeChatCompletionClient:
    return FakeChatCompletionClient(replies=["Start with 3 sets of push-ups and squats 💪"])


@pytest.fixture
def chat_repo() -> FakeChatRepository:
    return FakeChatRepository()


@pytest.fixture
def video_repo():
    return create_video_repo()


@pytest.fixture
def relay(completion_client, chat_repo, video_repo) -> ChatRelay:
    return ChatRelay(completion_client, chat_repo, video_repo)


class TestBuildMessages:
    """Tests for ChatRelay.build_messages()."""

    def test_new_session_with_category_adds_intake_questions(self, relay):
        messages = relay.build_messages(
            ChatRelayRequest(message="Plan my week", user_id=USER_ID, category="workout"),
            "session-1",
        )

        assert messages[0]["role"] == "system"
        assert messages[0]["content"].startswith(FITNESS_COACH_SYSTEM_PROMPT)
        for question in CATEGORY_QUESTIONS["workout"]:
            assert question in messages[0]["content"]
        assert messages[-1] == {"role": "user", "content": "Plan my week"}
        assert len(messages) == 2

    def test_continuing_session_skips_intake_and_adds_history(self, relay, chat_repo):
        for i in range(10):
            chat_repo.save_message(USER_ID, "session-1", f"msg {i}", is_user=i % 2 == 0)

        messages = relay.build_messages(
            ChatRelayRequest(
                message="And tomorrow?",
                user_id=USER_ID,
                category="workout",
                is_new_session=False,
                session_id="session-1",
            ),
            "session-1",
        )

        assert messages[0]["content"] == FITNESS_COACH_SYSTEM_PROMPT
        history = messages[1:-1]
        assert len(history) == HISTORY_MESSAGES
        assert history[-1]["content"] == "msg 9"
        assert history[-1]["role"] == "assistant"
        assert history[-2]["role"] == "user"

    def test_message_is_truncated(self, relay):
        messages = relay.build_messages(
            ChatRelayRequest(message="x" * 5000, user_id=USER_ID),
            "session-1",
        )
        assert len(messages[-1]["content"]) == MAX_MESSAGE_CHARS

    def test_unknown_category_has_no_questions(self, relay):
        messages = relay.build_messages(
            ChatRelayRequest(message="hi", user_id=USER_ID, category="astrology"),
            "session-1",
        )
        assert messages[0]["content"] == FITNESS_COACH_SYSTEM_PROMPT


class TestRelay:
    """Tests for ChatRelay.relay()."""

    def test_success_persists_both_sides(self, relay, chat_repo, completion_client):
        response = relay.relay(ChatRelayRequest(message="Give me a workout", user_id=USER_ID))

        assert response.error is None
        assert response.status_code == 200
        assert response.session_id
        rows = chat_repo.get_all()
        assert [r["is_user"] for r in rows] == [True, False]
        assert {r["session_id"] for r in rows} == {response.session_id}
        assert completion_client.calls[0]["session_id"] == response.session_id

    def test_existing_session_is_kept(self, relay):
        response = relay.relay(
            ChatRelayRequest(message="hi", user_id=USER_ID, is_new_session=False, session_id="abc-123")
        )
        assert response.session_id == "abc-123"

    def test_recommends_matching_videos(self, relay, chat_repo):
        response = relay.relay(ChatRelayRequest(message="What should I do?", user_id=USER_ID))

        ids = [v.id for v in response.suggested_videos]
        assert ids == ["video-pushup", "video-squat"]
        assert chat_repo.recommendations_for(response.session_id) == ids

    def test_no_keywords_no_videos(self, relay, video_repo, completion_client):
        completion_client.replies = ["Drink water and sleep well."]

        response = relay.relay(ChatRelayRequest(message="How do I recover?", user_id=USER_ID))

        assert response.suggested_videos == []
        assert video_repo.searches == []

    def test_previous_sessions_listed(self, relay, chat_repo):
        chat_repo.save_message(USER_ID, "older-session", "hello", is_user=True)

        response = relay.relay(ChatRelayRequest(message="hi", user_id=USER_ID))

        session_ids = [s["session_id"] for s in response.previous_sessions]
        assert session_ids == [response.session_id, "older-session"]

    def test_upstream_failure_returns_fallback(self, relay, chat_repo, completion_client):
        completion_client.error = RuntimeError("rate limited")

        response = relay.relay(ChatRelayRequest(message="hi", user_id=USER_ID))

        assert response.status_code == 500
        assert response.reply == FALLBACK_REPLY
        assert response.error == "rate limited"
        assert chat_repo.get_all() == []

    def test_persist_failure_still_replies(self, relay, chat_repo):
        chat_repo.fail_writes = True

        response = relay.relay(ChatRelayRequest(message="hi", user_id=USER_ID))

        assert response.status_code == 200


class TestHelpers:
    """Tests for keyword and suggestion helpers."""

    def test_match_video_terms_dedupes(self):
        assert match_video_terms("Squats and lunges build legs", "core plank") == ["legs", "core"]

    def test_suggestions_for_workout_topic(self):
        suggestions = generate_suggestions("I want a workout", "Here you go")

        assert suggestions[0]["category"] == "workout"
        assert suggestions[-2:] == DEFAULT_SUGGESTIONS[:2]

    def test_default_suggestions(self):
        assert generate_suggestions("hello", "hi there") == DEFAULT_SUGGESTIONS
