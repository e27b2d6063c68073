"""
Router tests for api/routers/chat.py
"""

import pytest

pytestmark = pytest.mark.unit

from backend.services.chat_service import FALLBACK_REPLY
from tests.conftest import OTHER_USER_ID, TEST_USER_ID


class TestFitnessAiChat:
    def test_reply_with_videos(self, client, fake_stack):
        fake_stack.completion_client.replies = ["Try 3 rounds of squats and a plank 💪"]

        response = client.post(
            "/fitness-ai-chat",
            json={"message": "Give me a leg day", "userId": TEST_USER_ID, "category": "workout"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["reply"] == "Try 3 rounds of squats and a plank 💪"
        assert data["sessionId"]
        assert [v["id"] for v in data["suggestedVideos"]] == ["video-squat", "video-plank"]
        assert data["suggestedVideos"][0]["videoUrl"].endswith("squat.mp4")
        assert data["previousSessions"][0]["session_id"] == data["sessionId"]
        assert data["suggestions"]

    def test_continue_session(self, client, fake_stack):
        first = client.post("/fitness-ai-chat", json={"message": "Hi", "userId": TEST_USER_ID}).json()

        client.post(
            "/fitness-ai-chat",
            json={
                "message": "And tomorrow?",
                "userId": TEST_USER_ID,
                "isNewSession": False,
                "sessionId": first["sessionId"],
            },
        )

        sent = fake_stack.completion_client.calls[-1]["messages"]
        assert [m["content"] for m in sent[1:]] == ["Hi", "Let's get moving! 🏋️", "And tomorrow?"]

    def test_upstream_failure(self, client, fake_stack):
        fake_stack.completion_client.error = RuntimeError("upstream timeout")

        response = client.post("/fitness-ai-chat", json={"message": "Hi", "userId": TEST_USER_ID})

        assert response.status_code == 500
        assert response.json()["reply"] == FALLBACK_REPLY
        assert response.json()["error"] == "upstream timeout"

    def test_other_users_conversation_forbidden(self, client):
        response = client.post("/fitness-ai-chat", json={"message": "Hi", "userId": OTHER_USER_ID})

        assert response.status_code == 403

    @pytest.mark.parametrize(
        "body",
        [
            {"userId": TEST_USER_ID},
            {"message": "", "userId": TEST_USER_ID},
            {"message": "Hi"},
            {"message": "Hi", "userId": TEST_USER_ID, "sessionId": "bad id!"},
        ],
    )
    def test_validation(self, client, body):
        assert client.post("/fitness-ai-chat", json=body).status_code == 422
