"""
Shared test fixtures.

Provides an application wired entirely to in-memory fakes:

    def test_something(client, fake_stack):
        fake_stack.stats_repo.seed([...])
        response = client.get("/stats")

The workout session manager in the stack uses a very long tick interval,
so live sessions never advance on their own during router tests; unit
tests drive trackers by calling tick() directly.
"""

from dataclasses import dataclass
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from api import deps
from backend.core.gamification import AchievementService, GamificationLedger
from backend.core.write_queue import WriteQueue
from backend.main import create_app
from backend.services.notifications import NotificationOutbox
from backend.services.workout_sessions import WorkoutSessionManager
from backend.settings import Settings
from tests.fakes import (
    FakeChatCompletionClient,
    FakeChatRepository,
    FakePaymentsGateway,
    FakeProgressRepository,
    FakeSubscriptionRepository,
    FakeWorkoutRepository,
    create_achievement_repo,
    create_challenge_repo,
    create_profile_repo,
    create_stats_repo,
    create_video_repo,
)

TEST_USER_ID = "test-user"
OTHER_USER_ID = "other-user"

# Long enough that no tick fires while a test runs
IDLE_TICK_INTERVAL = 3600.0


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns the test user."""
    return TEST_USER_ID


async def mock_get_optional_user() -> Optional[str]:
    return TEST_USER_ID


async def mock_get_anonymous_user() -> Optional[str]:
    return None


@dataclass
class FakeStack:
    """Every fake the app is wired to, for seeding and assertions."""

    settings: Settings
    progress_repo: FakeProgressRepository
    workout_repo: FakeWorkoutRepository
    stats_repo: object
    profile_repo: object
    challenge_repo: object
    achievement_repo: object
    chat_repo: FakeChatRepository
    video_repo: object
    subscription_repo: FakeSubscriptionRepository
    gateway: FakePaymentsGateway
    completion_client: FakeChatCompletionClient
    outbox: NotificationOutbox
    write_queue: WriteQueue
    session_manager: WorkoutSessionManager


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="test",
        stripe_secret_key="sk_test_fake",
        stripe_webhook_secret="whsec_fake",
        stripe_price_pro="price_pro",
        stripe_price_elite="price_elite",
        app_url="https://app.example.com",
        _env_file=None,
    )


@pytest.fixture
def fake_stack(test_settings: Settings) -> FakeStack:
    outbox = NotificationOutbox()
    write_queue = WriteQueue(notifier=outbox)
    progress_repo = FakeProgressRepository()
    workout_repo = FakeWorkoutRepository()
    stats_repo = create_stats_repo(user_id=TEST_USER_ID)
    achievement_repo = create_achievement_repo()

    session_manager = WorkoutSessionManager(
        progress_repo=progress_repo,
        workout_repo=workout_repo,
        ledger=GamificationLedger(stats_repo, notifier=outbox, write_queue=write_queue),
        write_queue=write_queue,
        notifier=outbox,
        achievements=AchievementService(achievement_repo, notifier=outbox),
        tick_interval=IDLE_TICK_INTERVAL,
        autosave_interval=IDLE_TICK_INTERVAL,
    )

    return FakeStack(
        settings=test_settings,
        progress_repo=progress_repo,
        workout_repo=workout_repo,
        stats_repo=stats_repo,
        profile_repo=create_profile_repo(user_id=TEST_USER_ID),
        challenge_repo=create_challenge_repo(),
        achievement_repo=achievement_repo,
        chat_repo=FakeChatRepository(),
        video_repo=create_video_repo(),
        subscription_repo=FakeSubscriptionRepository(),
        gateway=FakePaymentsGateway(),
        completion_client=FakeChatCompletionClient(),
        outbox=outbox,
        write_queue=write_queue,
        session_manager=session_manager,
    )


@pytest.fixture
def app(fake_stack: FakeStack):
    """Create an app whose dependencies all resolve to the fake stack."""
    app = create_app(settings=fake_stack.settings)
    overrides = {
        deps.get_settings: lambda: fake_stack.settings,
        deps.get_current_user: mock_get_current_user,
        deps.get_optional_user: mock_get_optional_user,
        deps.get_progress_repo: lambda: fake_stack.progress_repo,
        deps.get_workout_repo: lambda: fake_stack.workout_repo,
        deps.get_stats_repo: lambda: fake_stack.stats_repo,
        deps.get_profile_repo: lambda: fake_stack.profile_repo,
        deps.get_challenge_repo: lambda: fake_stack.challenge_repo,
        deps.get_achievement_repo: lambda: fake_stack.achievement_repo,
        deps.get_chat_repo: lambda: fake_stack.chat_repo,
        deps.get_video_repo: lambda: fake_stack.video_repo,
        deps.get_subscription_repo: lambda: fake_stack.subscription_repo,
        deps.get_payments_gateway: lambda: fake_stack.gateway,
        deps.get_completion_client: lambda: fake_stack.completion_client,
        deps.get_notification_outbox: lambda: fake_stack.outbox,
        deps.get_write_queue: lambda: fake_stack.write_queue,
        deps.get_session_manager: lambda: fake_stack.session_manager,
        deps.get_session_manager_if_started: lambda: fake_stack.session_manager,
    }
    app.dependency_overrides.update(overrides)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, fake_stack: FakeStack):
    """
    TestClient kept open for the whole test, so tasks started by session
    endpoints live on one event loop.
    """
    with TestClient(app) as test_client:
        yield test_client
        test_client.portal.call(fake_stack.session_manager.shutdown)
