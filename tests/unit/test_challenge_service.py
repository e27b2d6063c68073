"""
Unit tests for ChallengeService.

Tests for:
- Listing with joined/active/upcoming filters and search
- Creating a challenge (creator auto-joins, no price charged)
- Joining: price check, deduction, joining bonus, double join
- Progress clamping and completion
- Leaderboard ordering and display names
- Reward claims with placement bonuses
"""

import pytest

pytestmark = pytest.mark.unit

from datetime import date, datetime, timezone

from application.exceptions import (
    ChallengeNotFoundError,
    ChallengeStateError,
    InsufficientXpError,
)
from application.user_context import SessionUser, UserContext
from backend.core.challenge_service import (
    JOIN_BONUS_XP,
    ChallengeFilter,
    ChallengeService,
)
from backend.core.gamification import GamificationLedger
from domain.models import Challenge, ChallengeMembership
from tests.fakes import (
    FakeChallengeRepository,
    FakeProfileRepository,
    create_stats_repo,
)

USER_ID = "user-1"
TODAY = date(2024, 5, 15)


def _challenge(challenge_id: str, **overrides) -> Challenge:
    values = dict(
        id=challenge_id,
        title=f"Challenge {challenge_id}",
        description="Move every day",
        duration_days=30,
        xp_reward=200,
    )
    values.update(overrides)
    return Challenge(**values)


@pytest.fixture
def challenge_repo() -> FakeChallengeRepository:
    repo = FakeChallengeRepository()
    repo.seed_challenges(
        [
            _challenge("active", title="Plank Month", start_date=date(2024, 5, 1), end_date=date(2024, 5, 31)),
            _challenge("upcoming", title="Summer Squats", start_date=date(2024, 6, 1)),
            _challenge("ended", title="Spring Run", start_date=date(2024, 3, 1), end_date=date(2024, 3, 31)),
            _challenge(
                "priced",
                title="Elite Burpees",
                join_price_xp=300,
                first_place_reward=100,
                second_place_reward=50,
                third_place_reward=25,
            ),
        ]
    )
    return repo


@pytest.fixture
def profile_repo() -> FakeProfileRepository:
    repo = FakeProfileRepository()
    repo.seed([{"id": "user-2", "username": "squatqueen"}])
    return repo


@pytest.fixture
def stats_repo():
    return create_stats_repo(user_id=USER_ID, level=2, xp=400)


@pytest.fixture
def context(stats_repo) -> UserContext:
    return UserContext(SessionUser(USER_ID), stats_repo.get(USER_ID))


@pytest.fixture
def service(challenge_repo, profile_repo, stats_repo) -> ChallengeService:
    return ChallengeService(challenge_repo, profile_repo, GamificationLedger(stats_repo))


# =============================================================================
# Listing
# =============================================================================


class TestListChallenges:
    """Tests for ChallengeService.list_challenges()."""

    def _ids(self, listings):
        return sorted(listing.challenge.id for listing in listings)

    def test_all(self, service):
        listings = service.list_challenges(USER_ID, today=TODAY)
        assert self._ids(listings) == ["active", "ended", "priced", "upcoming"]

    def test_joined(self, service, challenge_repo):
        challenge_repo.seed_memberships([ChallengeMembership(user_id=USER_ID, challenge_id="ended")])

        listings = service.list_challenges(USER_ID, status_filter=ChallengeFilter.JOINED, today=TODAY)

        assert self._ids(listings) == ["ended"]
        assert listings[0].is_joined is True
        assert listings[0].participants == 1

    def test_active_excludes_joined_and_out_of_window(self, service, challenge_repo):
        challenge_repo.seed_memberships([ChallengeMembership(user_id=USER_ID, challenge_id="priced")])

        listings = service.list_challenges(USER_ID, status_filter=ChallengeFilter.ACTIVE, today=TODAY)

        assert self._ids(listings) == ["active"]

    def test_upcoming(self, service):
        listings = service.list_challenges(USER_ID, status_filter=ChallengeFilter.UPCOMING, today=TODAY)
        assert self._ids(listings) == ["upcoming"]

    def test_search_is_case_insensitive(self, service):
        listings = service.list_challenges(USER_ID, search="SQUAT", today=TODAY)
        assert self._ids(listings) == ["upcoming"]


# =============================================================================
# Create / Join
# =============================================================================


class TestCreateAndJoin:
    """Tests for create_challenge() and join()."""

    def test_create_joins_creator_for_free(self, service, challenge_repo, context):
        created = service.create_challenge(context, _challenge("ignored", join_price_xp=500))

        assert created.id != "ignored"
        assert created.created_by == USER_ID
        assert challenge_repo.get_membership(USER_ID, created.id) is not None
        assert context.stats.xp == 400

    def test_create_failure(self, service, challenge_repo, context):
        challenge_repo.fail_writes = True

        with pytest.raises(ChallengeStateError):
            service.create_challenge(context, _challenge("new"))

    def test_join_free_challenge_awards_bonus(self, service, context, stats_repo):
        membership = service.join(context, "active")

        assert membership.user_id == USER_ID
        assert membership.progress == 0
        assert context.stats.xp == 400 + JOIN_BONUS_XP
        assert stats_repo.get(USER_ID).xp == 400 + JOIN_BONUS_XP

    def test_join_deducts_price_then_awards_bonus(self, service, context):
        service.join(context, "priced")

        assert context.stats.xp == 400 - 300 + JOIN_BONUS_XP
        assert context.stats.level == 2

    def test_join_insufficient_xp(self, service, context, challenge_repo):
        context.update_stats({"xp": 100})

        with pytest.raises(InsufficientXpError):
            service.join(context, "priced")

        assert challenge_repo.get_membership(USER_ID, "priced") is None
        assert context.stats.xp == 100

    def test_join_twice(self, service, context):
        service.join(context, "active")

        with pytest.raises(ChallengeStateError):
            service.join(context, "active")

    def test_join_unknown(self, service, context):
        with pytest.raises(ChallengeNotFoundError):
            service.join(context, "missing")


# =============================================================================
# Progress / Leaderboard / Claim
# =============================================================================


class TestProgressAndRewards:
    """Tests for update_progress(), leaderboard() and claim_reward()."""

    @pytest.fixture
    def ranked(self, challenge_repo):
        challenge_repo.seed_memberships(
            [
                ChallengeMembership(
                    user_id="user-2",
                    challenge_id="priced",
                    progress=100,
                    completed_at=datetime(2024, 5, 10, tzinfo=timezone.utc),
                ),
                ChallengeMembership(user_id=USER_ID, challenge_id="priced", progress=90),
                ChallengeMembership(user_id="abcd-3333", challenge_id="priced", progress=40),
            ]
        )
        return challenge_repo

    def test_progress_is_clamped(self, service, ranked):
        assert service.update_progress(USER_ID, "priced", 250).progress == 100
        assert service.update_progress(USER_ID, "priced", -5).progress == 0

    def test_reaching_100_completes(self, service, ranked):
        membership = service.update_progress(USER_ID, "priced", 100)

        assert membership.completed_at is not None
        assert membership.is_completed is True

    def test_progress_requires_membership(self, service):
        with pytest.raises(ChallengeStateError):
            service.update_progress(USER_ID, "active", 10)

    def test_leaderboard(self, service, ranked):
        entries = service.leaderboard("priced", current_user_id=USER_ID)

        assert [e.rank for e in entries] == [1, 2, 3]
        assert entries[0].username == "squatqueen"
        assert entries[1].is_current_user is True
        assert entries[2].username == "User abcd"

    def test_leaderboard_unknown(self, service):
        with pytest.raises(ChallengeNotFoundError):
            service.leaderboard("missing")

    def test_claim_before_completion(self, service, ranked, context):
        with pytest.raises(ChallengeStateError):
            service.claim_reward(context, "priced")

    def test_claim_with_placement_bonus(self, service, ranked, context, challenge_repo):
        """Second place earns the base reward plus the second-place bonus."""
        service.update_progress(USER_ID, "priced", 100)

        result = service.claim_reward(context, "priced")

        assert result.rank == 2
        assert result.reward == 200 + 50
        assert result.level == 2
        assert result.xp == 650
        assert challenge_repo.get_membership(USER_ID, "priced").reward_claimed is True

    def test_claim_twice(self, service, ranked, context):
        service.update_progress(USER_ID, "priced", 100)
        service.claim_reward(context, "priced")

        with pytest.raises(ChallengeStateError):
            service.claim_reward(context, "priced")

    def test_claim_not_joined(self, service, context):
        with pytest.raises(ChallengeStateError):
            service.claim_reward(context, "active")
