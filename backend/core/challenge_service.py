"""
Community Challenge Service.

Business logic for challenges:
- Listing with joined/active/upcoming filters and text search
- Creating challenges (the creator joins automatically, free of charge)
- Joining with an XP join price and a joining bonus
- Progress updates, leaderboards and reward claims
"""
from typing import Optional, List, Dict, Any
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
import logging

from application.exceptions import (
    ChallengeNotFoundError,
    ChallengeStateError,
    InsufficientXpError,
)
from application.ports.challenge_repository import ChallengeRepository
from application.ports.profile_repository import ProfileRepository
from application.user_context import UserContext
from backend.core.gamification import GamificationLedger
from domain.models.challenge import Challenge, ChallengeMembership, MAX_PROGRESS

logger = logging.getLogger(__name__)

JOIN_BONUS_XP = 50
LEADERBOARD_SIZE = 20


class ChallengeFilter(str, Enum):
    ALL = "all"
    JOINED = "joined"
    ACTIVE = "active"
    UPCOMING = "upcoming"


@dataclass
class ChallengeListing:
    """A challenge as seen by one user."""

    challenge: Challenge
    participants: int
    membership: Optional[ChallengeMembership] = None

    @property
    def is_joined(self) -> bool:
        return self.membership is not None


@dataclass
class LeaderboardEntry:
    user_id: str
    username: str
    progress: int
    rank: int
    is_current_user: bool
    completed_at: Optional[datetime] = None


@dataclass
class ClaimResult:
    reward: int
    rank: Optional[int]
    level: int
    xp: int
    leveled_up: bool


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _matches(challenge: Challenge, search: Optional[str]) -> bool:
    if not search:
        return True
    needle = search.lower()
    return needle in challenge.title.lower() or needle in challenge.description.lower()


class ChallengeService:
    """
    Service for community challenges.

    XP movements (join price, join bonus, rewards) go through the
    GamificationLedger so level-ups behave like workout awards.
    """

    def __init__(
        self,
        challenge_repo: ChallengeRepository,
        profile_repo: ProfileRepository,
        ledger: GamificationLedger,
    ):
        self.challenge_repo = challenge_repo
        self.profile_repo = profile_repo
        self.ledger = ledger

    def list_challenges(
        self,
        user_id: str,
        *,
        status_filter: ChallengeFilter = ChallengeFilter.ALL,
        search: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[ChallengeListing]:
        today = today or _today()
        memberships = {m.challenge_id: m for m in self.challenge_repo.list_memberships(user_id)}

        listings = []
        for challenge in self.challenge_repo.list_challenges():
            if not _matches(challenge, search):
                continue

            membership = memberships.get(challenge.id or "")
            joined = membership is not None
            if status_filter is ChallengeFilter.JOINED and not joined:
                continue
            if status_filter is ChallengeFilter.ACTIVE and (joined or not challenge.is_active(today)):
                continue
            if status_filter is ChallengeFilter.UPCOMING and challenge.has_started(today):
                continue

            listings.append(
                ChallengeListing(
                    challenge=challenge,
                    participants=self.challenge_repo.count_participants(challenge.id or ""),
                    membership=membership,
                )
            )
        return listings

    def create_challenge(self, context: UserContext, challenge: Challenge) -> Challenge:
        """
        Create a challenge and join its creator.

        Raises:
            ChallengeStateError: if the challenge could not be stored
        """
        created = self.challenge_repo.create_challenge(
            challenge.model_copy(update={"id": None, "created_by": context.user_id})
        )
        if created is None or not created.id:
            raise ChallengeStateError("Failed to create challenge")

        membership = self.challenge_repo.add_membership(
            ChallengeMembership(
                user_id=context.user_id,
                challenge_id=created.id,
                joined_at=datetime.now(timezone.utc),
            )
        )
        if membership is None:
            logger.error(f"Created challenge {created.id} but could not join creator {context.user_id}")

        logger.info(f"User {context.user_id} created challenge {created.id}")
        return created

    def join(self, context: UserContext, challenge_id: str) -> ChallengeMembership:
        """
        Join a challenge, paying its XP price and receiving the joining bonus.

        Raises:
            ChallengeNotFoundError: unknown challenge
            ChallengeStateError: already joined, or the membership write failed
            InsufficientXpError: the user cannot afford the join price
        """
        challenge = self._get(challenge_id)
        if self.challenge_repo.get_membership(context.user_id, challenge_id) is not None:
            raise ChallengeStateError("Already joined this challenge")

        price = challenge.join_price_xp
        if context.stats.xp < price:
            raise InsufficientXpError(required=price, available=context.stats.xp)

        membership = self.challenge_repo.add_membership(
            ChallengeMembership(
                user_id=context.user_id,
                challenge_id=challenge_id,
                joined_at=datetime.now(timezone.utc),
            )
        )
        if membership is None:
            raise ChallengeStateError("Failed to join challenge")

        self.ledger.deduct(context, price)
        self.ledger.award(context, JOIN_BONUS_XP)
        logger.info(f"User {context.user_id} joined challenge {challenge_id} (price {price} XP)")
        return membership

    def update_progress(self, user_id: str, challenge_id: str, progress: int) -> ChallengeMembership:
        """
        Set progress (clamped to 0..100). Reaching 100 marks completion.

        Raises:
            ChallengeStateError: not joined, or the write failed
        """
        membership = self.challenge_repo.get_membership(user_id, challenge_id)
        if membership is None:
            raise ChallengeStateError("Join the challenge before updating progress")

        progress = max(0, min(MAX_PROGRESS, progress))
        fields: Dict[str, Any] = {"progress": progress}
        if progress >= MAX_PROGRESS and membership.completed_at is None:
            fields["completed_at"] = datetime.now(timezone.utc).isoformat()

        updated = self.challenge_repo.update_membership(membership.id or "", fields)
        if updated is None:
            raise ChallengeStateError("Failed to update progress")
        return updated

    def leaderboard(self, challenge_id: str, current_user_id: Optional[str] = None) -> List[LeaderboardEntry]:
        self._get(challenge_id)
        entries = []
        for position, membership in enumerate(
            self.challenge_repo.get_top_memberships(challenge_id, limit=LEADERBOARD_SIZE)
        ):
            entries.append(
                LeaderboardEntry(
                    user_id=membership.user_id,
                    username=self._display_name(membership.user_id),
                    progress=membership.progress,
                    rank=position + 1,
                    is_current_user=membership.user_id == current_user_id,
                    completed_at=membership.completed_at,
                )
            )
        return entries

    def claim_reward(self, context: UserContext, challenge_id: str) -> ClaimResult:
        """
        Claim the completion reward plus any top-three placement reward.

        Raises:
            ChallengeNotFoundError: unknown challenge
            ChallengeStateError: not joined, not completed, or already claimed
        """
        challenge = self._get(challenge_id)
        membership = self.challenge_repo.get_membership(context.user_id, challenge_id)
        if membership is None:
            raise ChallengeStateError("You have not joined this challenge")
        if not membership.is_completed:
            raise ChallengeStateError("Complete the challenge before claiming the reward")
        if membership.reward_claimed:
            raise ChallengeStateError("Reward already claimed")

        rank = self._rank_of(challenge_id, context.user_id)
        reward = challenge.xp_reward + challenge.placement_reward(rank)

        updated = self.challenge_repo.update_membership(
            membership.id or "",
            {"reward_claimed": True, "rank": rank},
        )
        if updated is None:
            raise ChallengeStateError("Failed to claim reward")

        change = self.ledger.award(context, reward)
        logger.info(f"User {context.user_id} claimed {reward} XP from challenge {challenge_id} (rank {rank})")
        return ClaimResult(
            reward=reward,
            rank=rank,
            level=change.level,
            xp=change.xp,
            leveled_up=change.leveled_up,
        )

    def _get(self, challenge_id: str) -> Challenge:
        challenge = self.challenge_repo.get_challenge(challenge_id)
        if challenge is None:
            raise ChallengeNotFoundError(challenge_id)
        return challenge

    def _rank_of(self, challenge_id: str, user_id: str) -> Optional[int]:
        for position, membership in enumerate(
            self.challenge_repo.get_top_memberships(challenge_id, limit=LEADERBOARD_SIZE)
        ):
            if membership.user_id == user_id:
                return position + 1
        return None

    def _display_name(self, user_id: str) -> str:
        profile = self.profile_repo.get(user_id)
        if profile and profile.get("username"):
            return profile["username"]
        return f"User {user_id[:4]}"
