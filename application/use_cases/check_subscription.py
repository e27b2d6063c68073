"""
CheckSubscription Use Case.

Looks up the user's billing customer by email, inspects the first active
subscription, maps its price to a tier and mirrors the result into the
local subscribers table.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional

from application.exceptions import BillingError
from application.ports.payments_gateway import PaymentsGateway
from application.ports.profile_repository import ProfileRepository
from application.ports.subscription_repository import SubscriptionRepository
from domain.models.subscription import SubscriberRecord, SubscriptionTier, tier_from_price_id

logger = logging.getLogger(__name__)


@dataclass
class CheckSubscriptionResult:
    """Result of the CheckSubscription use case execution."""

    success: bool
    subscribed: bool = False
    subscription_tier: Optional[str] = None
    subscription_end: Optional[datetime] = None
    error: Optional[str] = None


class CheckSubscriptionUseCase:
    """
    Use case for refreshing a user's subscription status.

    Usage:
        >>> use_case = CheckSubscriptionUseCase(gateway, subscription_repo, profile_repo,
        ...                                     price_ids=settings.stripe_price_ids)
        >>> result = use_case.execute(user_id="user-123")
        >>> result.subscribed
        False
    """

    def __init__(
        self,
        gateway: PaymentsGateway,
        subscription_repo: SubscriptionRepository,
        profile_repo: ProfileRepository,
        *,
        price_ids: Mapping[SubscriptionTier, str],
    ) -> None:
        self._gateway = gateway
        self._subscription_repo = subscription_repo
        self._profile_repo = profile_repo
        self._price_ids = price_ids

    def execute(self, user_id: str) -> CheckSubscriptionResult:
        try:
            email = self._profile_repo.get_email(user_id)
            if not email:
                raise BillingError("User not found")

            customer = self._gateway.find_customer_by_email(email)
            if customer is None:
                return CheckSubscriptionResult(success=True, subscribed=False)

            subscriptions = self._gateway.list_active_subscriptions(customer.id, limit=1)
            if not subscriptions:
                return CheckSubscriptionResult(success=True, subscribed=False)

            subscription = subscriptions[0]
            tier = tier_from_price_id(subscription.price_id, self._price_ids)
            period_end = datetime.fromtimestamp(subscription.current_period_end, tz=timezone.utc)

            saved = self._subscription_repo.upsert_subscriber(
                SubscriberRecord(
                    email=email,
                    user_id=user_id,
                    stripe_customer_id=customer.id,
                    subscribed=True,
                    subscription_tier=tier,
                    subscription_end=period_end,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            if not saved:
                logger.error(f"Failed to store subscription status for {user_id}")

            return CheckSubscriptionResult(
                success=True,
                subscribed=True,
                subscription_tier=tier,
                subscription_end=period_end,
            )

        except Exception as e:
            logger.error(f"Subscription check error: {e}")
            return CheckSubscriptionResult(success=False, error=str(e))
