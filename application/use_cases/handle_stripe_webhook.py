"""
HandleStripeWebhook Use Case.

Verifies a signed payments webhook and, for subscription lifecycle events,
recomputes the tier from the price amount and upserts the subscriber row.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from application.exceptions import BillingError
from application.ports.payments_gateway import PaymentsGateway, SubscriptionInfo
from application.ports.profile_repository import ProfileRepository
from application.ports.subscription_repository import SubscriptionRepository
from domain.models.subscription import SubscriberRecord, tier_from_amount

logger = logging.getLogger(__name__)

SUBSCRIPTION_EVENTS = frozenset(
    {
        "customer.subscription.created",
        "customer.subscription.updated",
        "customer.subscription.deleted",
    }
)


@dataclass
class WebhookResult:
    """Result of the HandleStripeWebhook use case execution."""

    success: bool
    event_type: Optional[str] = None
    handled: bool = False
    error: Optional[str] = None


class HandleStripeWebhookUseCase:
    """
    Use case for processing payments webhooks.

    Usage:
        >>> use_case = HandleStripeWebhookUseCase(gateway, subscription_repo, profile_repo)
        >>> result = use_case.execute(payload=body, signature=request.headers["stripe-signature"])
    """

    def __init__(
        self,
        gateway: PaymentsGateway,
        subscription_repo: SubscriptionRepository,
        profile_repo: ProfileRepository,
    ) -> None:
        self._gateway = gateway
        self._subscription_repo = subscription_repo
        self._profile_repo = profile_repo

    def execute(self, payload: bytes, signature: Optional[str]) -> WebhookResult:
        try:
            if not signature:
                raise BillingError("No Stripe signature found")

            event = self._gateway.construct_event(payload, signature)
            logger.info(f"Received webhook event: {event.type}")

            if event.type not in SUBSCRIPTION_EVENTS:
                return WebhookResult(success=True, event_type=event.type)

            if event.subscription is None:
                raise BillingError("Subscription event without subscription payload")

            self._sync_subscription(event.type, event.subscription)
            return WebhookResult(success=True, event_type=event.type, handled=True)

        except Exception as e:
            logger.error(f"Error processing webhook: {e}")
            return WebhookResult(success=False, error=str(e))

    def _sync_subscription(self, event_type: str, subscription: SubscriptionInfo) -> None:
        customer = self._gateway.retrieve_customer(subscription.customer_id)
        if customer is None or customer.deleted:
            raise BillingError("Customer not found or deleted")
        if not customer.email:
            raise BillingError("Customer email not found")

        user_id = customer.metadata.get("userId") or self._profile_repo.find_id_by_email(customer.email)

        is_active = subscription.status == "active"
        price = self._gateway.retrieve_price(subscription.price_id)
        tier = tier_from_amount(price.unit_amount)

        record = SubscriberRecord(
            email=customer.email,
            user_id=user_id,
            stripe_customer_id=customer.id,
            subscribed=is_active,
            subscription_tier=tier.value if is_active else None,
            subscription_end=(
                datetime.fromtimestamp(subscription.current_period_end, tz=timezone.utc)
                if is_active
                else None
            ),
            updated_at=datetime.now(timezone.utc),
        )
        if not self._subscription_repo.upsert_subscriber(record):
            raise BillingError("Failed to update subscriber")

        logger.info(
            f"Updated subscription email={customer.email} user={user_id} "
            f"tier={tier.value} active={is_active} event={event_type}"
        )
