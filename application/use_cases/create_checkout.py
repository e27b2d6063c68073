"""
CreateCheckout Use Case.

Maps a subscription tier to a price, resolves (or creates) the user's
billing customer and opens a hosted subscription checkout session.
The Basic tier is free and short-circuits to an in-app redirect.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from application.exceptions import BillingError, InvalidTierError
from application.ports.payments_gateway import PaymentsGateway
from application.ports.profile_repository import ProfileRepository
from application.ports.subscription_repository import SubscriptionRepository
from domain.models.subscription import SubscriptionTier

logger = logging.getLogger(__name__)


@dataclass
class CreateCheckoutResult:
    """Result of the CreateCheckout use case execution."""

    success: bool
    url: Optional[str] = None
    error: Optional[str] = None


class CreateCheckoutUseCase:
    """
    Use case for starting a subscription checkout.

    Orchestrates the following workflow:
    1. Free tier: return the dashboard redirect
    2. Resolve the tier's price (configured ID, then synced product table)
    3. Resolve the customer: stored subscriber, email lookup, or create
    4. Create the checkout session and return its URL

    Usage:
        >>> use_case = CreateCheckoutUseCase(gateway, subscription_repo, profile_repo,
        ...                                  price_ids=settings.stripe_price_ids,
        ...                                  app_url=settings.app_url)
        >>> result = use_case.execute(tier="Pro", user_id="user-123")
    """

    def __init__(
        self,
        gateway: PaymentsGateway,
        subscription_repo: SubscriptionRepository,
        profile_repo: ProfileRepository,
        *,
        price_ids: Mapping[SubscriptionTier, str],
        app_url: str,
    ) -> None:
        self._gateway = gateway
        self._subscription_repo = subscription_repo
        self._profile_repo = profile_repo
        self._price_ids = price_ids
        self._app_url = app_url.rstrip("/")

    def execute(self, tier: str, user_id: Optional[str] = None) -> CreateCheckoutResult:
        """
        Execute the checkout workflow.

        Args:
            tier: "Basic", "Pro" or "Elite"
            user_id: Optional user; without one the session has no customer

        Returns:
            CreateCheckoutResult with the redirect URL or an error message
        """
        try:
            parsed = SubscriptionTier.parse(tier)
            if parsed is None:
                raise InvalidTierError(tier)

            if parsed is SubscriptionTier.BASIC:
                return CreateCheckoutResult(
                    success=True,
                    url=f"{self._app_url}/dashboard?success=true&tier=basic",
                )

            price_id = self._resolve_price(parsed)
            customer_id, email = self._resolve_customer(user_id)

            url = self._gateway.create_checkout_session(
                price_id=price_id,
                customer_id=customer_id,
                customer_email=email if not customer_id else None,
                client_reference_id=user_id,
                success_url=f"{self._app_url}/dashboard?success=true&session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{self._app_url}/pricing?canceled=true",
            )
            logger.info(f"Created {parsed.value} checkout session for user {user_id}")
            return CreateCheckoutResult(success=True, url=url)

        except Exception as e:
            logger.error(f"Checkout error: {e}")
            return CreateCheckoutResult(success=False, error=str(e))

    def _resolve_price(self, tier: SubscriptionTier) -> str:
        price_id = self._price_ids.get(tier) or self._subscription_repo.get_price_id(tier.value)
        if not price_id:
            raise BillingError(f"Could not find price ID for tier {tier.value}")
        return price_id

    def _resolve_customer(self, user_id: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
        if not user_id:
            return None, None

        email = self._profile_repo.get_email(user_id)
        if not email:
            logger.warning(f"No email found for user {user_id}; creating checkout without customer")
            return None, None

        subscriber = self._subscription_repo.get_subscriber(user_id)
        if subscriber and subscriber.stripe_customer_id:
            return subscriber.stripe_customer_id, email

        existing = self._gateway.find_customer_by_email(email)
        if existing:
            return existing.id, email

        created = self._gateway.create_customer(email, metadata={"userId": user_id})
        return created.id, email
