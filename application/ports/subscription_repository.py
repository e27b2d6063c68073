"""
Subscription Repository Interface (Port).

Local mirrors of billing state: subscribers (keyed by email) and
stripe_products (keyed by payments product id).
"""
from typing import Protocol, Optional, List

from domain.models.subscription import SubscriberRecord, ProductRecord


class SubscriptionRepository(Protocol):
    """
    Abstract interface for subscription status persistence.
    """

    def upsert_subscriber(
        self,
        record: SubscriberRecord,
    ) -> bool:
        """
        Insert or update a subscriber row, matching on email.

        Returns:
            True on success
        """
        ...

    def get_subscriber(
        self,
        user_id: str,
    ) -> Optional[SubscriberRecord]:
        """
        Get the subscriber row for a user.
        """
        ...

    def get_price_id(
        self,
        product_name: str,
    ) -> Optional[str]:
        """
        Get the synced price ID for a product (tier) name.
        """
        ...

    def upsert_products(
        self,
        products: List[ProductRecord],
    ) -> bool:
        """
        Insert or update product rows, matching on stripe_product_id.

        Returns:
            True on success

        Raises:
            Exception: on datastore failure (product sync reports it as 500)
        """
        ...
