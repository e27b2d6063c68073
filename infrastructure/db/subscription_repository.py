"""
Supabase Subscription Repository Implementation.

subscribers holds one row per billing email; stripe_products mirrors the
payments catalog so checkout can resolve a tier's price without a
configured price ID.
"""
from typing import Optional, List
from supabase import Client
import logging

from domain.models.subscription import ProductRecord, SubscriberRecord

logger = logging.getLogger(__name__)


class SupabaseSubscriptionRepository:
    """
    Supabase implementation of SubscriptionRepository.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def upsert_subscriber(
        self,
        record: SubscriberRecord,
    ) -> bool:
        try:
            result = self._client.table("subscribers") \
                .upsert(record.to_row(), on_conflict="email") \
                .execute()
            return bool(result.data)

        except Exception as e:
            logger.error(f"Error upserting subscriber {record.email}: {e}")
            return False

    def get_subscriber(
        self,
        user_id: str,
    ) -> Optional[SubscriberRecord]:
        try:
            result = self._client.table("subscribers") \
                .select("*") \
                .eq("user_id", user_id) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return SubscriberRecord.model_validate(result.data[0])
            return None

        except Exception as e:
            logger.error(f"Error fetching subscriber for {user_id}: {e}")
            return None

    def get_price_id(
        self,
        product_name: str,
    ) -> Optional[str]:
        try:
            result = self._client.table("stripe_products") \
                .select("stripe_price_id") \
                .eq("name", product_name) \
                .eq("is_active", True) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return result.data[0].get("stripe_price_id")
            return None

        except Exception as e:
            logger.error(f"Error fetching price for product {product_name}: {e}")
            return None

    def upsert_products(
        self,
        products: List[ProductRecord],
    ) -> bool:
        if not products:
            return True
        # Failures propagate; product sync reports them to the caller
        result = self._client.table("stripe_products") \
            .upsert([p.model_dump(mode="json") for p in products], on_conflict="stripe_product_id") \
            .execute()
        return bool(result.data)
