"""
SyncProducts Use Case.

Copies active payments products that have a recurring price into the
local stripe_products table.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from application.ports.payments_gateway import PaymentsGateway, PriceInfo
from application.ports.subscription_repository import SubscriptionRepository
from domain.models.subscription import ProductRecord

logger = logging.getLogger(__name__)


@dataclass
class SyncProductsResult:
    """Result of the SyncProducts use case execution."""

    success: bool
    products: List[ProductRecord] = field(default_factory=list)
    error: Optional[str] = None


class SyncProductsUseCase:
    """Use case for mirroring the payments product catalog."""

    def __init__(
        self,
        gateway: PaymentsGateway,
        subscription_repo: SubscriptionRepository,
    ) -> None:
        self._gateway = gateway
        self._subscription_repo = subscription_repo

    def execute(self) -> SyncProductsResult:
        try:
            products = self._gateway.list_active_products()
            recurring: Dict[str, PriceInfo] = {
                price.product_id: price
                for price in self._gateway.list_active_prices()
                if price.type == "recurring"
            }

            records = [
                ProductRecord(
                    name=product.name,
                    description=product.description,
                    stripe_product_id=product.id,
                    stripe_price_id=recurring[product.id].id,
                    price_amount=recurring[product.id].unit_amount,
                    currency=recurring[product.id].currency,
                    interval=recurring[product.id].interval or "month",
                    is_active=product.active,
                )
                for product in products
                if product.id in recurring
            ]

            self._subscription_repo.upsert_products(records)
            logger.info(f"Synced {len(records)} products")
            return SyncProductsResult(success=True, products=records)

        except Exception as e:
            logger.error(f"Sync products error: {e}")
            return SyncProductsResult(success=False, error=str(e))
