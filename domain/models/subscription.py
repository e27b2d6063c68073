"""
Subscription tiers and the price-to-tier contract shared by the billing
endpoints.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

# Upper bounds (in cents) for amount-based tier detection
BASIC_MAX_AMOUNT = 999
PRO_MAX_AMOUNT = 1999

UNKNOWN_TIER = "Unknown"


class SubscriptionTier(str, Enum):
    """Named subscription plans."""

    BASIC = "Basic"
    PRO = "Pro"
    ELITE = "Elite"

    @classmethod
    def parse(cls, value: str) -> Optional["SubscriptionTier"]:
        for tier in cls:
            if tier.value == value:
                return tier
        return None


def tier_from_amount(unit_amount: Optional[int]) -> SubscriptionTier:
    """
    Map a recurring price amount (minor units) to a tier.

    <= 999 → Basic, <= 1999 → Pro, otherwise Elite.
    """
    amount = unit_amount or 0
    if amount <= BASIC_MAX_AMOUNT:
        return SubscriptionTier.BASIC
    if amount <= PRO_MAX_AMOUNT:
        return SubscriptionTier.PRO
    return SubscriptionTier.ELITE


def tier_from_price_id(price_id: str, price_ids: Mapping[SubscriptionTier, str]) -> str:
    """Map a price identifier to a tier name, or "Unknown"."""
    for tier, known in price_ids.items():
        if known and known == price_id:
            return tier.value
    return UNKNOWN_TIER


class SubscriberRecord(BaseModel):
    """Local subscription status (subscribers row), keyed by email."""

    email: str
    user_id: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    subscribed: bool = False
    subscription_tier: Optional[str] = None
    subscription_end: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "user_id": self.user_id,
            "stripe_customer_id": self.stripe_customer_id,
            "subscribed": self.subscribed,
            "subscription_tier": self.subscription_tier,
            "subscription_end": self.subscription_end.isoformat() if self.subscription_end else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class ProductRecord(BaseModel):
    """A synced payments product with its recurring price (stripe_products row)."""

    name: str
    description: Optional[str] = None
    stripe_product_id: str
    stripe_price_id: str
    price_amount: Optional[int] = None
    currency: Optional[str] = None
    interval: str = "month"
    is_active: bool = True
