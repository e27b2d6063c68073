"""
Billing Schemas.

Request/response bodies for the checkout, subscription check, webhook and
product sync endpoints. Field names follow the web client's camelCase.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from domain.models.subscription import ProductRecord


class CheckoutRequest(BaseModel):
    """Request body for POST /create-checkout."""
    model_config = ConfigDict(populate_by_name=True)

    tier: str = Field(..., description="Basic, Pro or Elite")
    user_id: Optional[str] = Field(default=None, alias="userId")


class CheckoutResponse(BaseModel):
    url: str


class CheckSubscriptionRequest(BaseModel):
    """Request body for POST /check-subscription."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")


class CheckSubscriptionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subscribed: bool
    subscription_tier: Optional[str] = Field(default=None, alias="subscriptionTier")
    subscription_end: Optional[datetime] = Field(default=None, alias="subscriptionEnd")


class WebhookResponse(BaseModel):
    success: bool = True


class SyncProductsResponse(BaseModel):
    success: bool = True
    products: List[ProductRecord] = Field(default_factory=list)


class BillingErrorResponse(BaseModel):
    error: str
