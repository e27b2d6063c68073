"""
Billing router.

This router contains endpoints for:
- POST /create-checkout - Start a subscription checkout for a tier
- POST /check-subscription - Refresh the caller's subscription status
- POST /stripe-webhook - Receive signed subscription lifecycle events
- POST /sync-stripe-products - Mirror the product catalog locally

Payments failures are returned as {"error": message}: HTTP 500 for
checkout, status check and product sync, HTTP 400 for the webhook.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.deps import (
    get_check_subscription_use_case,
    get_create_checkout_use_case,
    get_current_user,
    get_optional_user,
    get_sync_products_use_case,
    get_webhook_use_case,
)
from api.schemas.billing import (
    BillingErrorResponse,
    CheckoutRequest,
    CheckoutResponse,
    CheckSubscriptionRequest,
    CheckSubscriptionResponse,
    SyncProductsResponse,
    WebhookResponse,
)
from application.use_cases import (
    CheckSubscriptionUseCase,
    CreateCheckoutUseCase,
    HandleStripeWebhookUseCase,
    SyncProductsUseCase,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Billing"],
)


def _error(status_code: int, message: Optional[str]) -> JSONResponse:
    body = BillingErrorResponse(error=message or "Unknown error")
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _resolve_user(body_user_id: Optional[str], auth_user_id: Optional[str]) -> Optional[str]:
    """The authenticated user wins; a conflicting body userId is rejected."""
    if auth_user_id and body_user_id and auth_user_id != body_user_id:
        raise HTTPException(status_code=403, detail="userId does not match the authenticated user")
    return auth_user_id or body_user_id


@router.post(
    "/create-checkout",
    response_model=CheckoutResponse,
    responses={500: {"model": BillingErrorResponse}},
)
def create_checkout(
    request: CheckoutRequest,
    auth_user_id: Optional[str] = Depends(get_optional_user),
    use_case: CreateCheckoutUseCase = Depends(get_create_checkout_use_case),
):
    """
    Create a checkout session for a subscription tier.

    The Basic tier is free and returns an in-app redirect URL.
    """
    user_id = _resolve_user(request.user_id, auth_user_id)
    result = use_case.execute(tier=request.tier, user_id=user_id)
    if not result.success:
        return _error(500, result.error)
    return CheckoutResponse(url=result.url)


@router.post(
    "/check-subscription",
    response_model=CheckSubscriptionResponse,
    responses={500: {"model": BillingErrorResponse}},
)
def check_subscription(
    request: CheckSubscriptionRequest,
    auth_user_id: Optional[str] = Depends(get_optional_user),
    use_case: CheckSubscriptionUseCase = Depends(get_check_subscription_use_case),
):
    """Check whether the user has an active subscription and which tier it is."""
    user_id = _resolve_user(request.user_id, auth_user_id)
    if not user_id:
        return _error(400, "userId is required")

    result = use_case.execute(user_id=user_id)
    if not result.success:
        return _error(500, result.error)
    return CheckSubscriptionResponse(
        subscribed=result.subscribed,
        subscription_tier=result.subscription_tier,
        subscription_end=result.subscription_end,
    )


@router.post(
    "/stripe-webhook",
    response_model=WebhookResponse,
    responses={400: {"model": BillingErrorResponse}},
)
async def stripe_webhook(
    request: Request,
    use_case: HandleStripeWebhookUseCase = Depends(get_webhook_use_case),
):
    """
    Receive a payments webhook.

    The raw body is verified against the Stripe-Signature header before
    anything is parsed.
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    result = await run_in_threadpool(use_case.execute, payload, signature)
    if not result.success:
        return _error(400, result.error)
    return WebhookResponse(success=True)


@router.post(
    "/sync-stripe-products",
    response_model=SyncProductsResponse,
    responses={500: {"model": BillingErrorResponse}},
)
def sync_stripe_products(
    user_id: str = Depends(get_current_user),
    use_case: SyncProductsUseCase = Depends(get_sync_products_use_case),
):
    """Copy active products with recurring prices into the local product table."""
    logger.info(f"Product sync requested by {user_id}")
    result = use_case.execute()
    if not result.success:
        return _error(500, result.error)
    return SyncProductsResponse(success=True, products=result.products)
