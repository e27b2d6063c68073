"""
Stripe implementation of the PaymentsGateway port.

Every call passes the secret key explicitly instead of setting the
module-level stripe.api_key, so separate gateways never share state.
"""
from typing import Any, Dict, List, Optional
import logging

import stripe

from application.ports.payments_gateway import (
    CustomerInfo,
    PriceInfo,
    ProductInfo,
    SubscriptionInfo,
    WebhookEvent,
)

logger = logging.getLogger(__name__)

SUBSCRIPTION_OBJECT = "subscription"
LIST_PAGE_SIZE = 100


def _get(obj: Any, key: str, default: Any = None) -> Any:
    """Read a field from a Stripe object, tolerating absent keys."""
    if obj is None:
        return default
    try:
        value = obj[key]
    except (KeyError, TypeError, AttributeError):
        return default
    return default if value is None else value


def _to_customer(obj: Any) -> CustomerInfo:
    metadata = _get(obj, "metadata") or {}
    return CustomerInfo(
        id=_get(obj, "id"),
        email=_get(obj, "email"),
        metadata={str(k): str(v) for k, v in metadata.items()},
        deleted=bool(_get(obj, "deleted", False)),
    )


def _to_subscription(obj: Any) -> SubscriptionInfo:
    items = _get(_get(obj, "items"), "data") or []
    first_item = items[0] if items else None
    # Newer API versions report the period end on the subscription item
    period_end = _get(obj, "current_period_end") or _get(first_item, "current_period_end", 0)
    customer = _get(obj, "customer")
    return SubscriptionInfo(
        id=_get(obj, "id"),
        customer_id=customer if isinstance(customer, str) else _get(customer, "id"),
        status=_get(obj, "status", ""),
        price_id=_get(_get(first_item, "price"), "id", ""),
        current_period_end=int(period_end),
    )


def _to_price(obj: Any) -> PriceInfo:
    product = _get(obj, "product")
    return PriceInfo(
        id=_get(obj, "id"),
        product_id=product if isinstance(product, str) else _get(product, "id"),
        unit_amount=_get(obj, "unit_amount"),
        currency=_get(obj, "currency"),
        type=_get(obj, "type", "recurring"),
        interval=_get(_get(obj, "recurring"), "interval"),
    )


class StripePaymentsGateway:
    """
    PaymentsGateway backed by the official stripe SDK.

    Usage:
        >>> gateway = StripePaymentsGateway(settings.stripe_secret_key, settings.stripe_webhook_secret)
        >>> url = gateway.create_checkout_session(price_id="price_123", success_url=..., cancel_url=...)
    """

    def __init__(self, secret_key: str, webhook_secret: Optional[str] = None):
        if not secret_key:
            raise ValueError("Stripe secret key is not configured")
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret

    # =========================================================================
    # Customers and subscriptions
    # =========================================================================

    def find_customer_by_email(self, email: str) -> Optional[CustomerInfo]:
        customers = stripe.Customer.list(email=email, limit=1, api_key=self._secret_key)
        if not customers.data:
            return None
        return _to_customer(customers.data[0])

    def create_customer(self, email: str, metadata: Optional[Dict[str, str]] = None) -> CustomerInfo:
        customer = stripe.Customer.create(
            email=email,
            metadata=metadata or {},
            api_key=self._secret_key,
        )
        logger.info(f"Created Stripe customer {customer.id}")
        return _to_customer(customer)

    def retrieve_customer(self, customer_id: str) -> Optional[CustomerInfo]:
        try:
            customer = stripe.Customer.retrieve(customer_id, api_key=self._secret_key)
        except stripe.InvalidRequestError as e:
            logger.warning(f"Stripe customer {customer_id} not found: {e}")
            return None
        return _to_customer(customer)

    def list_active_subscriptions(self, customer_id: str, *, limit: int = 1) -> List[SubscriptionInfo]:
        subscriptions = stripe.Subscription.list(
            customer=customer_id,
            status="active",
            limit=limit,
            api_key=self._secret_key,
        )
        return [_to_subscription(s) for s in subscriptions.data]

    def retrieve_price(self, price_id: str) -> PriceInfo:
        return _to_price(stripe.Price.retrieve(price_id, api_key=self._secret_key))

    # =========================================================================
    # Checkout and webhooks
    # =========================================================================

    def create_checkout_session(
        self,
        *,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_id: Optional[str] = None,
        customer_email: Optional[str] = None,
        client_reference_id: Optional[str] = None,
    ) -> str:
        params: Dict[str, Any] = {
            "mode": "subscription",
            "line_items": [{"price": price_id, "quantity": 1}],
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_id:
            params["customer"] = customer_id
        elif customer_email:
            params["customer_email"] = customer_email
        if client_reference_id:
            params["client_reference_id"] = client_reference_id

        session = stripe.checkout.Session.create(api_key=self._secret_key, **params)
        logger.info(f"Created Stripe checkout session {session.id}")
        return session.url

    def construct_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if not self._webhook_secret:
            raise ValueError("Stripe webhook secret is not configured")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except stripe.SignatureVerificationError as e:
            raise ValueError(f"Webhook signature verification failed: {e}") from e

        data_object = _get(_get(event, "data"), "object")
        subscription = None
        if _get(data_object, "object") == SUBSCRIPTION_OBJECT:
            subscription = _to_subscription(data_object)

        return WebhookEvent(id=_get(event, "id"), type=_get(event, "type"), subscription=subscription)

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_active_products(self) -> List[ProductInfo]:
        products = stripe.Product.list(active=True, limit=LIST_PAGE_SIZE, api_key=self._secret_key)
        return [
            ProductInfo(
                id=_get(p, "id"),
                name=_get(p, "name", ""),
                description=_get(p, "description"),
                active=bool(_get(p, "active", True)),
            )
            for p in products.auto_paging_iter()
        ]

    def list_active_prices(self) -> List[PriceInfo]:
        prices = stripe.Price.list(active=True, limit=LIST_PAGE_SIZE, api_key=self._secret_key)
        return [_to_price(p) for p in prices.auto_paging_iter()]
