"""
Payments Gateway Interface (Port).

Narrow contract over the third-party payments API used by the billing
endpoints. Implementations raise on upstream failures; the use cases turn
those into error responses.
"""
from dataclasses import dataclass, field
from typing import Protocol, Optional, List, Dict


@dataclass
class CustomerInfo:
    """A billing customer."""
    id: str
    email: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    deleted: bool = False


@dataclass
class SubscriptionInfo:
    """A subscription with its first line item's price."""
    id: str
    customer_id: str
    status: str
    price_id: str
    current_period_end: int  # unix seconds


@dataclass
class PriceInfo:
    """A price attached to a product."""
    id: str
    product_id: str
    unit_amount: Optional[int] = None
    currency: Optional[str] = None
    type: str = "recurring"
    interval: Optional[str] = None


@dataclass
class ProductInfo:
    """A payments product."""
    id: str
    name: str
    description: Optional[str] = None
    active: bool = True


@dataclass
class WebhookEvent:
    """A verified webhook event. subscription is set for subscription events."""
    id: str
    type: str
    subscription: Optional[SubscriptionInfo] = None


class PaymentsGateway(Protocol):
    """
    Abstract interface for the payments provider.
    """

    def find_customer_by_email(self, email: str) -> Optional[CustomerInfo]:
        """Return the first customer with this email, or None."""
        ...

    def create_customer(self, email: str, metadata: Optional[Dict[str, str]] = None) -> CustomerInfo:
        """Create a customer."""
        ...

    def retrieve_customer(self, customer_id: str) -> Optional[CustomerInfo]:
        """Get a customer by ID (deleted customers are returned with deleted=True)."""
        ...

    def list_active_subscriptions(self, customer_id: str, *, limit: int = 1) -> List[SubscriptionInfo]:
        """List a customer's active subscriptions."""
        ...

    def retrieve_price(self, price_id: str) -> PriceInfo:
        """Get a price by ID."""
        ...

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
        """
        Create a hosted subscription checkout session.

        Returns:
            Redirect URL for the hosted checkout page
        """
        ...

    def construct_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify a signed webhook payload.

        Raises:
            ValueError: if the signature or payload is invalid
        """
        ...

    def list_active_products(self) -> List[ProductInfo]:
        """List active products."""
        ...

    def list_active_prices(self) -> List[PriceInfo]:
        """List active prices."""
        ...
