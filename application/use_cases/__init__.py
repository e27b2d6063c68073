"""
Application use cases for the FitCoach API.

Use cases orchestrate domain logic and repository operations. Each one has
an execute() method returning a Result dataclass instead of raising.
"""

from application.use_cases.create_checkout import CreateCheckoutUseCase, CreateCheckoutResult
from application.use_cases.check_subscription import CheckSubscriptionUseCase, CheckSubscriptionResult
from application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase, WebhookResult
from application.use_cases.sync_products import SyncProductsUseCase, SyncProductsResult

__all__ = [
    "CreateCheckoutUseCase",
    "CreateCheckoutResult",
    "CheckSubscriptionUseCase",
    "CheckSubscriptionResult",
    "HandleStripeWebhookUseCase",
    "WebhookResult",
    "SyncProductsUseCase",
    "SyncProductsResult",
]
