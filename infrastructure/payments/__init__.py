"""
Payments provider integrations.
"""

from infrastructure.payments.stripe_gateway import StripePaymentsGateway

__all__ = ["StripePaymentsGateway"]
