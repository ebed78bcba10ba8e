from billing_sync.core.services.payment.stripe.main import Stripe

__all__ = [
    # Payment provider
    "Stripe",
]
