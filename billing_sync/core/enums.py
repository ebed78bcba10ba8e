from enum import Enum


class PriceType(str, Enum):
    """Billing type of a Stripe price."""

    ONE_TIME = "one_time"
    RECURRING = "recurring"


class PricingInterval(str, Enum):
    """Billing interval of a recurring price."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class SubscriptionStatus(str, Enum):
    """Status of a subscription."""

    TRIALING = "trialing"
    ACTIVE = "active"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    PAST_DUE = "past_due"
    UNPAID = "unpaid"
    PAUSED = "paused"


class CheckoutMode(str, Enum):
    """Mode of a Stripe Checkout Session."""

    PAYMENT = "payment"
    SETUP = "setup"
    SUBSCRIPTION = "subscription"
