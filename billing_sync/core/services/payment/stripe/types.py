from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator


class StripeObject(BaseModel):
    # Stripe adds fields between API versions; keep whatever we do not model
    model_config = ConfigDict(extra="allow")


class StripeError(StripeObject):
    """The ``error`` object of a failed Stripe request."""

    type: str | None = None
    code: str | None = None
    decline_code: str | None = None
    message: str | None = None
    param: str | None = None


class ListResponse(StripeObject):
    has_more: bool = False
    url: str | None = None


class Product(StripeObject):
    id: str
    name: str
    active: bool = True
    description: str | None = None
    images: list[str] = []
    metadata: dict[str, Any] = {}


class Recurring(StripeObject):
    interval: Literal["day", "week", "month", "year"]
    interval_count: int = 1
    trial_period_days: int | None = None
    usage_type: Literal["licensed", "metered"] | None = None


class Price(StripeObject):
    id: str
    product: str | Product | dict[str, Any]
    active: bool = True
    currency: str
    nickname: str | None = None
    type: Literal["one_time", "recurring"]
    unit_amount: int | None = None
    recurring: Recurring | None = None
    metadata: dict[str, Any] = {}


class Address(StripeObject):
    city: str | None = None
    country: str | None = None
    line1: str | None = None
    line2: str | None = None
    postal_code: str | None = None
    state: str | None = None


class BillingDetails(StripeObject):
    address: Address | None = None
    email: str | None = None
    name: str | None = None
    phone: str | None = None


class PaymentMethod(StripeObject):
    """
    A Stripe PaymentMethod.

    The details for the method live under a key named after ``type`` (e.g. a
    ``card`` object when ``type == "card"``) and are kept as extra fields.
    """

    id: str
    type: str
    customer: str | None = None
    billing_details: BillingDetails = BillingDetails()

    @property
    def type_details(self) -> dict[str, Any]:
        """Return the method-specific block (e.g. the ``card`` object)."""
        details = (self.model_extra or {}).get(self.type)
        return dict(details) if isinstance(details, dict) else {}


class SubscriptionItemPrice(StripeObject):
    id: str


class SubscriptionItem(StripeObject):
    id: str
    price: SubscriptionItemPrice
    quantity: int | None = None
    current_period_start: int | None = None
    current_period_end: int | None = None


class SubscriptionItemList(ListResponse):
    data: list[SubscriptionItem]


class Subscription(StripeObject):
    id: str
    customer: str
    status: Literal[
        "trialing",
        "active",
        "canceled",
        "incomplete",
        "incomplete_expired",
        "past_due",
        "unpaid",
        "paused",
    ]
    items: SubscriptionItemList
    metadata: dict[str, Any] = {}
    quantity: int | None = None
    cancel_at_period_end: bool = False
    cancel_at: int | None = None
    canceled_at: int | None = None
    current_period_start: int
    current_period_end: int
    created: int
    ended_at: int | None = None
    trial_start: int | None = None
    trial_end: int | None = None
    default_payment_method: str | PaymentMethod | None = None

    @model_validator(mode="before")
    @classmethod
    def _fill_from_first_item(cls, values: Any) -> Any:
        """
        Newer API versions report billing periods and quantity per item only.
        Take them from the first item when the subscription omits them.
        """
        if not isinstance(values, dict):
            return values

        values = dict(values)
        customer = values.get("customer")
        if isinstance(customer, dict):
            values["customer"] = customer.get("id")

        items = (values.get("items") or {}).get("data") or []
        if not items or not isinstance(items[0], dict):
            return values

        first = items[0]
        for field in ("current_period_start", "current_period_end", "quantity"):
            if values.get(field) is None and first.get(field) is not None:
                values[field] = first[field]
        return values


class Customer(StripeObject):
    id: str
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    address: Address | None = None
    metadata: dict[str, Any] = {}


class CheckoutSession(StripeObject):
    id: str
    mode: Literal["payment", "setup", "subscription"]
    customer: str | None = None
    subscription: str | None = None
    metadata: dict[str, Any] = {}

    @model_validator(mode="before")
    @classmethod
    def _collapse_expanded_references(cls, values: Any) -> Any:
        """Reduce expanded ``customer``/``subscription`` objects to their ids."""
        if not isinstance(values, dict):
            return values

        values = dict(values)
        for field in ("customer", "subscription"):
            ref = values.get(field)
            if isinstance(ref, dict):
                values[field] = ref.get("id")
        return values


__all__ = [
    "Address",
    "BillingDetails",
    "CheckoutSession",
    "Customer",
    "PaymentMethod",
    "Price",
    "Product",
    "Recurring",
    "StripeError",
    "Subscription",
    "SubscriptionItem",
    "SubscriptionItemList",
]
