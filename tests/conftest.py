"""
Pytest configuration and core fixtures.

Storage-level tests run against an in-memory SQLite database created per test;
everything else mocks the CRUD and Stripe seams. All fixtures are
function-scoped for complete test isolation.
"""

import copy
import os
from typing import Any, AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


def pytest_configure(config):
    """Configure the environment before the application settings are loaded."""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["SENTRY_DSN"] = ""
    os.environ.setdefault("STRIPE_API_KEY", "sk_test_123")

    # Point DATABASE_URL to TEST_DATABASE_URL so the app never touches a real database
    os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", SQLITE_MEMORY_URL)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session bound to a fresh in-memory SQLite database with all tables."""
    from billing_sync.core.db import Base
    import billing_sync.core.db.models  # noqa: F401

    engine = create_async_engine(
        SQLITE_MEMORY_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        bind=engine, expire_on_commit=False, autoflush=False
    )
    async with session_maker() as session:
        yield session

    await engine.dispose()


STRIPE_PRODUCT: dict[str, Any] = {
    "id": "prod_1",
    "object": "product",
    "active": True,
    "name": "Gold Plan",
    "description": "Everything in Silver, plus more",
    "images": ["https://files.stripe.com/gold.png", "https://files.stripe.com/alt.png"],
    "metadata": {"tier": "gold"},
    "livemode": False,
}

STRIPE_PRICE: dict[str, Any] = {
    "id": "price_1",
    "object": "price",
    "active": True,
    "currency": "usd",
    "nickname": "Gold monthly",
    "product": "prod_1",
    "type": "recurring",
    "unit_amount": 2000,
    "recurring": {
        "interval": "month",
        "interval_count": 1,
        "trial_period_days": 14,
        "usage_type": "licensed",
    },
    "metadata": {},
}

STRIPE_PAYMENT_METHOD: dict[str, Any] = {
    "id": "pm_1",
    "object": "payment_method",
    "type": "card",
    "customer": "cus_1",
    "billing_details": {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+442071234567",
        "address": {
            "city": "London",
            "country": "GB",
            "line1": "12 St James's Square",
            "line2": None,
            "postal_code": "SW1Y 4JH",
            "state": None,
        },
    },
    "card": {"brand": "visa", "last4": "4242", "exp_month": 12, "exp_year": 2030},
}

STRIPE_SUBSCRIPTION: dict[str, Any] = {
    "id": "sub_1",
    "object": "subscription",
    "customer": "cus_1",
    "status": "active",
    "metadata": {"source": "checkout"},
    "quantity": 1,
    "cancel_at_period_end": False,
    "cancel_at": None,
    "canceled_at": None,
    "current_period_start": 1700000000,
    "current_period_end": 1702592000,
    "created": 1699990000,
    "ended_at": None,
    "trial_start": None,
    "trial_end": None,
    "items": {
        "object": "list",
        "data": [
            {
                "id": "si_1",
                "object": "subscription_item",
                "price": {"id": "price_1", "object": "price"},
                "quantity": 1,
            }
        ],
        "has_more": False,
        "url": "/v1/subscription_items?subscription=sub_1",
    },
    "default_payment_method": STRIPE_PAYMENT_METHOD,
}


@pytest.fixture
def stripe_product() -> dict[str, Any]:
    """A Stripe product object as delivered in product.* events."""
    return copy.deepcopy(STRIPE_PRODUCT)


@pytest.fixture
def stripe_price() -> dict[str, Any]:
    """A recurring Stripe price object as delivered in price.* events."""
    return copy.deepcopy(STRIPE_PRICE)


@pytest.fixture
def stripe_subscription() -> dict[str, Any]:
    """A Stripe subscription retrieved with default_payment_method expanded."""
    return copy.deepcopy(STRIPE_SUBSCRIPTION)


def make_event(event_type: str, obj: dict[str, Any], event_id: str = "evt_1") -> dict:
    return {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj},
    }


@pytest.fixture
def event_factory():
    """Build Stripe event envelopes around an object."""
    return make_event


def column_values(instance: Any) -> dict[str, Any]:
    mapper = inspect(type(instance))
    return {
        prop.columns[0].name: getattr(instance, prop.key)
        for prop in mapper.column_attrs
    }


@pytest.fixture
def stored_row():
    """Read an ORM instance back as a dict keyed by column name."""
    return column_values
