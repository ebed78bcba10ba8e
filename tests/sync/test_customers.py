"""
Tests for create_or_retrieve_customer.

Run tests:
    pytest tests/sync/test_customers.py -v
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from billing_sync.core.db.crud import customer_db
from billing_sync.core.db.models import User
from billing_sync.core.exceptions.types import DatabaseException, StripeAPIException
from billing_sync.core.services.payment.stripe.types import Customer
from billing_sync.sync.customers import create_or_retrieve_customer

MODULE = "billing_sync.sync.customers"


def _mapping(stripe_customer_id: str | None):
    mapping = MagicMock()
    mapping.id = "user_1"
    mapping.stripe_customer_id = stripe_customer_id
    return mapping


@pytest.fixture
def mock_stripe():
    with patch(f"{MODULE}.Stripe") as stripe:
        stripe.create_customer = AsyncMock(
            return_value=Customer(id="cus_new", email="ada@example.com")
        )
        yield stripe


class TestCreateOrRetrieveCustomer:

    async def test_returns_existing_mapping(self, mock_stripe):
        with patch(f"{MODULE}.customer_db") as mock_db:
            mock_db.get_by_user_id = AsyncMock(return_value=_mapping("cus_existing"))
            mock_db.save_mapping = AsyncMock()

            customer_id = await create_or_retrieve_customer(
                AsyncMock(), email="ada@example.com", user_id="user_1"
            )

        assert customer_id == "cus_existing"
        mock_stripe.create_customer.assert_not_called()
        mock_db.save_mapping.assert_not_called()

    async def test_creates_customer_when_mapping_missing(self, mock_stripe):
        session = AsyncMock()
        with patch(f"{MODULE}.customer_db") as mock_db:
            mock_db.get_by_user_id = AsyncMock(return_value=None)
            mock_db.save_mapping = AsyncMock()

            customer_id = await create_or_retrieve_customer(
                session, email="ada@example.com", user_id="user_1"
            )

        assert customer_id == "cus_new"
        mock_stripe.create_customer.assert_awaited_once_with(
            email="ada@example.com", metadata={"supabaseUUID": "user_1"}
        )
        mock_db.save_mapping.assert_awaited_once_with(session, "user_1", "cus_new")

    async def test_creates_customer_when_stripe_id_empty(self, mock_stripe):
        with patch(f"{MODULE}.customer_db") as mock_db:
            mock_db.get_by_user_id = AsyncMock(return_value=_mapping(""))
            mock_db.save_mapping = AsyncMock()

            customer_id = await create_or_retrieve_customer(
                AsyncMock(), email=None, user_id="user_1"
            )

        assert customer_id == "cus_new"
        mock_stripe.create_customer.assert_awaited_once_with(
            email=None, metadata={"supabaseUUID": "user_1"}
        )

    async def test_lookup_error_does_not_create_customer(self, mock_stripe):
        with patch(f"{MODULE}.customer_db") as mock_db:
            mock_db.get_by_user_id = AsyncMock(
                side_effect=DatabaseException("connection lost")
            )

            with pytest.raises(DatabaseException):
                await create_or_retrieve_customer(
                    AsyncMock(), email="ada@example.com", user_id="user_1"
                )

        mock_stripe.create_customer.assert_not_called()

    async def test_persist_error_is_fatal(self, mock_stripe):
        with patch(f"{MODULE}.customer_db") as mock_db:
            mock_db.get_by_user_id = AsyncMock(return_value=None)
            mock_db.save_mapping = AsyncMock(
                side_effect=DatabaseException("unique violation")
            )

            with pytest.raises(DatabaseException, match="unique violation"):
                await create_or_retrieve_customer(
                    AsyncMock(), email="ada@example.com", user_id="user_1"
                )

    async def test_stripe_error_propagates(self, mock_stripe):
        mock_stripe.create_customer.side_effect = StripeAPIException("Stripe is down")
        with patch(f"{MODULE}.customer_db") as mock_db:
            mock_db.get_by_user_id = AsyncMock(return_value=None)
            mock_db.save_mapping = AsyncMock()

            with pytest.raises(StripeAPIException):
                await create_or_retrieve_customer(
                    AsyncMock(), email="ada@example.com", user_id="user_1"
                )

        mock_db.save_mapping.assert_not_called()

    async def test_persists_mapping_in_storage(self, db_session, mock_stripe):
        db_session.add(User(id="user_1"))
        await db_session.commit()

        first = await create_or_retrieve_customer(
            db_session, email="ada@example.com", user_id="user_1"
        )
        second = await create_or_retrieve_customer(
            db_session, email="ada@example.com", user_id="user_1"
        )

        assert first == second == "cus_new"
        mock_stripe.create_customer.assert_awaited_once()
        mapping = await customer_db.get_by_stripe_customer_id(db_session, "cus_new")
        assert mapping is not None and mapping.id == "user_1"
