"""
Tests for subscription reconciliation and the billing details copy.

The CRUD instances and the Stripe client are mocked at the module seam.

Run tests:
    pytest tests/sync/test_subscriptions.py -v
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from billing_sync.core.exceptions.types import (
    CustomerNotFoundException,
    DatabaseException,
    StripeAPIException,
)
from billing_sync.core.services.payment.stripe.types import Subscription
from billing_sync.sync.subscriptions import manage_subscription_status_change

MODULE = "billing_sync.sync.subscriptions"


@pytest.fixture
def mocks(stripe_subscription):
    """Patch the CRUD instances and Stripe client used by reconciliation."""
    with (
        patch(f"{MODULE}.customer_db") as customer_db,
        patch(f"{MODULE}.subscription_db") as subscription_db,
        patch(f"{MODULE}.user_db") as user_db,
        patch(f"{MODULE}.Stripe") as stripe,
    ):
        mapping = MagicMock()
        mapping.id = "user_1"
        mapping.stripe_customer_id = "cus_1"
        customer_db.get_by_stripe_customer_id = AsyncMock(return_value=mapping)
        subscription_db.upsert = AsyncMock()
        user_db.update_billing_details = AsyncMock()
        stripe.get_subscription = AsyncMock(
            return_value=Subscription.model_validate(stripe_subscription)
        )
        stripe.update_customer = AsyncMock()

        yield MagicMock(
            customer_db=customer_db,
            subscription_db=subscription_db,
            user_db=user_db,
            stripe=stripe,
        )


class TestManageSubscriptionStatusChange:

    async def test_upserts_subscription_row(self, mocks):
        session = AsyncMock()

        await manage_subscription_status_change(
            session, subscription_id="sub_1", customer_id="cus_1"
        )

        mocks.customer_db.get_by_stripe_customer_id.assert_awaited_once_with(
            session, "cus_1"
        )
        mocks.stripe.get_subscription.assert_awaited_once_with(
            "sub_1", expand=["default_payment_method"]
        )
        mocks.subscription_db.upsert.assert_awaited_once()
        _, row = mocks.subscription_db.upsert.call_args.args
        assert row["id"] == "sub_1"
        assert row["user_id"] == "user_1"
        assert row["price_id"] == "price_1"
        assert row["current_period_start"] == "2023-11-14T22:13:20+00:00"

    async def test_without_create_action_makes_no_billing_calls(self, mocks):
        await manage_subscription_status_change(
            AsyncMock(), subscription_id="sub_1", customer_id="cus_1", create_action=False
        )

        mocks.stripe.update_customer.assert_not_called()
        mocks.user_db.update_billing_details.assert_not_called()

    async def test_create_action_copies_billing_details(self, mocks):
        session = AsyncMock()

        await manage_subscription_status_change(
            session, subscription_id="sub_1", customer_id="cus_1", create_action=True
        )

        mocks.stripe.update_customer.assert_awaited_once()
        args, kwargs = mocks.stripe.update_customer.call_args
        assert args == ("cus_1",)
        assert kwargs["name"] == "Ada Lovelace"
        assert kwargs["phone"] == "+442071234567"
        assert kwargs["address"].city == "London"

        mocks.user_db.update_billing_details.assert_awaited_once()
        args, kwargs = mocks.user_db.update_billing_details.call_args
        assert args == (session, "user_1")
        assert kwargs["billing_address"]["postal_code"] == "SW1Y 4JH"
        assert kwargs["payment_method"] == {
            "brand": "visa",
            "last4": "4242",
            "exp_month": 12,
            "exp_year": 2030,
        }

    async def test_missing_phone_skips_billing_calls(self, mocks, stripe_subscription):
        stripe_subscription["default_payment_method"]["billing_details"]["phone"] = None
        mocks.stripe.get_subscription.return_value = Subscription.model_validate(
            stripe_subscription
        )

        await manage_subscription_status_change(
            AsyncMock(), subscription_id="sub_1", customer_id="cus_1", create_action=True
        )

        mocks.subscription_db.upsert.assert_awaited_once()
        mocks.stripe.update_customer.assert_not_called()
        mocks.user_db.update_billing_details.assert_not_called()

    async def test_unexpanded_payment_method_skips_billing_calls(
        self, mocks, stripe_subscription
    ):
        stripe_subscription["default_payment_method"] = "pm_1"
        mocks.stripe.get_subscription.return_value = Subscription.model_validate(
            stripe_subscription
        )

        await manage_subscription_status_change(
            AsyncMock(), subscription_id="sub_1", customer_id="cus_1", create_action=True
        )

        mocks.stripe.update_customer.assert_not_called()

    async def test_missing_mapping_is_fatal(self, mocks):
        mocks.customer_db.get_by_stripe_customer_id.return_value = None

        with pytest.raises(CustomerNotFoundException):
            await manage_subscription_status_change(
                AsyncMock(), subscription_id="sub_1", customer_id="cus_unknown"
            )

        mocks.stripe.get_subscription.assert_not_called()
        mocks.subscription_db.upsert.assert_not_called()

    async def test_upsert_error_stops_before_billing_calls(self, mocks):
        mocks.subscription_db.upsert.side_effect = DatabaseException("write failed")

        with pytest.raises(DatabaseException):
            await manage_subscription_status_change(
                AsyncMock(), subscription_id="sub_1", customer_id="cus_1", create_action=True
            )

        mocks.stripe.update_customer.assert_not_called()

    async def test_customer_update_error_skips_user_update(self, mocks):
        mocks.stripe.update_customer.side_effect = StripeAPIException("Stripe is down")

        with pytest.raises(StripeAPIException):
            await manage_subscription_status_change(
                AsyncMock(), subscription_id="sub_1", customer_id="cus_1", create_action=True
            )

        mocks.subscription_db.upsert.assert_awaited_once()
        mocks.user_db.update_billing_details.assert_not_called()
