"""
Test suite for the storage date helpers and Stripe reference resolution.

Run tests:
    pytest tests/core/test_utils.py -v
"""

from types import SimpleNamespace

from billing_sync.core.utils import (
    resolve_stripe_id,
    to_optional_storage_date,
    to_storage_date,
)


class TestToStorageDate:

    def test_converts_epoch_seconds_to_utc_iso_string(self):
        assert to_storage_date(1700000000) == "2023-11-14T22:13:20+00:00"

    def test_epoch_zero(self):
        assert to_storage_date(0) == "1970-01-01T00:00:00+00:00"


class TestToOptionalStorageDate:

    def test_none_is_absent(self):
        assert to_optional_storage_date(None) is None

    def test_zero_is_treated_as_absent(self):
        """Zero is read as "not set" rather than the Unix epoch."""
        assert to_optional_storage_date(0) is None

    def test_delegates_for_present_values(self):
        assert to_optional_storage_date(1700000000) == to_storage_date(1700000000)


class TestResolveStripeId:

    def test_bare_id(self):
        assert resolve_stripe_id("cus_1") == "cus_1"

    def test_empty_string_is_absent(self):
        assert resolve_stripe_id("") is None

    def test_none(self):
        assert resolve_stripe_id(None) is None

    def test_expanded_dict(self):
        assert resolve_stripe_id({"id": "cus_1", "object": "customer"}) == "cus_1"

    def test_object_with_id(self):
        assert resolve_stripe_id(SimpleNamespace(id="sub_1")) == "sub_1"
