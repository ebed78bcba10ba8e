"""
Tests for the application exception hierarchy.

Run tests:
    pytest tests/core/exceptions/test_types.py -v
"""

import pytest

from billing_sync.core.exceptions.types import (
    AppException,
    BadRequestException,
    CustomerNotFoundException,
    DatabaseException,
    IdempotencyException,
    NotFoundException,
    RateLimitException,
    StripeAPIException,
    StripeCardException,
)


class TestAppException:

    def test_defaults_to_internal_server_error(self):
        exc = AppException("boom")

        assert exc.message == "boom"
        assert exc.status_code == 500
        assert exc.details is None
        assert str(exc) == "boom"

    def test_custom_status_and_details(self):
        exc = AppException("unavailable", 503, {"type": "network_error"})

        assert exc.status_code == 503
        assert exc.details == {"type": "network_error"}


class TestHierarchy:

    @pytest.mark.parametrize(
        "exc_class, status_code",
        [
            (DatabaseException, 500),
            (NotFoundException, 404),
            (CustomerNotFoundException, 404),
            (BadRequestException, 400),
            (StripeAPIException, 502),
            (StripeCardException, 402),
            (IdempotencyException, 409),
            (RateLimitException, 429),
        ],
    )
    def test_default_status_codes(self, exc_class, status_code):
        exc = exc_class()

        assert isinstance(exc, AppException)
        assert exc.status_code == status_code

    def test_customer_not_found_is_a_not_found(self):
        exc = CustomerNotFoundException()

        assert isinstance(exc, NotFoundException)
        assert exc.message == "Customer mapping not found."


class TestStripeAPIException:

    def test_carries_stripe_error_fields(self):
        exc = StripeAPIException(
            message="No such customer: 'cus_missing'",
            status_code=404,
            stripe_code="resource_missing",
            error_type="invalid_request_error",
            param="customer",
            request_id="req_123",
        )

        assert exc.status_code == 404
        assert exc.stripe_code == "resource_missing"
        assert exc.error_type == "invalid_request_error"
        assert exc.param == "customer"
        assert exc.request_id == "req_123"
