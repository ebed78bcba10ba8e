from httpx import codes as status


class AppException(Exception):
    """
    Base class of every error raised by the sync layer.

    ``status_code`` follows HTTP semantics so the job platform can tell
    client-side problems (4xx) from retryable failures (5xx).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code or status.INTERNAL_SERVER_ERROR
        self.details = details
        super().__init__(message)


class DatabaseException(AppException):
    """A storage read or write failed."""

    def __init__(self, message: str = "A database error occurred."):
        super().__init__(message, status.INTERNAL_SERVER_ERROR)


class NotFoundException(AppException):
    def __init__(self, message: str = "Resource not found."):
        super().__init__(message, status.NOT_FOUND)


class CustomerNotFoundException(NotFoundException):
    """A Stripe customer has no local user mapping."""

    def __init__(self, message: str = "Customer mapping not found."):
        super().__init__(message)


class BadRequestException(AppException):
    """An event payload lacks a field its job needs."""

    def __init__(self, message: str = "Bad request."):
        super().__init__(message, status.BAD_REQUEST)


class StripeAPIException(AppException):
    """
    Stripe answered with an error.

    Keeps the fields of Stripe's error object and the ``Request-Id`` header
    for support lookups.
    """

    def __init__(
        self,
        message: str = "A Stripe API error occurred.",
        status_code: int = status.BAD_GATEWAY,
        stripe_code: str | None = None,
        error_type: str = "api_error",
        param: str | None = None,
        request_id: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, status_code, details)
        self.stripe_code = stripe_code
        self.error_type = error_type
        self.param = param
        self.request_id = request_id


class StripeCardException(AppException):
    """Stripe rejected a card (``card_error``)."""

    def __init__(
        self,
        message: str = "Card was declined.",
        stripe_code: str | None = None,
        decline_code: str | None = None,
        param: str | None = None,
        request_id: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, status.PAYMENT_REQUIRED, details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code
        self.param = param
        self.request_id = request_id


class IdempotencyException(AppException):
    """Stripe reported a conflicting request (409 or ``idempotency_error``)."""

    def __init__(
        self,
        message: str = "Idempotency key was used with different parameters.",
        request_id: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, status.CONFLICT, details)
        self.request_id = request_id


class RateLimitException(AppException):
    """Stripe answered 429."""

    def __init__(
        self,
        message: str = "Stripe rate limit exceeded.",
        details: dict | None = None,
    ):
        super().__init__(message, status.TOO_MANY_REQUESTS, details)


__all__ = [
    "AppException",
    "DatabaseException",
    "NotFoundException",
    "CustomerNotFoundException",
    "BadRequestException",
    "StripeAPIException",
    "StripeCardException",
    "IdempotencyException",
    "RateLimitException",
]
