import os
from typing import Any, NoReturn

import httpx
from httpx import codes as http_status

from billing_sync.core.config import (
    PLACEHOLDER_STRIPE_API_KEY,
    settings,
    stripe_logger,
)
from billing_sync.core.exceptions.types import (
    AppException,
    IdempotencyException,
    RateLimitException,
    StripeAPIException,
    StripeCardException,
)
from billing_sync.core.services.payment.stripe.types import (
    Address,
    Customer,
    StripeError,
    Subscription,
)


class Stripe:
    """
    Async client for the few Stripe REST endpoints the sync jobs call.

    Requests are sent once. Error responses are mapped to application
    exceptions and raised immediately.
    """

    _api_key: str = settings.STRIPE_API_KEY or os.getenv("STRIPE_API_KEY") or ""
    _base_url: str = settings.STRIPE_API_BASE_URL or "https://api.stripe.com"
    _api_version: str | None = settings.STRIPE_API_VERSION
    _timeout: float = settings.STRIPE_TIMEOUT_SECONDS
    _client: httpx.AsyncClient | None = None

    @staticmethod
    def _flatten_to_payload(
        payload: dict[str, Any],
        prefix: str,
        data: dict[str, Any],
        *,
        max_depth: int = 3,
    ) -> None:
        """
        Write ``data`` into ``payload`` using Stripe's bracketed form keys.

        ``{"supabaseUUID": "123"}`` under the ``metadata`` prefix becomes
        ``payload["metadata[supabaseUUID]"] = "123"``. Lists are indexed
        (``items[0][price]``), booleans become ``"true"``/``"false"`` and None
        an empty string. Dicts nested deeper than ``max_depth`` are sent as
        their string form.

        Args:
            payload: Form payload to add the keys to.
            prefix: Top-level key, e.g. "metadata" or "address".
            data: Mapping to encode.
            max_depth: Number of dict levels to expand.
        """

        def encode(key: str, value: Any, depth: int) -> None:
            if isinstance(value, dict):
                for name, item in value.items():
                    child = f"{key}[{name}]"
                    if depth >= max_depth:
                        payload[child] = "" if item is None else str(item)
                    else:
                        encode(child, item, depth + 1)
            elif isinstance(value, list):
                for index, item in enumerate(value):
                    encode(f"{key}[{index}]", item, depth)
            elif isinstance(value, bool):
                payload[key] = "true" if value else "false"
            elif value is None:
                payload[key] = ""
            else:
                payload[key] = str(value)

        encode(prefix, data, 0)

    @classmethod
    def _check_api_key(cls) -> None:
        """Raise ValueError when STRIPE_API_KEY is blank or still the placeholder."""
        key = cls._api_key.strip()
        if not key or key == PLACEHOLDER_STRIPE_API_KEY:
            raise ValueError(
                "STRIPE_API_KEY is not configured. Set it in the environment or the .env file."
            )

    @classmethod
    def _init_client(cls) -> httpx.AsyncClient:
        """
        Return the shared httpx client, creating it on first use.

        The secret key is sent as the basic-auth user name. ``Stripe-Version``
        is pinned when STRIPE_API_VERSION is set.
        """
        if cls._client is not None:
            return cls._client

        cls._check_api_key()
        headers = {"Stripe-Version": cls._api_version} if cls._api_version else {}
        cls._client = httpx.AsyncClient(
            base_url=cls._base_url,
            auth=httpx.BasicAuth(cls._api_key, ""),
            headers=headers,
            timeout=httpx.Timeout(cls._timeout),
        )
        stripe_logger.info(f"Stripe client ready for {cls._base_url}")
        return cls._client

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> NoReturn:
        """
        Raise the application exception matching a Stripe error response.

        429 maps to RateLimitException, 409 and ``idempotency_error`` to
        IdempotencyException, ``card_error`` to StripeCardException and
        anything else to StripeAPIException carrying the HTTP status.
        See https://docs.stripe.com/api/errors.
        """
        status = response.status_code
        request_id = response.headers.get("Request-Id")

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {"error": {"message": response.text}}

        error = StripeError.model_validate(body.get("error") or {})
        message = error.message or f"Stripe API error {status}"
        stripe_logger.error(
            f"Stripe request failed with {status} "
            f"(type={error.type}, code={error.code}, request_id={request_id}): {message}"
        )

        if status == http_status.TOO_MANY_REQUESTS:
            raise RateLimitException(
                message=message, details={"request_id": request_id, **body}
            )
        if status == http_status.CONFLICT or error.type == "idempotency_error":
            raise IdempotencyException(
                message=message, request_id=request_id, details=body
            )
        if error.type == "card_error":
            raise StripeCardException(
                message=message,
                stripe_code=error.code,
                decline_code=error.decline_code,
                param=error.param,
                request_id=request_id,
                details=body,
            )
        raise StripeAPIException(
            message=message,
            status_code=status,
            stripe_code=error.code,
            error_type=error.type or "api_error",
            param=error.param,
            request_id=request_id,
            details=body,
        )

    @classmethod
    async def _request(
        cls,
        method: str,
        path: str,
        *,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send one request to Stripe and return the decoded JSON body.

        Raises:
            StripeAPIException: Or one of its siblings, see ``_raise_for_error``.
            AppException: With status 503 when Stripe cannot be reached.
        """
        client = cls._init_client()

        try:
            response = await client.request(method, path, data=data, params=params)
        except httpx.TransportError as exc:
            stripe_logger.error(
                f"Could not reach Stripe for {method} {path}: {type(exc).__name__}: {exc}"
            )
            raise AppException(
                message="Stripe is unreachable.",
                status_code=http_status.SERVICE_UNAVAILABLE,
                details={"error": str(exc), "type": "network_error"},
            ) from exc

        if response.is_error:
            cls._raise_for_error(response)

        stripe_logger.info(
            f"{method} {path} -> {response.status_code} "
            f"(request_id={response.headers.get('Request-Id')})"
        )
        return response.json()

    @classmethod
    async def aclose(cls) -> None:
        if cls._client is None:
            return
        await cls._client.aclose()
        cls._client = None
        stripe_logger.info("Stripe client closed")

    @classmethod
    async def create_customer(
        cls,
        email: str | None = None,
        *,
        metadata: dict[str, str] | None = None,
    ) -> Customer:
        """
        Create a Stripe customer.

        Args:
            email: Email of the customer; left out of the request when empty.
            metadata: Key-value pairs stored on the customer.

        Returns:
            Customer: The created customer.
        """
        form: dict[str, Any] = {}
        if email:
            form["email"] = email
        if metadata:
            cls._flatten_to_payload(form, "metadata", metadata)

        return Customer.model_validate(
            await cls._request("POST", "/v1/customers", data=form)
        )

    @classmethod
    async def get_subscription(
        cls,
        subscription_id: str,
        *,
        expand: list[str] | None = None,
    ) -> Subscription:
        """
        Fetch a subscription, optionally expanding referenced objects.

        Args:
            subscription_id: Stripe Subscription ID (sub_...).
            expand: Fields to expand, e.g. ``["default_payment_method"]``.

        Returns:
            Subscription: The subscription as currently known to Stripe.
        """
        params = {"expand[]": expand} if expand else None
        return Subscription.model_validate(
            await cls._request(
                "GET", f"/v1/subscriptions/{subscription_id}", params=params
            )
        )

    @classmethod
    async def update_customer(
        cls,
        customer_id: str,
        *,
        name: str | None = None,
        phone: str | None = None,
        address: Address | dict[str, Any] | None = None,
    ) -> Customer:
        """
        Set the name, phone and billing address of a customer.

        A None name or phone is not sent, so Stripe keeps its current value.
        The address is sent whole: its None fields go out as empty strings and
        clear the stored value.
        """
        form: dict[str, Any] = {}
        if name is not None:
            form["name"] = name
        if phone is not None:
            form["phone"] = phone
        if address is not None:
            if isinstance(address, Address):
                address = address.model_dump()
            cls._flatten_to_payload(form, "address", address)

        return Customer.model_validate(
            await cls._request("POST", f"/v1/customers/{customer_id}", data=form)
        )


__all__ = ["Stripe"]
