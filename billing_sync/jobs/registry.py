from functools import lru_cache
from typing import Annotated, Any, Awaitable, Callable

from pydantic import BaseModel, Field, model_validator

from billing_sync.core.config import job_logger
from billing_sync.core.db import AsyncSessionLocal
from billing_sync.jobs.stripe import (
    handle_checkout_session_completed,
    handle_price_changed,
    handle_price_deleted,
    handle_product_changed,
    handle_product_deleted,
    handle_subscription_changed,
    is_subscription_checkout,
)


class JobConfig(BaseModel):
    id: Annotated[str, Field(min_length=1, description="Unique job identifier")]
    events: Annotated[
        list[str],
        Field(min_length=1, description="Stripe event names that trigger the job"),
    ]
    handler: Annotated[
        Callable[..., Awaitable[Any]],
        Field(description="Coroutine run with a storage session and the event"),
    ]
    filter: Annotated[
        Callable[[dict[str, Any]], bool] | None,
        Field(description="Predicate on the event object; False skips the event"),
    ] = None
    description: Annotated[
        str | None, Field(description="Human readable summary of the job")
    ] = None


class JobRegistry(BaseModel):
    jobs: list[JobConfig]

    @model_validator(mode="after")
    def check_unique_bindings(self) -> "JobRegistry":
        job_ids: set[str] = set()
        bound: dict[str, str] = {}
        for job in self.jobs:
            if job.id in job_ids:
                raise ValueError(f"Job '{job.id}' is defined more than once.")
            job_ids.add(job.id)
            for event in job.events:
                if event in bound:
                    raise ValueError(
                        f"Event '{event}' is bound to both '{bound[event]}' "
                        f"and '{job.id}'."
                    )
                bound[event] = job.id
        return self

    def for_event(self, event_type: str) -> JobConfig | None:
        for job in self.jobs:
            if event_type in job.events:
                return job
        return None


JOB_CONFIG = [
    # Catalog
    {
        "id": "stripe-product-changed",
        "events": ["product.created", "product.updated"],
        "handler": handle_product_changed,
        "description": "Upsert the product record",
    },
    {
        "id": "stripe-product-deleted",
        "events": ["product.deleted"],
        "handler": handle_product_deleted,
        "description": "Delete the product record",
    },
    {
        "id": "stripe-price-changed",
        "events": ["price.created", "price.updated"],
        "handler": handle_price_changed,
        "description": "Upsert the price record",
    },
    {
        "id": "stripe-price-deleted",
        "events": ["price.deleted"],
        "handler": handle_price_deleted,
        "description": "Delete the price record",
    },
    # Subscriptions
    {
        "id": "stripe-subscription-changed",
        "events": [
            "customer.subscription.created",
            "customer.subscription.updated",
            "customer.subscription.deleted",
        ],
        "handler": handle_subscription_changed,
        "description": "Reconcile the subscription; copy billing details on creation",
    },
    {
        "id": "stripe-session-completed",
        "events": ["checkout.session.completed"],
        "handler": handle_checkout_session_completed,
        "filter": is_subscription_checkout,
        "description": "Reconcile the subscription created by a checkout",
    },
]


@lru_cache()
def get_job_registry() -> JobRegistry:
    return JobRegistry.model_validate({"jobs": JOB_CONFIG})


def get_job_configs() -> list[JobConfig]:
    return get_job_registry().jobs


def get_job_for_event(event_type: str) -> JobConfig | None:
    return get_job_registry().for_event(event_type)


async def dispatch_event(event: dict[str, Any]) -> bool:
    """
    Run the job bound to a Stripe event.

    Args:
        event: Stripe event envelope (``{"id", "type", "data": {"object": ...}}``).

    Returns:
        bool: True if a job handled the event, False if the event type has no
            job or the job's filter rejected the event object.

    Raises:
        Exception: Any handler error is logged and re-raised so the caller can
            decide whether to retry.
    """
    event_id = event.get("id")
    event_type = event.get("type") or ""

    job = get_job_for_event(event_type)
    if job is None:
        job_logger.info(f"No job registered for event {event_id} ({event_type}), skipping")
        return False

    payload = (event.get("data") or {}).get("object")
    if job.filter is not None and not (
        isinstance(payload, dict) and job.filter(payload)
    ):
        job_logger.info(
            f"Event {event_id} ({event_type}) filtered out by job {job.id}, skipping"
        )
        return False

    job_logger.info(f"Running job {job.id} for event {event_id} ({event_type})")
    try:
        async with AsyncSessionLocal() as session:
            await job.handler(session, event)
    except Exception as e:
        job_logger.error(f"Job {job.id} failed for event {event_id} ({event_type}): {e}")
        raise

    job_logger.info(f"Job {job.id} completed for event {event_id}")
    return True


__all__ = [
    "JobConfig",
    "JobRegistry",
    "JOB_CONFIG",
    "dispatch_event",
    "get_job_configs",
    "get_job_for_event",
    "get_job_registry",
]
