"""
Resolution of local users to Stripe customers.

"""

from sqlalchemy.ext.asyncio import AsyncSession

from billing_sync.core.config import sync_logger
from billing_sync.core.db.crud import customer_db
from billing_sync.core.services.payment.stripe.main import Stripe


async def create_or_retrieve_customer(
    session: AsyncSession, *, email: str | None, user_id: str
) -> str:
    """
    Return the Stripe customer id of a local user, creating the customer if needed.

    The local mapping is read first; a Stripe customer is created only when
    the user has no mapping or one with an empty Stripe id. The new customer
    carries the user id under the ``supabaseUUID`` metadata key.

    Args:
        session: Database session.
        email: Email to set on a newly created customer, if any.
        user_id: Local user ID.

    Returns:
        str: The Stripe customer id.

    Raises:
        DatabaseException: If reading or saving the mapping fails. A failed
            read never leads to a customer being created.
        StripeAPIException: If the customer cannot be created.
    """
    mapping = await customer_db.get_by_user_id(session, user_id)
    if mapping is not None and mapping.stripe_customer_id:
        return mapping.stripe_customer_id

    customer = await Stripe.create_customer(
        email=email or None,
        metadata={"supabaseUUID": user_id},
    )
    await customer_db.save_mapping(session, user_id, customer.id)
    sync_logger.info(f"New customer created and inserted for {user_id}.")
    return customer.id


__all__ = ["create_or_retrieve_customer"]
