"""
CRUD operations for the User and Customer models.

"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from billing_sync.core.db.crud.base import BaseDB
from billing_sync.core.db.models.user import Customer, User


class CustomerDB(BaseDB[Customer]):
    """CRUD operations for the user/Stripe customer mapping."""

    def __init__(self):
        super().__init__(Customer)

    async def get_by_user_id(
        self, session: AsyncSession, user_id: str
    ) -> Customer | None:
        """
        Get the customer mapping of a local user.

        Args:
            session: Database session.
            user_id: Local user ID.

        Returns:
            The mapping, or None if the user has none yet.

        Raises:
            DatabaseException: If the query fails.
        """
        return await self.get_by_id(session, user_id)

    async def get_by_stripe_customer_id(
        self, session: AsyncSession, stripe_customer_id: str
    ) -> Customer | None:
        """
        Get the customer mapping for a Stripe customer.

        Args:
            session: Database session.
            stripe_customer_id: Stripe Customer ID.

        Returns:
            The mapping, or None if the Stripe customer is unknown locally.

        Raises:
            DatabaseException: If the query fails.
        """
        return await self.get_one_by_filters(
            session, {"stripe_customer_id": stripe_customer_id}
        )

    async def save_mapping(
        self,
        session: AsyncSession,
        user_id: str,
        stripe_customer_id: str,
        commit_self: bool = True,
    ) -> Customer:
        """Insert the mapping, or fill in the Stripe id of an existing empty one."""
        return await self.upsert(
            session,
            {"id": user_id, "stripe_customer_id": stripe_customer_id},
            commit_self=commit_self,
        )


class UserDB(BaseDB[User]):
    """CRUD operations for User model."""

    def __init__(self):
        super().__init__(User)

    async def update_billing_details(
        self,
        session: AsyncSession,
        user_id: str,
        billing_address: dict[str, Any],
        payment_method: dict[str, Any],
        commit_self: bool = True,
    ) -> User | None:
        """
        Store the billing address and payment method snapshot of a user.

        Returns:
            The updated user, or None if no such user exists.
        """
        return await self.update(
            session,
            user_id,
            {"billing_address": billing_address, "payment_method": payment_method},
            commit_self=commit_self,
        )
