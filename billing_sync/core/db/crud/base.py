from typing import (
    Any,
    TypeVar,
    Generic,
    Type,
)

from sqlalchemy import (
    update as sa_update,
    delete as sa_delete,
)
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from billing_sync.core.config import database_logger
from billing_sync.core.exceptions.types import DatabaseException

T = TypeVar("T")

# Dialects with INSERT ... ON CONFLICT support
_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


async def _finish(session: AsyncSession, commit_self: bool) -> None:
    if commit_self:
        await session.commit()
    else:
        await session.flush()


class BaseDB(Generic[T]):
    """
    Generic CRUD operations keyed by the ``id`` primary key.

    Every SQLAlchemy failure is re-raised as DatabaseException. A missing row
    is never an error: reads return None and deletes report 0 rows.
    """

    def __init__(self, model: Type[T]):
        self.model = model

    @property
    def table_name(self) -> str:
        return self.model.__tablename__  # type: ignore[attr-defined]

    async def get_by_id(self, session: AsyncSession, id: str) -> T | None:
        """
        Load one row by primary key.

        Returns:
            T | None: The instance, or None when no row has this id.

        Raises:
            DatabaseException: If the query fails.
        """
        try:
            result = await session.execute(
                select(self.model).where(getattr(self.model, "id") == id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise DatabaseException(
                f"Error retrieving {self.model.__name__} with ID {id}: {str(e)}"
            ) from e

    async def get_one_by_filters(self, session: AsyncSession, filters: dict) -> T | None:
        """
        Load the single row whose attributes equal ``filters``.

        Returns:
            T | None: The instance, or None when nothing matches.

        Raises:
            DatabaseException: If the query fails or several rows match.
        """
        try:
            result = await session.execute(select(self.model).filter_by(**filters))
            return result.scalar_one_or_none()
        except (SQLAlchemyError, ValueError) as e:
            raise DatabaseException(
                f"Error retrieving {self.model.__name__} with filters {filters}: {str(e)}"
            ) from e

    async def update(
        self, session: AsyncSession, id: str, updates: dict, commit_self: bool = True
    ) -> T | None:
        """
        Set the given attributes on the row with this id.

        Args:
            session: Database session.
            id: Primary key of the row.
            updates: Attribute names and their new values.
            commit_self: Commit when True, only flush otherwise.

        Returns:
            T | None: The updated instance, or None when no row has this id.

        Raises:
            DatabaseException: If the update fails.
        """
        try:
            result = await session.execute(
                sa_update(self.model)
                .where(self.model.id == id)  # type: ignore[attr-defined]
                .values(**updates)
                .returning(self.model)
                .execution_options(synchronize_session=False)
            )
            instance = result.scalar_one_or_none()
            await _finish(session, commit_self)
            return instance
        except SQLAlchemyError as e:
            raise DatabaseException(
                f"Error updating {self.model.__name__} with ID {id}: {str(e)}"
            ) from e

    async def delete(
        self, session: AsyncSession, id: str, commit_self: bool = True
    ) -> int:
        """
        Delete the row with this id.

        Returns:
            int: Number of rows removed, 0 when the row did not exist.

        Raises:
            DatabaseException: If the delete fails.
        """
        try:
            result = await session.execute(
                sa_delete(self.model).where(
                    self.model.id == id  # type: ignore[attr-defined]
                )
            )
            await _finish(session, commit_self)
            return result.rowcount  # type: ignore[attr-defined]
        except SQLAlchemyError as e:
            raise DatabaseException(
                f"Error deleting {self.model.__name__} with ID {id}: {str(e)}"
            ) from e

    async def upsert(
        self,
        session: AsyncSession,
        data: dict[str, Any],
        unique_fields: list[str] | None = None,
        exclude_from_update: list[str] | None = None,
        commit_self: bool = True,
    ) -> T:
        """
        Insert a row, or overwrite the existing one, in a single statement.

        Runs ``INSERT ... ON CONFLICT (unique_fields) DO UPDATE`` so concurrent
        deliveries of the same object cannot create duplicates. Keys of ``data``
        are column names (``metadata``), not attribute names (``metadata_``).

        Args:
            session: Database session.
            data: Values of every column to write.
            unique_fields: Conflict target columns. Defaults to ["id"].
            exclude_from_update: Columns kept as stored when the row exists.
            commit_self: Commit when True, only flush otherwise.

        Returns:
            T: The stored instance, reloaded from the database.

        Raises:
            ValueError: If a conflict column is missing from ``data``.
            DatabaseException: If the statement fails or the dialect has no
                ON CONFLICT support.
        """
        unique_fields = unique_fields or ["id"]
        missing = [field for field in unique_fields if field not in data]
        if missing:
            raise ValueError(
                f"Unique field '{missing[0]}' must be present in data for upsert"
            )

        try:
            dialect = session.get_bind().dialect.name
            insert = _UPSERT_INSERTS.get(dialect)
            if insert is None:
                raise DatabaseException(
                    f"Upsert is not supported on the '{dialect}' dialect"
                )

            keep = {*unique_fields, *(exclude_from_update or [])}
            stmt = insert(self.model.__table__).values(**data)  # type: ignore[attr-defined]
            overwrite = {
                column: stmt.excluded[column] for column in data if column not in keep
            }
            if overwrite:
                stmt = stmt.on_conflict_do_update(
                    index_elements=unique_fields, set_=overwrite
                )
            else:
                stmt = stmt.on_conflict_do_nothing(index_elements=unique_fields)

            await session.execute(stmt)
            await _finish(session, commit_self)

            identity = {field: data[field] for field in unique_fields}
            result = await session.execute(
                select(self.model)
                .filter_by(**identity)
                .execution_options(populate_existing=True)
            )
            database_logger.info(f"Upserted {self.table_name} row {identity}")
            return result.scalar_one()
        except SQLAlchemyError as e:
            raise DatabaseException(
                f"Error upserting {self.model.__name__}: {str(e)}"
            ) from e
