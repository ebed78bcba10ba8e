"""
Catalog record operations: products and prices upserted or deleted by id.

Storage errors raised by the CRUD layer propagate unchanged.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from billing_sync.core.config import sync_logger
from billing_sync.core.db.crud import price_db, product_db
from billing_sync.core.db.models import Price as PriceModel
from billing_sync.core.db.models import Product as ProductModel
from billing_sync.core.services.payment.stripe.types import Price, Product
from billing_sync.sync.mappers import build_price_row, build_product_row


async def upsert_product_record(
    session: AsyncSession, product: Product
) -> ProductModel:
    row = build_product_row(product)
    record = await product_db.upsert(session, row.to_storage())
    sync_logger.info(f"Product inserted/updated: {row.id}")
    return record


async def upsert_price_record(session: AsyncSession, price: Price) -> PriceModel:
    row = build_price_row(price)
    record = await price_db.upsert(session, row.to_storage())
    sync_logger.info(f"Price inserted/updated: {row.id}")
    return record


async def delete_product_record(session: AsyncSession, product_id: str) -> int:
    """Delete a product by id. Returns the number of rows removed (0 or 1)."""
    deleted = await product_db.delete(session, product_id)
    sync_logger.info(f"Product deleted: {product_id} ({deleted} row(s))")
    return deleted


async def delete_price_record(session: AsyncSession, price_id: str) -> int:
    """Delete a price by id. Returns the number of rows removed (0 or 1)."""
    deleted = await price_db.delete(session, price_id)
    sync_logger.info(f"Price deleted: {price_id} ({deleted} row(s))")
    return deleted


__all__ = [
    "upsert_product_record",
    "upsert_price_record",
    "delete_product_record",
    "delete_price_record",
]
