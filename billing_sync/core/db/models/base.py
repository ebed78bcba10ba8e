from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from billing_sync.core.db import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class ISODateTime(TypeDecorator):
    """
    Timezone-aware timestamp column exchanged as ISO-8601 strings.

    Rows are built from Stripe epoch seconds converted to ISO strings; this type
    stores them as real timestamps and hands them back in the same string form.
    Naive values (SQLite drops the offset) are read back as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> datetime | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    def process_result_value(self, value: Any, dialect) -> str | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()


class BaseModel(Base):
    __abstract__ = True

    # Stripe ids (prod_..., price_..., sub_...) or the local identity id
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
