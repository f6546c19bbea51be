import datetime

from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeDecorator
from sqlalchemy.types import DateTime, String

from carnet.model.id import PrefixedID


class PrefixedIDType(TypeDecorator[PrefixedID]):
    """Stores only the shortuuid part of a prefixed identifier."""

    impl = String
    cache_ok = True

    def __init__(self, id_type: type[PrefixedID]):
        self.id_type = id_type
        super().__init__(22)

    def process_bind_param(self, value: PrefixedID | str | None, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return self.id_type(value).key

    def process_result_value(self, value: str | None, dialect: Dialect) -> PrefixedID | None:
        if value is None:
            return None
        return self.id_type.from_key(value)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.UTC)
    return value.astimezone(datetime.UTC)


class UTCDateTime(TypeDecorator[datetime.datetime]):
    """Timestamps stored in UTC and always handed back time zone aware.

    Backends without time zone support (SQLite) return naive values; those are
    UTC by construction since everything is converted on the way in.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime.datetime | None, dialect: Dialect) -> datetime.datetime | None:
        return as_utc(value) if value is not None else None

    def process_result_value(self, value: datetime.datetime | None, dialect: Dialect) -> datetime.datetime | None:
        return as_utc(value) if value is not None else None
