"""Column types bridging examflow models and SQL."""

import datetime
import enum
import typing as t

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeDecorator
from sqlalchemy.types import DateTime, Enum, JSON, String

from examflow.model.id import ShortUUIDKey

# identifiers are stored without their prefix; shortuuid keys are 22 characters
StoredKeyLength = 22


class ShortUUIDKeyType(TypeDecorator[ShortUUIDKey]):
    impl = String
    cache_ok = True

    def __init__(self, key_type: type[ShortUUIDKey]):
        super().__init__(StoredKeyLength)
        self.key_type = key_type

    def process_bind_param(self, value: ShortUUIDKey | None, dialect: Dialect) -> str | None:
        return None if value is None else self.key_type(str(value)).key

    def process_result_value(self, value: str | None, dialect: Dialect) -> ShortUUIDKey | None:
        return None if value is None else self.key_type(key=value)


class UTCDateTime(TypeDecorator[datetime.datetime]):
    """Timezone-aware timestamps, normalized to UTC.

    Naive values are refused on the way in. SQLite has no timezone support,
    so there the UTC wall time is stored and the zone is reattached on read.
    """

    impl = DateTime
    cache_ok = True

    def __init__(self):
        super().__init__(timezone=True)

    def process_bind_param(self, value: datetime.datetime | None, dialect: Dialect) -> datetime.datetime | None:
        if value is None:
            return None
        if value.utcoffset() is None:
            raise ValueError(f"naive timestamp {value.isoformat()} cannot be stored")
        utc = value.astimezone(datetime.UTC)
        if dialect.name == "sqlite":
            return utc.replace(tzinfo=None)
        return utc

    def process_result_value(self, value: datetime.datetime | None, dialect: Dialect) -> datetime.datetime | None:
        if value is None or value.tzinfo is not None:
            return value
        return value.replace(tzinfo=datetime.UTC)


class EnumByValue(object):
    """Stand-in for ``enum.Enum`` in a type annotation map.

    Each enum-annotated column becomes an ``Enum`` column holding member
    values (``"voice"``) rather than member names (``"Voice"``).
    """

    def _resolve_for_python_type(self, python_type: type[enum.Enum], matched_on: t.Any, flattened: t.Any) -> Enum:
        return Enum(python_type, values_callable=lambda members: [m.value for m in members])


JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")
