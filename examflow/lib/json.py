"""JSON for stored documents, log records and CLI output.

Marks are carried as :class:`decimal.Decimal` throughout, so they are encoded
as strings and never pass through a float. Timestamps are encoded in UTC.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import json as pyjson
import typing as t

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
Encoder = t.Callable[[t.Any], JSONValue]


def encode_timestamp(obj: datetime.datetime) -> str:
    if obj.tzinfo is not None:
        obj = obj.astimezone(datetime.UTC)
    return obj.isoformat()


def encode_date(obj: datetime.date) -> str:
    return obj.isoformat()


def encode_decimal(obj: decimal.Decimal) -> str:
    return str(obj)


def encode_enum(obj: enum.Enum) -> JSONValue:
    return obj.value


def encode_collection(obj: set[t.Any] | frozenset[t.Any] | tuple[t.Any, ...]) -> list[t.Any]:
    return list(obj)


def encode_model(obj: p.BaseModel) -> dict[str, JSONValue]:
    return obj.model_dump(mode="json")


class JSONEncoder(pyjson.JSONEncoder):
    # datetime must precede date, it is a subclass
    encoders: t.ClassVar[dict[type, Encoder]] = {
        p.BaseModel: encode_model,
        datetime.datetime: encode_timestamp,
        datetime.date: encode_date,
        decimal.Decimal: encode_decimal,
        enum.Enum: encode_enum,
        set: encode_collection,
        frozenset: encode_collection,
    }

    def default(self, o: t.Any) -> JSONValue:
        for tp, encode in self.encoders.items():
            if isinstance(o, tp):
                return encode(o)
        return super().default(o)


def dumps(obj: t.Any, *, cls: type[pyjson.JSONEncoder] = JSONEncoder, **kwargs: t.Any) -> str:
    return pyjson.dumps(obj, cls=cls, **kwargs)


def loads(s: str | bytes | bytearray, **kwargs: t.Any) -> t.Any:
    return pyjson.loads(s, **kwargs)
