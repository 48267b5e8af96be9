from __future__ import annotations

import re
import typing as t

import pydantic as p
import pydantic_core.core_schema as cs
import shortuuid


class ShortUUIDKey(str):
    """Identifier of the form ``<prefix>$<shortuuid>``, e.g. ``subm$V7k2...``.

    ``ShortUUIDKey()`` mints a new identifier and ``ShortUUIDKey(text)``
    parses one, rejecting text with the wrong prefix. ``key=`` wraps a bare
    key read back from the database without checking it. Only the bare
    :attr:`key` is stored; the prefix is added back on read.
    """

    prefix: t.ClassVar[str]
    separator: t.ClassVar[str] = "$"
    pattern: t.ClassVar[re.Pattern[str]]

    def __init_subclass__(cls, /, prefix: str, **kwargs: t.Any):
        super().__init_subclass__(**kwargs)
        if len(prefix) != 4 or not prefix.isalpha():
            raise TypeError(f"{cls.__name__}: prefix must be four letters, got {prefix!r}")
        cls.prefix = prefix
        alphabet = re.escape(shortuuid.get_alphabet())
        cls.pattern = re.compile(rf"{prefix}{re.escape(cls.separator)}[{alphabet}]{{22}}")

    def __new__(cls, text: str | None = None, /, key: str | None = None) -> t.Self:
        if key is not None:
            return super().__new__(cls, f"{cls.prefix}{cls.separator}{key}")
        if text is None:
            return super().__new__(cls, f"{cls.prefix}{cls.separator}{shortuuid.uuid()}")
        if not cls.pattern.fullmatch(text):
            raise ValueError(f"malformed {cls.__name__} {text!r}, expected {cls.prefix}{cls.separator}<22 chars>")
        return super().__new__(cls, text)

    @property
    def key(self) -> str:
        return self.split(self.separator, 1)[1]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str.__str__(self)!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source: t.Any, handler: p.GetCoreSchemaHandler) -> cs.CoreSchema:
        parse = cs.no_info_after_validator_function(cls, cs.str_schema(strip_whitespace=True))
        return cs.json_or_python_schema(
            json_schema=parse,
            python_schema=cs.union_schema([cs.is_instance_schema(cls), parse]),
            serialization=cs.plain_serializer_function_ser_schema(str.__str__),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, schema: cs.CoreSchema, handler: p.GetJsonSchemaHandler) -> dict[str, t.Any]:
        return {"type": "string", "pattern": cls.pattern.pattern}


# fmt: off
class ExamID(ShortUUIDKey, prefix="exam"): ...
class SubmissionID(ShortUUIDKey, prefix="subm"): ...
class UserID(ShortUUIDKey, prefix="user"): ...
