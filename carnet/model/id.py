from __future__ import annotations

import typing as t

import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid

_key_length = 22


class PrefixedID(str):
    """A shortuuid tagged with the kind of record it identifies, e.g. ``grade_<key>``.

    Only the bare key is stored; the prefix is restored when rows are read back.
    """

    prefix: t.ClassVar[str]
    separator: t.ClassVar[str] = "_"

    def __init_subclass__(cls, prefix: str, **kwargs: t.Any):
        super().__init_subclass__(**kwargs)
        if not prefix.isalpha():
            raise TypeError(f"{cls.__name__}: prefix must be alphabetic, got {prefix!r}")
        cls.prefix = prefix

    def __new__(cls, value: str | None = None, /) -> t.Self:
        if value is None:
            return cls.from_key(shortuuid.uuid())
        head, sep, key = value.partition(cls.separator)
        if not sep or head != cls.prefix:
            raise ValueError(f"invalid {cls.__name__}: expected prefix {cls.prefix!r}")
        cls._check_key(key)
        return super().__new__(cls, value)

    @classmethod
    def from_key(cls, key: str) -> t.Self:
        return super().__new__(cls, f"{cls.prefix}{cls.separator}{key}")

    @classmethod
    def _check_key(cls, key: str) -> None:
        if len(key) != _key_length:
            raise ValueError(f"invalid {cls.__name__}: key must have length {_key_length}")
        alphabet = shortuuid.get_alphabet()
        if bad := set(key) - set(alphabet):
            raise ValueError(f"invalid {cls.__name__}: unexpected characters {''.join(sorted(bad))!r}")

    @property
    def key(self) -> str:
        return self.partition(self.separator)[2]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        from_str = core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls), from_str]),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, src: t.Any, handler: p.GetJsonSchemaHandler) -> dict[str, t.Any]:
        return {"type": "string", "pattern": f"^{cls.prefix}{cls.separator}"}


# fmt: off
class UserID(PrefixedID, prefix="user"): ...
class GradeID(PrefixedID, prefix="grade"): ...
class AttendanceSessionID(PrefixedID, prefix="attsession"): ...
class AttendanceRecordID(PrefixedID, prefix="attrecord"): ...
class AssignmentID(PrefixedID, prefix="assignment"): ...
# fmt: on
