from __future__ import annotations

import datetime
import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

# Command modules import this module as `click`: it is all of click, plus the
# parameter types below.

TEnum = t.TypeVar("TEnum", bound=enum.Enum)


class EnumType(click.Choice, t.Generic[TEnum]):
    """Choose a member of ``enum_cls`` by its value"""

    def __init__(self, enum_cls: type[TEnum], case_sensitive: bool = False):
        self.enum_cls = enum_cls
        super().__init__([str(m.value) for m in enum_cls], case_sensitive=case_sensitive)
        self.name = enum_cls.__name__

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> TEnum:
        if isinstance(value, self.enum_cls):
            return value
        return self.enum_cls(super().convert(value, param, ctx))


class DateTimeParamType(click.ParamType):
    """ISO-8601 timestamps; values without an offset are taken to be UTC"""

    name = "timestamp"

    def convert(
        self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> datetime.datetime | None:
        if value is None or isinstance(value, datetime.datetime):
            return value

        try:
            ts = datetime.datetime.fromisoformat(str(value).strip())
        except ValueError:
            self.fail(f"{value!r} is not an ISO-8601 timestamp.", param, ctx)
        return ts if ts.tzinfo is not None else ts.replace(tzinfo=datetime.UTC)


class DirectoryURLType(click.ParamType):
    """An existing directory, given as a path or a ``file://`` URL"""

    name = "directory"

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> p.FileUrl:
        if isinstance(value, p.FileUrl):
            return value

        raw = str(value)
        if "://" in raw:
            try:
                url = p.FileUrl(raw)
            except p.ValidationError:
                self.fail(f"{raw}: only file:// URLs are accepted", param, ctx)
            path = pathlib.Path(url.path or "")
        else:
            path = pathlib.Path(raw)

        if not path.is_dir():
            self.fail(f"{raw}: no such directory", param, ctx)
        return p.FileUrl(path.absolute().as_uri())
