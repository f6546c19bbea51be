"""Persistence for carnet records.

Each record type has a module of plain functions (``get``, ``find``,
``create``, ``update``, ``delete``) taking an injected ``Session``. The
modules are loaded on first attribute access, so that importing the package
for its ``Session`` alias does not pull in the table definitions.
"""

import importlib
import typing as t

from sqlalchemy.orm import Session, SessionTransaction

_repositories = frozenset({"assignment", "attendance", "grade", "user"})

__all__ = ["Session", "SessionTransaction", *sorted(_repositories)]

if t.TYPE_CHECKING:
    from . import assignment, attendance, grade, user


def __getattr__(name: str) -> t.Any:
    if name not in _repositories:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = importlib.import_module(f".{name}", __name__)
    globals()[name] = module
    return module
