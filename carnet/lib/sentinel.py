from __future__ import annotations

import typing as t


class _Sentinel(object):
    """A marker value; every subclass has exactly one instance."""

    _instances: t.ClassVar[dict[type, _Sentinel]] = {}

    def __new__(cls) -> t.Self:
        if cls not in _Sentinel._instances:
            _Sentinel._instances[cls] = super().__new__(cls)
        return t.cast(t.Self, _Sentinel._instances[cls])

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class NotSet(_Sentinel):
    """Default for storage update keywords meaning "leave this column alone".

    ``None`` can't play this part, since clearing a nullable column is a real
    update.
    """


class NotReady(_Sentinel):
    """Held by container providers until boot supplies the real value."""
