import datetime
import typing as t
from collections.abc import Mapping


def deep_update(base: dict[str, t.Any], layer: Mapping[str, t.Any]) -> dict[str, t.Any]:
    """Return a copy of ``base`` with ``layer`` merged over it.

    Nested mappings merge key by key; any other value in ``layer`` replaces
    the one in ``base`` outright, lists included.
    """
    merged = dict(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_update(dict(t.cast(Mapping[str, t.Any], current)), t.cast(Mapping[str, t.Any], value))
        else:
            merged[key] = value
    return merged


def nest(dotted: str, value: t.Any) -> dict[str, t.Any]:
    """``nest("a.b.c", 1) == {"a": {"b": {"c": 1}}}``"""
    head, _, rest = dotted.partition(".")
    return {head: nest(rest, value) if rest else value}


def format_duration(delta: datetime.timedelta) -> str:
    """Render a timedelta as `[-][Nd ]HH:MM:SS`, dropping microseconds."""
    total = int(delta.total_seconds())
    sign = "-" if total < 0 else ""
    days, rem = divmod(abs(total), 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    hms = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{sign}{days}d {hms}" if days else f"{sign}{hms}"
