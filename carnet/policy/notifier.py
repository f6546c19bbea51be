from __future__ import annotations

import datetime
import enum

from .entity import DenyReason, EditDecision


class Locale(enum.Enum):
    French = "fr"
    English = "en"


class _Unit(enum.Enum):
    Minute = "minute"
    Hour = "hour"
    Day = "day"


# (singular, plural) per unit, for "N <unit> remaining"
_remaining: dict[Locale, dict[_Unit, tuple[str, str]]] = {
    Locale.French: {
        _Unit.Minute: ("{n} minute restante", "{n} minutes restantes"),
        _Unit.Hour: ("{n} heure restante", "{n} heures restantes"),
        _Unit.Day: ("{n} jour restant", "{n} jours restants"),
    },
    Locale.English: {
        _Unit.Minute: ("{n} minute remaining", "{n} minutes remaining"),
        _Unit.Hour: ("{n} hour remaining", "{n} hours remaining"),
        _Unit.Day: ("{n} day remaining", "{n} days remaining"),
    },
}

_amount: dict[Locale, dict[_Unit, tuple[str, str]]] = {
    Locale.French: {
        _Unit.Minute: ("{n} minute", "{n} minutes"),
        _Unit.Hour: ("{n} heure", "{n} heures"),
        _Unit.Day: ("{n} jour", "{n} jours"),
    },
    Locale.English: {
        _Unit.Minute: ("{n} minute", "{n} minutes"),
        _Unit.Hour: ("{n} hour", "{n} hours"),
        _Unit.Day: ("{n} day", "{n} days"),
    },
}

_locked = {
    Locale.French: "Verrouillé",
    Locale.English: "Locked",
}

_unrestricted = {
    Locale.French: "Modifiable sans limite de temps",
    Locale.English: "Editable without time limit",
}

_expired = {
    Locale.French: (
        "Modification verrouillée : le délai est dépassé depuis {amount}. "
        "Seul un administrateur peut encore modifier cet élément."
    ),
    Locale.English: (
        "Editing is locked: the window closed {amount} ago. Only an administrator can still change this record."
    ),
}

_forbidden = {
    Locale.French: "Vous n'avez pas les permissions pour modifier cet élément.",
    Locale.English: "You do not have permission to edit this record.",
}


def _quantize(delta: datetime.timedelta) -> tuple[int, _Unit]:
    # the unit is picked before rounding, so 59m40s reads "60 minutes" and
    # 23h40m reads "24 heures", as the portals have always shown it
    hours = delta.total_seconds() / 3600
    if hours < 1:
        return round(hours * 60), _Unit.Minute
    if hours < 24:
        return round(hours), _Unit.Hour
    return round(hours / 24), _Unit.Day


def _plural(locale: Locale, table: dict[_Unit, tuple[str, str]], delta: datetime.timedelta) -> str:
    n, unit = _quantize(delta)
    singular, plural = table[unit]
    # French treats zero as singular
    one = n == 1 or (n == 0 and locale is Locale.French)
    return (singular if one else plural).format(n=n)


def describe_remaining(decision: EditDecision, locale: Locale = Locale.French) -> str:
    """Short status label for an edit control, e.g. "2 jours restants"."""
    if not decision.allowed:
        return _locked[locale]
    if decision.remaining is None:
        return _unrestricted[locale]
    return _plural(locale, _remaining[locale], max(decision.remaining, datetime.timedelta(0)))


def describe_denial(decision: EditDecision, locale: Locale = Locale.French) -> str | None:
    if decision.allowed:
        return None
    if decision.reason is DenyReason.WindowExpired and decision.elapsed_over_by is not None:
        return _expired[locale].format(amount=_plural(locale, _amount[locale], decision.elapsed_over_by))
    return _forbidden[locale]
