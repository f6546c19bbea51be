"""Thin layer over dependency_injector's wiring.

Functions declare what they need as ``di.Provide["dotted.provider.path"]``
defaults, resolved against ``CarnetContainer`` once the module is wired.
"""

from __future__ import annotations

__all__ = [
    "Manage",
    "NotReady",
    "Provide",
    "as_",
    "inject",
]

import typing as t

import dependency_injector.wiring as wiring
from dependency_injector.wiring import Closing, Provide, TypeModifier

from carnet.lib.sentinel import NotReady

P = t.ParamSpec("P")
R = t.TypeVar("R")


def inject(fn: t.Callable[P, R]) -> t.Callable[P, R]:
    # FastAPI inspects the signature of the patched function, so modules
    # with routes must not use postponed annotations
    return t.cast(t.Callable[P, R], wiring.inject(fn))


class Manage(object):
    """``Provide`` for resources that are closed once the call returns.

    Used for database sessions in route signatures:
    ``session: Session = Depends(di.Manage["storage.persistent.session"])``
    """

    def __new__(cls, provider: str) -> t.Any:
        return Closing[Provide[provider]]

    @classmethod
    def __class_getitem__(cls, item: str) -> t.Any:
        return cls(item)


def as_(type_: type[t.Any]) -> TypeModifier:
    """Coerce a configuration value, e.g. ``di.Provide["config.web", di.as_(WebSettings)]``"""
    return TypeModifier(type_)
