__all__ = [
    "ExtraFormatter",
]

from .extra import ExtraFormatter
