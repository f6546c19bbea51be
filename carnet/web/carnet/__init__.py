"""School records API."""

__all__ = ["create_app"]

from .main import create_app
