__all__ = [
    "BootConfiguration",
    "di",
    "CarnetContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
    "TimestampProvider",
]

# isort: off
from . import di
from .provider import LoggingProvider, TimestampProvider
from .config import Secrets, Settings
from .container import BootConfiguration, CarnetContainer
