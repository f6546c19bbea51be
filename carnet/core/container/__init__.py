__all__ = [
    "AuthContainer",
    "BootConfiguration",
    "CarnetContainer",
    "PersistentContainer",
    "StorageContainer",
]

from .auth import AuthContainer
from .carnet import BootConfiguration, CarnetContainer
from .storage import PersistentContainer, StorageContainer
