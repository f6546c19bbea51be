from __future__ import annotations

import datetime

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Callable, Configuration, Provider, Singleton

from carnet.auth.jwt import JWTManager


class AuthContainer(DeclarativeContainer):
    """Access tokens; ``config`` is the ``web.carnet.auth`` section."""

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    token_lifetime: Provider[datetime.timedelta] = Callable(
        datetime.timedelta,
        minutes=config.access_token_expire_minutes,
    )
    jwt_manager: Provider[JWTManager] = Singleton(
        JWTManager,
        secret_key=secrets.jwt,
        algorithm=config.jwt_algorithm,
        lifetime=token_lifetime,
    )
