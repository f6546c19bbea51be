from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseSettings


class ServeSettings(BaseSettings):
    host: p.IPvAnyAddress
    port: t.Annotated[int, ant.Gt(0), ant.Le(65535)]

    @property
    def origin(self) -> str:
        return f"http://{self.host}:{self.port}"


class AuthSettings(BaseSettings):
    """How access tokens are signed, and for how long they stay valid.

    The signing key itself is a secret, see ``AuthSecrets``.
    """

    jwt_algorithm: t.Literal["HS256"] = "HS256"
    access_token_expire_minutes: t.Annotated[int, ant.Gt(0)] = 30


class CarnetWebSettings(BaseSettings):
    backend: ServeSettings
    # the dev server of the web portal, allowed through CORS outside production
    frontend: ServeSettings | None = None
    auth: AuthSettings = AuthSettings()


class WebSettings(BaseSettings):
    carnet: CarnetWebSettings
