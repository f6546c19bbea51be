"""Signed access tokens.

A token names its bearer (``sub``) and the role they act as (``role``); edit
permissions are evaluated for that role. Logging people in is the job of the
identity provider in front of the API, ``carnet user create --token`` mints
tokens for provisioning.
"""

from __future__ import annotations

import datetime
import typing as t

import jwt
import pydantic as p

from carnet.core import di, LoggingProvider
from carnet.model import FrozenModel, Role, UserID


class TokenData(FrozenModel):
    """Claims of a verified token."""

    user_id: UserID = p.Field(alias="sub")
    # kept verbatim; an unknown role is refused by the edit policy, not here
    role: str
    expires_at: datetime.datetime = p.Field(alias="exp")
    issued_at: datetime.datetime = p.Field(alias="iat")


class JWTManager(object):
    """Issues and verifies HS256 access tokens."""

    def __init__(
        self,
        secret_key: p.Secret[str],
        algorithm: t.Literal["HS256"] = "HS256",
        lifetime: datetime.timedelta = datetime.timedelta(minutes=30),
    ) -> None:
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def create_access_token(
        self,
        user_id: UserID,
        role: Role | str,
        expires_delta: datetime.timedelta | None = None,
    ) -> str:
        """Sign a token letting ``user_id`` act as ``role``.

        The token expires after ``expires_delta``, by default the configured
        lifetime.
        """
        issued = datetime.datetime.now(datetime.UTC)
        claims = {
            "sub": str(user_id),
            "role": role.value if isinstance(role, Role) else role,
            "iat": issued,
            "exp": issued + (expires_delta or self.lifetime),
        }
        return jwt.encode(claims, self._secret_key.get_secret_value(), algorithm=self.algorithm)

    def decode_token(self, token: str) -> TokenData | None:
        """Verify ``token``; None when it is forged, expired or its claims are unusable."""
        logger = LoggingProvider.get_logger()
        try:
            claims = jwt.decode(
                token,
                self._secret_key.get_secret_value(),
                algorithms=[self.algorithm],
                options={"require": ["sub", "role", "exp", "iat"]},
            )
            return TokenData.model_validate(claims)
        except jwt.InvalidTokenError as e:
            logger.debug("rejected token", extra={"error": str(e)})
        except p.ValidationError as e:
            logger.debug("rejected token claims", extra={"errors": e.errors(include_url=False)})
        return None


def decode_token(token: str, manager: JWTManager = di.Provide["auth.jwt_manager"]) -> TokenData | None:
    return manager.decode_token(token)
