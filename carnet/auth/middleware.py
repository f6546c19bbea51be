"""FastAPI dependencies resolving the caller of a request."""

import typing as t

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from carnet.core import di
from carnet.model import Role, User
from carnet.storage import user as user_storage

from . import jwt
from .jwt import TokenData

bearer = HTTPBearer(auto_error=False)


class AuthContext(t.NamedTuple):
    user: User
    # an unknown role claim is kept as given and fails closed in the policy
    role: Role | str
    token: TokenData

    @property
    def role_label(self) -> str:
        return self.role.value if isinstance(self.role, Role) else self.role


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status.HTTP_401_UNAUTHORIZED, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def _parse_role(claim: str) -> Role | str:
    try:
        return Role(claim)
    except ValueError:
        return claim


@di.inject
def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    token: str | None = Query(None, description="access token, when the client cannot send headers"),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> AuthContext:
    """Resolve the bearer token (header first, then ``?token=``) to a user.

    Any failure is a 401; which one is only logged.
    """
    raw = credentials.credentials if credentials is not None else token
    if not raw:
        raise _unauthorized("Not authenticated")

    claims = jwt.decode_token(raw)
    if claims is None:
        raise _unauthorized("Invalid or expired token")

    with session.begin():
        user = user_storage.get(user_id=claims.user_id, session=session)
    if user is None:
        raise _unauthorized("Unknown user")

    return AuthContext(user=user, role=_parse_role(claims.role), token=claims)


def require_role(*roles: Role) -> t.Callable[..., AuthContext]:
    """Build a dependency admitting only callers acting as one of ``roles``."""

    def dependency(auth: AuthContext = Depends(get_current_user)) -> AuthContext:
        if auth.role not in roles:
            raise HTTPException(
                status.HTTP_403_FORBIDDEN,
                detail=f"role {auth.role_label!r} may not use this resource",
            )
        return auth

    return dependency
