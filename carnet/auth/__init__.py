"""Bearer token authentication for the API.

Tokens carry the user id and the role the policy evaluates edits against.
"""

__all__ = [
    "AuthContext",
    "JWTManager",
    "TokenData",
    "get_current_user",
    "require_role",
]

from .jwt import JWTManager, TokenData
from .middleware import AuthContext, get_current_user, require_role
