from pydantic import EmailStr

from .base import WithTimestamps
from .enum import Role
from .id import UserID


class User(WithTimestamps):
    user_id: UserID
    email: EmailStr
    name: str
    role: Role
