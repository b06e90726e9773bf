from datetime import datetime

from pydantic import Field

from .serde_base import SerdeBase


class UserCredentials(SerdeBase):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class RegisterResponse(SerdeBase):
    id: int
    username: str


class LoginResponse(SerdeBase):
    token: str
    expires_at: datetime
