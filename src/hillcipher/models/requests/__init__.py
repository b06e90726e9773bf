from .serde_base import SerdeBase
from .texts import CipherKeyRequest, MessageResponse, TextContentRequest, TextResponse
from .users import LoginResponse, RegisterResponse, UserCredentials

__all__ = [
    "CipherKeyRequest",
    "LoginResponse",
    "MessageResponse",
    "RegisterResponse",
    "SerdeBase",
    "TextContentRequest",
    "TextResponse",
    "UserCredentials",
]
