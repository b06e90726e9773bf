from pydantic import Field

from .serde_base import SerdeBase


class TextContentRequest(SerdeBase):
    content: str


class CipherKeyRequest(SerdeBase):
    key: str = Field(..., description="Comma separated integers, e.g. '5,8,3,7'")


class TextResponse(SerdeBase):
    id: int
    content: str
    encrypted: bool


class MessageResponse(SerdeBase):
    message: str
