from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from hillcipher.core.engine import Direction, HillCipherEngine
from hillcipher.core.repository import TextRepository
from hillcipher.core.verify import key_digest
from hillcipher.models.requests import (
    CipherKeyRequest,
    MessageResponse,
    TextContentRequest,
    TextResponse,
)
from hillcipher.shared import Logger, load_config
from hillcipher.shared.http import server_error_handler, text_repository

logger = Logger(__name__).get_logger()

router = APIRouter(prefix="/api/hillcipher", tags=["texts"])

config = load_config()

cipher = HillCipherEngine(filler=config.cipher.filler)

Repository = Annotated[TextRepository, Depends(text_repository)]


@router.post("/texts", response_model=TextResponse)
async def add_text(data: TextContentRequest, repository: Repository):
    record = repository.create(data.content)
    return TextResponse.model_validate(record)


@router.get("/texts", response_model=list[TextResponse])
async def list_texts(repository: Repository):
    return [TextResponse.model_validate(record) for record in repository.list()]


@router.get("/texts/{text_id}", response_model=TextResponse)
async def get_text(text_id: int, repository: Repository):
    return TextResponse.model_validate(repository.get(text_id))


@router.patch("/texts/{text_id}", response_model=TextResponse)
async def update_text(text_id: int, data: TextContentRequest, repository: Repository):
    """Replace the stored content. The record becomes plaintext again."""
    return TextResponse.model_validate(repository.update(text_id, data.content))


@router.delete("/texts/{text_id}", response_model=MessageResponse)
async def delete_text(text_id: int, repository: Repository):
    repository.delete(text_id)
    return MessageResponse(message=f"Text {text_id} deleted")


@router.post("/texts/{text_id}/encrypt", response_model=TextResponse)
async def encrypt_text(text_id: int, data: CipherKeyRequest, repository: Repository):
    """
    validate the key (parse + invertibility) before touching the record
    encrypt the stored plaintext
    persist ciphertext together with a digest of the key
    """
    record = repository.get(text_id)
    if record.encrypted:
        raise HTTPException(status_code=409, detail=f"Text {text_id} is already encrypted")

    with server_error_handler():
        key_matrix = cipher.validate_key(data.key)
        ciphertext = cipher.transform(record.content, data.key, Direction.ENCRYPT)

    logger.debug("Encrypted text %s with a %dx%d key", text_id, key_matrix.size, key_matrix.size)
    record = repository.transition(
        text_id,
        ciphertext,
        key_digest=key_digest(key_matrix),
        expected_content=record.content,
        expected_digest=None,
    )
    return TextResponse.model_validate(record)


@router.post("/texts/{text_id}/decrypt", response_model=TextResponse)
async def decrypt_text(text_id: int, data: CipherKeyRequest, repository: Repository):
    """
    only encrypted records can be decrypted
    the key must match the one used to encrypt (compared by digest)
    the decrypted content keeps any padding added during encryption
    """
    record = repository.get(text_id)
    if not record.encrypted:
        raise HTTPException(status_code=409, detail=f"Text {text_id} is not encrypted")

    with server_error_handler():
        key_matrix = cipher.validate_key(data.key)
        if key_digest(key_matrix) != record.key_digest:
            logger.warning("Decrypt of text %s attempted with a different key", text_id)
            raise HTTPException(
                status_code=400,
                detail="Key does not match the key used to encrypt this text",
            )
        plaintext = cipher.transform(record.content, data.key, Direction.DECRYPT)

    record = repository.transition(
        text_id,
        plaintext,
        key_digest=None,
        expected_content=record.content,
        expected_digest=record.key_digest,
    )
    return TextResponse.model_validate(record)
