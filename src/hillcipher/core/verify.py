import os
import secrets
from datetime import datetime, timedelta

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from fastapi import HTTPException

from hillcipher.core.key_matrix import KeyMatrix
from hillcipher.models.schema import utcnow
from hillcipher.shared.config import load_config
from hillcipher.shared.logger import Logger

__all__ = ["hash_password", "issue_token", "key_digest", "password_verify"]

logger = Logger(__name__).get_logger()

config = load_config()

SALT_SIZE = 16
HASH_LENGTH = 32


def _scrypt(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=HASH_LENGTH, n=config.auth.scrypt_n, r=8, p=1)


def hash_password(password: str) -> tuple[bytes, bytes]:
    """Return ``(digest, salt)`` for a new password."""
    salt = os.urandom(SALT_SIZE)
    return _scrypt(salt).derive(password.encode("utf-8")), salt


def password_verify(password: str, digest: bytes, salt: bytes):
    """
    Verifies a password against its stored scrypt digest.
    Raises HTTPException(401) if it does not match.
    """
    logger.debug("Starting password verification.")

    try:
        _scrypt(salt).verify(password.encode("utf-8"), digest)
    except InvalidKey as e:
        logger.warning("Password verification failed.")
        raise HTTPException(status_code=401, detail="Invalid username or password") from e

    logger.info("Password verification successful.")


def issue_token(ttl_seconds: int = config.auth.token_ttl) -> tuple[str, datetime]:
    return secrets.token_urlsafe(32), utcnow() + timedelta(seconds=ttl_seconds)


def key_digest(key_matrix: KeyMatrix) -> str:
    """SHA-256 of the canonical key spec.

    Equivalent specs ("5,8,3,7", " 5, 8, 3, 31") share a digest.
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(key_matrix.spec.encode("ascii"))
    return digest.finalize().hex()
