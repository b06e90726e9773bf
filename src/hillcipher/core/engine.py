from enum import StrEnum
from functools import lru_cache

from hillcipher.core import codec
from hillcipher.core.key_matrix import KeyMatrix
from hillcipher.core.linalg import invert
from hillcipher.shared.logger import Logger

__all__ = ["Direction", "HillCipherEngine", "decrypt", "encrypt", "prepare_key", "transform"]

logger = Logger(__name__).get_logger()


class Direction(StrEnum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


@lru_cache(maxsize=256)
def prepare_key(key_spec: str) -> tuple[KeyMatrix, KeyMatrix]:
    """Parse ``key_spec`` and return ``(key, inverse)``.

    The inverse is always computed so that a key which could never decrypt is
    rejected before anything is encrypted with it. Results are cached by the
    exact spec string; failures are not cached.
    """
    key_matrix = KeyMatrix.parse(key_spec)
    return key_matrix, invert(key_matrix)


class HillCipherEngine:
    """Stateless Hill cipher over A-Z.

    Safe to share between threads and requests.
    """

    def __init__(self, filler: str = codec.DEFAULT_FILLER):
        self.filler = filler

    def validate_key(self, key_spec: str) -> KeyMatrix:
        key_matrix, _ = prepare_key(key_spec)
        return key_matrix

    def transform(self, text: str, key_spec: str, direction: Direction | str) -> str:
        direction = Direction(direction)
        key_matrix, inverse = prepare_key(key_spec)

        if not text:
            return ""

        matrix = inverse if direction is Direction.DECRYPT else key_matrix
        logger.debug(
            "Applying %s with a %dx%d key to %d characters",
            direction,
            matrix.size,
            matrix.size,
            len(text),
        )
        return codec.encode(text, matrix, self.filler)

    def encrypt(self, text: str, key_spec: str) -> str:
        return self.transform(text, key_spec, Direction.ENCRYPT)

    def decrypt(self, text: str, key_spec: str) -> str:
        return self.transform(text, key_spec, Direction.DECRYPT)


default_engine = HillCipherEngine()


def transform(text: str, key_spec: str, direction: Direction | str) -> str:
    return default_engine.transform(text, key_spec, direction)


def encrypt(text: str, key_spec: str) -> str:
    return default_engine.encrypt(text, key_spec)


def decrypt(text: str, key_spec: str) -> str:
    return default_engine.decrypt(text, key_spec)
