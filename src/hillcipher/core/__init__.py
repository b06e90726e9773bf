from .engine import Direction, HillCipherEngine, decrypt, encrypt, transform
from .errors import HillCipherError, InvalidKeyDimension, MalformedKey, NonInvertibleKey
from .key_matrix import KeyMatrix

__all__ = [
    "Direction",
    "HillCipherEngine",
    "HillCipherError",
    "InvalidKeyDimension",
    "KeyMatrix",
    "MalformedKey",
    "NonInvertibleKey",
    "decrypt",
    "encrypt",
    "transform",
]
