__all__ = [
    "HillCipherError",
    "InvalidKeyDimension",
    "MalformedKey",
    "NonInvertibleKey",
]


class HillCipherError(ValueError):
    """Base class for every failure caused by a bad key or input.

    These are properties of the input, so retrying with the same arguments
    always fails the same way.
    """


class MalformedKey(HillCipherError):
    """The key spec is empty or holds a token that is not an integer."""


class InvalidKeyDimension(HillCipherError):
    """The number of integers in the key spec is not a square of n >= 2."""


class NonInvertibleKey(HillCipherError):
    """The key determinant shares a factor with the alphabet size."""
