import re
from collections.abc import Iterable, Sequence
from math import isqrt

from pydantic import BaseModel, ConfigDict, field_validator

from hillcipher.core.errors import InvalidKeyDimension, MalformedKey

__all__ = ["MIN_KEY_SIZE", "MODULUS", "KeyMatrix"]

MODULUS = 26
MIN_KEY_SIZE = 2

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _reduce_token(token: str) -> int:
    """Reduce a decimal token modulo 26 straight from its digits.

    Tokens may be longer than Python will convert with ``int()``.
    """
    negative = token.startswith("-")
    value = 0
    for digit in token.lstrip("+-"):
        value = (value * 10 + ord(digit) - ord("0")) % MODULUS
    return -value % MODULUS if negative else value


class KeyMatrix(BaseModel):
    """Square key matrix with every entry reduced into ``[0, 26)``.

    Instances are immutable values: two matrices built from equivalent key
    specs compare and hash equal.
    """

    model_config = ConfigDict(frozen=True)

    rows: tuple[tuple[int, ...], ...]

    @field_validator("rows")
    @classmethod
    def reduce_and_check_square(cls, rows):
        size = len(rows)
        if size == 0 or any(len(row) != size for row in rows):
            raise ValueError("key matrix must be square and non-empty")
        return tuple(tuple(value % MODULUS for value in row) for row in rows)

    @classmethod
    def parse(cls, key_spec: str) -> "KeyMatrix":
        """Parse ``"a,b,c,d"`` into a row-major n x n matrix.

        Raises MalformedKey for blank specs or non-integer tokens and
        InvalidKeyDimension when the count is not n*n with n >= 2. Does not
        check invertibility.
        """
        if key_spec is None or not key_spec.strip():
            raise MalformedKey("Key must be a comma separated list of integers")

        values = []
        for token in key_spec.split(","):
            token = token.strip()
            if not _INTEGER.fullmatch(token):
                raise MalformedKey(f"Key contains a non-integer value: {token!r}")
            values.append(_reduce_token(token))

        size = isqrt(len(values))
        if size * size != len(values) or size < MIN_KEY_SIZE:
            raise InvalidKeyDimension(
                f"Key must contain a square number of integers (at least "
                f"{MIN_KEY_SIZE * MIN_KEY_SIZE}), got {len(values)}"
            )

        return cls.from_values(values, size)

    @classmethod
    def from_values(cls, values: Sequence[int], size: int) -> "KeyMatrix":
        rows = tuple(tuple(values[i * size : (i + 1) * size]) for i in range(size))
        return cls(rows=rows)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[int]]) -> "KeyMatrix":
        return cls(rows=tuple(tuple(row) for row in rows))

    @property
    def size(self) -> int:
        return len(self.rows)

    @property
    def spec(self) -> str:
        """Canonical key spec: the reduced entries, row-major, comma joined."""
        return ",".join(str(value) for row in self.rows for value in row)

    def __str__(self) -> str:
        return "\n".join(" ".join(f"{value:2d}" for value in row) for row in self.rows)
