"""Exact modular linear algebra over Z/26.

Everything here is integer arithmetic. Floating point determinants lose the
sign of cofactors for n >= 3, which silently breaks decryption.
"""

from collections.abc import Sequence
from typing import TypeAlias

from hillcipher.core.errors import NonInvertibleKey
from hillcipher.core.key_matrix import MODULUS, KeyMatrix

__all__ = [
    "adjugate",
    "determinant",
    "integer_determinant",
    "invert",
    "mod_inverse",
    "multiply",
]

Rows: TypeAlias = Sequence[Sequence[int]]


def integer_determinant(rows: Rows) -> int:
    """Bareiss fraction-free elimination. Every division is exact."""
    a = [list(row) for row in rows]
    n = len(a)
    if n == 0:
        return 1

    sign = 1
    previous_pivot = 1
    for k in range(n - 1):
        if a[k][k] == 0:
            for i in range(k + 1, n):
                if a[i][k] != 0:
                    a[k], a[i] = a[i], a[k]
                    sign = -sign
                    break
            else:
                return 0

        for i in range(k + 1, n):
            for j in range(k + 1, n):
                a[i][j] = (a[i][j] * a[k][k] - a[i][k] * a[k][j]) // previous_pivot
        previous_pivot = a[k][k]

    return sign * a[n - 1][n - 1]


def determinant(matrix: KeyMatrix) -> int:
    return integer_determinant(matrix.rows) % MODULUS


def mod_inverse(a: int, m: int = MODULUS) -> int:
    """Return b with ``a * b == 1 (mod m)`` using the extended Euclidean algorithm.

    Raises NonInvertibleKey when ``gcd(a, m) != 1``; for m = 26 that is any
    even value or any multiple of 13.
    """
    old_r, r = a % m, m
    old_s, s = 1, 0
    while r:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s

    if old_r != 1:
        raise NonInvertibleKey(
            f"Key determinant {a % m} has no inverse modulo {m} "
            f"(shares factor {old_r} with {m})"
        )
    return old_s % m


def _minor(rows: Rows, row: int, col: int) -> list[list[int]]:
    return [
        [value for j, value in enumerate(r) if j != col]
        for i, r in enumerate(rows)
        if i != row
    ]


def adjugate(matrix: KeyMatrix) -> list[list[int]]:
    """Transpose of the cofactor matrix, reduced modulo 26."""
    rows = matrix.rows
    n = matrix.size
    adj = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            cofactor = (-1) ** (i + j) * integer_determinant(_minor(rows, i, j))
            adj[j][i] = cofactor % MODULUS
    return adj


def invert(matrix: KeyMatrix) -> KeyMatrix:
    det_inverse = mod_inverse(determinant(matrix))
    return KeyMatrix.from_rows(
        [value * det_inverse for value in row] for row in adjugate(matrix)
    )


def multiply(matrix: KeyMatrix, vector: Sequence[int]) -> list[int]:
    """Matrix . column vector, reduced modulo 26."""
    if len(vector) != matrix.size:
        raise ValueError(
            f"Vector of length {len(vector)} does not fit a {matrix.size}x{matrix.size} key"
        )
    return [
        sum(k * v for k, v in zip(row, vector, strict=True)) % MODULUS
        for row in matrix.rows
    ]
