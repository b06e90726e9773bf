"""Block transform shared by encryption and decryption.

Letters A-Z are fed through the key matrix in blocks of n; any other
character is passed through at its original index. The letter stream is
right-padded with a filler letter so it divides into whole blocks, and the
padding is appended to the end of the output.
"""

from collections.abc import Iterable
from string import ascii_uppercase

from hillcipher.core.key_matrix import KeyMatrix
from hillcipher.core.linalg import multiply

__all__ = ["ALPHABET", "DEFAULT_FILLER", "encode", "from_residues", "pad", "to_residues"]

ALPHABET = ascii_uppercase
DEFAULT_FILLER = "X"

_RESIDUES = {letter: index for index, letter in enumerate(ALPHABET)}


def to_residues(letters: Iterable[str]) -> list[int]:
    return [_RESIDUES[letter] for letter in letters]


def from_residues(residues: Iterable[int]) -> str:
    return "".join(ALPHABET[residue] for residue in residues)


def pad(letters: str, block_size: int, filler: str = DEFAULT_FILLER) -> str:
    shortfall = -len(letters) % block_size
    return letters + filler * shortfall


def _check_filler(filler: str) -> str:
    filler = filler.upper()
    if len(filler) != 1 or filler not in _RESIDUES:
        raise ValueError(f"Filler must be a single letter A-Z, got {filler!r}")
    return filler


def encode(text: str, key_matrix: KeyMatrix, filler: str = DEFAULT_FILLER) -> str:
    """Apply ``key_matrix`` to every block of letters in ``text``.

    Pass the key matrix to encrypt and its modular inverse to decrypt.
    """
    filler = _check_filler(filler)
    normalized = text.upper()
    size = key_matrix.size

    letters = pad("".join(ch for ch in normalized if ch in _RESIDUES), size, filler)
    residues = to_residues(letters)

    transformed: list[int] = []
    for start in range(0, len(residues), size):
        transformed.extend(multiply(key_matrix, residues[start : start + size]))
    output_letters = iter(from_residues(transformed))

    result = [next(output_letters) if ch in _RESIDUES else ch for ch in normalized]
    # Whatever is left over is the padding
    result.extend(output_letters)
    return "".join(result)
