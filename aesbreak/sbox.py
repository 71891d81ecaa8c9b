"""AES S-box built from the GF(2^8) inverse and the affine transform.

The forward box is affine(inverse(a)); the inverse box is
inverse(inverse_affine(s)). The two use different compositions, they are
not a single table read in two directions.
"""
from .gf256 import INV


def _rotl8(b: int, n: int) -> int:
    return ((b << n) | (b >> (8 - n))) & 0xFF


def sbox(a: int) -> int:
    b = INV[a]
    return b ^ _rotl8(b, 1) ^ _rotl8(b, 2) ^ _rotl8(b, 3) ^ _rotl8(b, 4) ^ 0x63


def inv_sbox(s: int) -> int:
    return INV[_rotl8(s, 1) ^ _rotl8(s, 3) ^ _rotl8(s, 6) ^ 0x05]


SBOX = tuple(sbox(x) for x in range(256))
INV_SBOX = tuple(inv_sbox(x) for x in range(256))
