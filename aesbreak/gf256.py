"""Finite field GF(2^8) routines using the AES polynomial (0x11B).

Each byte is a polynomial of degree <= 7 over GF(2); addition is XOR and
multiplication is carry-less with reduction by x^8 + x^4 + x^3 + x + 1.

The lookup tables below are built once at import time from the loop
implementations and never change afterwards. Every table entry is equal to
what the plain functions compute.
"""

# Low 8 bits of 0x11B: x^4 + x^3 + x + 1
AES_MODULUS = 0x1B


def xtime(a: int) -> int:
    """Multiply 'a' by x (i.e. by 2), reducing when an x^8 term appears."""
    a <<= 1
    if a & 0x100:
        a ^= 0x100 | AES_MODULUS
    return a


def gf_mul(a: int, b: int) -> int:
    """
    Multiply two bytes 'a' and 'b' in GF(2^8).

    For every set bit of 'b' (lowest first) the current 'a' is XORed into the
    product, then 'a' is doubled with xtime() so it always holds a * x^k.
    Returns an integer 0..255.
    """
    p = 0
    while b:
        if b & 1:
            p ^= a
        a = xtime(a)
        b >>= 1
    return p & 0xFF


def gf_pow(a: int, n: int) -> int:
    """Raise 'a' to the n-th power by repeated squaring."""
    result = 1
    while n > 0:
        if n & 1:
            result = gf_mul(result, a)
        a = gf_mul(a, a)
        n >>= 1
    return result


def gf_inv(a: int) -> int:
    """
    Multiplicative inverse of 'a' in GF(2^8).

    The multiplicative group has order 255, so a^254 == a^-1 for a != 0.
    gf_inv(0) evaluates to 0, which is the convention the S-box relies on.
    """
    return gf_pow(a, 254)


def _mul_table(y: int) -> tuple:
    return tuple(gf_mul(x, y) for x in range(256))


MUL2 = _mul_table(2)
MUL3 = _mul_table(3)
MUL9 = _mul_table(9)
MUL11 = _mul_table(11)
MUL13 = _mul_table(13)
MUL14 = _mul_table(14)
INV = tuple(gf_inv(x) for x in range(256))
