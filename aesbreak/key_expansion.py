"""AES-128 key schedule.

A round key is 16 bytes laid out as four 4-byte words. Stepping is done by
pure functions, so a schedule can be walked forward to round 10 and then
back again from any derived round key without keeping the original key.
"""
from typing import List

from .exceptions import BlockSizeError
from .gf256 import gf_pow
from .sbox import SBOX

KEY_SIZE = 16
ROUNDS = 10

# Round constants x^(n-1) for rounds 1..10: 01 02 04 08 10 20 40 80 1b 36
RCON = tuple(gf_pow(2, n) for n in range(ROUNDS))


def _check_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise BlockSizeError(f"AES-128 key must be {KEY_SIZE} bytes; got {len(key)}.")


def _check_round(round_no: int) -> None:
    if not 1 <= round_no <= ROUNDS:
        raise ValueError(f"round must be in 1..{ROUNDS}; got {round_no}")


def next_round_key(key: bytes, round_no: int) -> bytes:
    """
    Derive round key 'round_no' (1..10) from round key 'round_no - 1'.

    RotWord + SubWord of the last word and the round constant go into the
    first word, then each following byte is chained with the byte one word
    before it.
    """
    _check_key(key)
    _check_round(round_no)
    k = bytearray(key)
    for i in range(4):
        k[i] ^= SBOX[k[12 + (i + 1) % 4]]
    k[0] ^= RCON[round_no - 1]
    for i in range(4, 16):
        k[i] ^= k[i - 4]
    return bytes(k)


def previous_round_key(key: bytes, round_no: int) -> bytes:
    """Inverse of next_round_key: recover round key 'round_no - 1' from round key 'round_no'."""
    _check_key(key)
    _check_round(round_no)
    k = bytearray(key)
    # undo the chaining back to front so each k[i - 4] is still the derived value
    for i in range(15, 3, -1):
        k[i] ^= k[i - 4]
    for i in range(4):
        k[i] ^= SBOX[k[12 + (i + 1) % 4]]
    k[0] ^= RCON[round_no - 1]
    return bytes(k)


def last_round_key(key: bytes) -> bytes:
    """Run the schedule to completion and return round key 10."""
    for round_no in range(1, ROUNDS + 1):
        key = next_round_key(key, round_no)
    return key


def round_keys(key: bytes) -> List[bytes]:
    """All 11 round keys (the cipher key followed by rounds 1..10)."""
    _check_key(key)
    keys = [bytes(key)]
    for round_no in range(1, ROUNDS + 1):
        keys.append(next_round_key(keys[-1], round_no))
    return keys
