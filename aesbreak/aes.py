"""AES-128 block cipher written out at the GF(2^8) level.

The state is the 16-byte block in column-major order: byte i sits in row
i % 4 of column i // 4, exactly as the bytes arrive on the wire.

    encrypt: AddRoundKey(k0), 9 x (SubBytes, ShiftRows, MixColumns, AddRoundKey),
             SubBytes, ShiftRows, AddRoundKey(k10)
    decrypt: the same steps reversed with each inverse transform, walking the
             key schedule backwards from round key 10.
"""
from typing import Callable

from .exceptions import BlockSizeError
from .gf256 import MUL2, MUL3, MUL9, MUL11, MUL13, MUL14
from .key_expansion import KEY_SIZE, ROUNDS, last_round_key, next_round_key, previous_round_key
from .sbox import INV_SBOX, SBOX

BLOCK = 16

# (block, key) -> block; encrypt_block and decrypt_block both have this shape
BlockTransform = Callable[[bytes, bytes], bytes]


# ------------------------ Round transforms ------------------------

def sub_bytes(state: bytes) -> bytes:
    return bytes(SBOX[b] for b in state)


def inv_sub_bytes(state: bytes) -> bytes:
    return bytes(INV_SBOX[b] for b in state)


def shift_rows(state: bytes) -> bytes:
    """Row r is rotated left by r positions."""
    return bytes(state[r + 4 * ((c + r) % 4)] for c in range(4) for r in range(4))


def inv_shift_rows(state: bytes) -> bytes:
    return bytes(state[r + 4 * ((c - r) % 4)] for c in range(4) for r in range(4))


def mix_columns(state: bytes) -> bytes:
    """Multiply every column by the circulant matrix [02 03 01 01]."""
    out = bytearray(BLOCK)
    for c in range(0, BLOCK, 4):
        a0, a1, a2, a3 = state[c:c + 4]
        out[c] = MUL2[a0] ^ MUL3[a1] ^ a2 ^ a3
        out[c + 1] = a0 ^ MUL2[a1] ^ MUL3[a2] ^ a3
        out[c + 2] = a0 ^ a1 ^ MUL2[a2] ^ MUL3[a3]
        out[c + 3] = MUL3[a0] ^ a1 ^ a2 ^ MUL2[a3]
    return bytes(out)


def inv_mix_columns(state: bytes) -> bytes:
    """Multiply every column by the inverse matrix [0e 0b 0d 09]."""
    out = bytearray(BLOCK)
    for c in range(0, BLOCK, 4):
        a0, a1, a2, a3 = state[c:c + 4]
        out[c] = MUL14[a0] ^ MUL11[a1] ^ MUL13[a2] ^ MUL9[a3]
        out[c + 1] = MUL9[a0] ^ MUL14[a1] ^ MUL11[a2] ^ MUL13[a3]
        out[c + 2] = MUL13[a0] ^ MUL9[a1] ^ MUL14[a2] ^ MUL11[a3]
        out[c + 3] = MUL11[a0] ^ MUL13[a1] ^ MUL9[a2] ^ MUL14[a3]
    return bytes(out)


def add_round_key(state: bytes, round_key: bytes) -> bytes:
    return bytes(a ^ b for a, b in zip(state, round_key))


# ------------------------ Block cipher ------------------------

def _check(block: bytes, key: bytes) -> None:
    if len(block) != BLOCK:
        raise BlockSizeError(f"AES block must be {BLOCK} bytes; got {len(block)}.")
    if len(key) != KEY_SIZE:
        raise BlockSizeError(f"AES-128 key must be {KEY_SIZE} bytes; got {len(key)}.")


def encrypt_block(plaintext: bytes, key: bytes) -> bytes:
    """Encrypt one 16-byte block under a 16-byte key."""
    _check(plaintext, key)
    round_key = bytes(key)
    state = add_round_key(plaintext, round_key)
    for round_no in range(1, ROUNDS):
        round_key = next_round_key(round_key, round_no)
        state = add_round_key(mix_columns(shift_rows(sub_bytes(state))), round_key)
    round_key = next_round_key(round_key, ROUNDS)
    return add_round_key(shift_rows(sub_bytes(state)), round_key)


def decrypt_block(ciphertext: bytes, key: bytes) -> bytes:
    """Decrypt one 16-byte block; round key 10 is derived first, then walked back."""
    _check(ciphertext, key)
    round_key = last_round_key(key)
    state = inv_sub_bytes(inv_shift_rows(add_round_key(ciphertext, round_key)))
    for round_no in range(ROUNDS, 1, -1):
        round_key = previous_round_key(round_key, round_no)
        state = inv_sub_bytes(inv_shift_rows(inv_mix_columns(add_round_key(state, round_key))))
    round_key = previous_round_key(round_key, 1)
    return add_round_key(state, round_key)


class AES:
    """One AES-128 key bound to the block functions."""

    def __init__(self, key: bytes):
        if len(key) != KEY_SIZE:
            raise BlockSizeError("Invalid key length. Only 128-bit AES keys are supported.")
        self._key = bytes(key)

    def encrypt(self, block: bytes) -> bytes:
        return encrypt_block(block, self._key)

    def decrypt(self, block: bytes) -> bytes:
        return decrypt_block(block, self._key)
