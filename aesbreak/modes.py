"""ECB, CBC and CTR built over a pluggable block transform.

The functions take the block transform as an argument (encrypt_block or
decrypt_block, or any other (block, key) -> block function), so the same
code runs both directions:

    ecb(ct, key, decrypt_block)        undoes ecb(pt, key, encrypt_block)
    cbc_decrypt(ct, key, iv)           undoes cbc_encrypt(pt, key, iv)
    ctr(ctr(data, key, nonce), key, nonce) == data

ECB and CBC refuse input that is not a whole number of blocks; they never
pad on their own. AESModes wraps them with PKCS#7 and IV/nonce handling.
"""
import logging
from typing import List, Optional

from Crypto.Random import get_random_bytes

from .aes import BLOCK, BlockTransform, decrypt_block, encrypt_block
from .exceptions import BlockSizeError
from .key_expansion import KEY_SIZE
from .padding import pkcs7_pad, pkcs7_unpad
from .xor import xor_bytes

log = logging.getLogger(__name__)

NONCE_SIZE = 8


def split_blocks(data: bytes, size: int = BLOCK) -> List[bytes]:
    if len(data) % size != 0:
        raise BlockSizeError(f"data length {len(data)} is not a multiple of {size} bytes")
    return [bytes(data[i:i + size]) for i in range(0, len(data), size)]


############################################################################
# ECB MODE
############################################################################

def ecb(data: bytes, key: bytes, transform: BlockTransform = encrypt_block) -> bytes:
    """Apply 'transform' to every block independently."""
    return b''.join(transform(block, key) for block in split_blocks(data))


############################################################################
# CBC MODE
############################################################################

def _check_iv(iv: bytes) -> None:
    if len(iv) != BLOCK:
        raise BlockSizeError(f"CBC iv must be {BLOCK} bytes; got {len(iv)}.")


def cbc_encrypt(data: bytes, key: bytes, iv: bytes, transform: BlockTransform = encrypt_block) -> bytes:
    """C_i = E(P_i XOR C_{i-1}), with C_{-1} = iv."""
    _check_iv(iv)
    prev = bytes(iv)
    out_blocks = []
    for block in split_blocks(data):
        prev = transform(xor_bytes(block, prev), key)
        out_blocks.append(prev)
    return b''.join(out_blocks)


def cbc_decrypt(data: bytes, key: bytes, iv: bytes, transform: BlockTransform = decrypt_block) -> bytes:
    """P_i = D(C_i) XOR C_{i-1}, with C_{-1} = iv."""
    _check_iv(iv)
    prev = bytes(iv)
    plain_blocks = []
    for block in split_blocks(data):
        plain_blocks.append(xor_bytes(transform(block, key), prev))
        prev = block
    return b''.join(plain_blocks)


############################################################################
# CTR MODE
############################################################################

def counter_block(nonce: int, index: int, byteorder: str = "little") -> bytes:
    """
    Counter input for block 'index': the 64-bit nonce (little-endian) in
    bytes 0..7, the 64-bit block index in bytes 8..15.
    """
    if not 0 <= nonce < 1 << 64:
        raise BlockSizeError("CTR nonce must fit in 64 bits")
    if not 0 <= index < 1 << 64:
        raise BlockSizeError("CTR block index must fit in 64 bits")
    return nonce.to_bytes(8, "little") + index.to_bytes(8, byteorder)


def ctr_keystream(key: bytes, nonce: int, length: int,
                  transform: BlockTransform = encrypt_block, byteorder: str = "little") -> bytes:
    """First 'length' keystream bytes for (key, nonce)."""
    blocks = -(-length // BLOCK)
    stream = b''.join(transform(counter_block(nonce, i, byteorder), key) for i in range(blocks))
    return stream[:length]


def ctr(data: bytes, key: bytes, nonce: int,
        transform: BlockTransform = encrypt_block, byteorder: str = "little") -> bytes:
    """Encrypt or decrypt 'data' (any length) by XOR with the CTR keystream."""
    if not data:
        return b''
    return xor_bytes(data, ctr_keystream(key, nonce, len(data), transform, byteorder))


def ctr_edit(buffer: bytearray, new_block: bytes, block_index: int, key: bytes, nonce: int,
             transform: BlockTransform = encrypt_block, byteorder: str = "little") -> None:
    """
    Re-encrypt block 'block_index' of 'buffer' in place so that it decrypts
    to 'new_block'. Bytes that would land past the end of 'buffer' are dropped.
    """
    if len(new_block) != BLOCK:
        raise BlockSizeError(f"replacement block must be {BLOCK} bytes; got {len(new_block)}.")
    keystream = transform(counter_block(nonce, block_index, byteorder), key)
    start = block_index * BLOCK
    for i in range(BLOCK):
        if start + i >= len(buffer):
            break
        buffer[start + i] = keystream[i] ^ new_block[i]


############################################################################
# CONVENIENCE OBJECT
############################################################################

class AESModes:
    """
    One AES-128 key plus the usual framing:
      - ECB / CBC with PKCS#7 padding
      - CBC output is IV || C, with a fresh random IV unless one is given
      - CTR output is nonce (8 bytes, little-endian) || C
    """

    def __init__(self, key: bytes):
        if len(key) != KEY_SIZE:
            raise BlockSizeError("Invalid key length. Only 128-bit AES keys are supported.")
        self.key = bytes(key)

    # --- ECB ---
    def ecb_encrypt(self, plaintext: bytes) -> bytes:
        return ecb(pkcs7_pad(plaintext), self.key, encrypt_block)

    def ecb_decrypt(self, ciphertext: bytes) -> bytes:
        return pkcs7_unpad(ecb(ciphertext, self.key, decrypt_block))

    # --- CBC ---
    def cbc_encrypt(self, plaintext: bytes, iv: Optional[bytes] = None) -> bytes:
        if iv is None:
            iv = get_random_bytes(BLOCK)
        return bytes(iv) + cbc_encrypt(pkcs7_pad(plaintext), self.key, iv)

    def cbc_decrypt(self, ciphertext: bytes) -> bytes:
        """Expects IV (16 bytes) || C (>= 1 block)."""
        if len(ciphertext) < 2 * BLOCK:
            raise BlockSizeError("Ciphertext must be IV(16) + N*16 bytes for CBC.")
        iv, body = ciphertext[:BLOCK], ciphertext[BLOCK:]
        return pkcs7_unpad(cbc_decrypt(body, self.key, iv))

    # --- CTR ---
    def ctr_encrypt(self, plaintext: bytes, nonce: Optional[int] = None) -> bytes:
        if nonce is None:
            nonce = int.from_bytes(get_random_bytes(NONCE_SIZE), "little")
        log.debug("CTR nonce %#018x", nonce)
        return nonce.to_bytes(NONCE_SIZE, "little") + ctr(plaintext, self.key, nonce)

    def ctr_decrypt(self, ciphertext: bytes) -> bytes:
        """Expects nonce (8 bytes) || C."""
        if len(ciphertext) < NONCE_SIZE:
            raise BlockSizeError("Ciphertext is too short for CTR mode (missing nonce).")
        nonce = int.from_bytes(ciphertext[:NONCE_SIZE], "little")
        return ctr(ciphertext[NONCE_SIZE:], self.key, nonce)
