"""Oracle shapes and key-owning victims.

An attack only ever receives a callable with one of the shapes below. The
victim classes keep the secret key to themselves and hand out bound methods
(e.g. ``victim.padding_oracle``) that the attacks can query.
"""
from typing import Callable, Optional, Tuple

from Crypto.Random import get_random_bytes
from Crypto.Random import random as crypto_random

from .aes import BLOCK, encrypt_block
from .exceptions import PaddingError
from .modes import cbc_decrypt, cbc_encrypt, ctr, ctr_edit, ecb
from .padding import pkcs7_pad, pkcs7_unpad

# attacker_bytes -> ciphertext
EncryptionOracle = Callable[[bytes], bytes]
# (ciphertext_block, iv) -> padding valid?
PaddingOracle = Callable[[bytes, bytes], bool]
# (buffer, new_block, block_index) -> None, buffer edited in place
EditOracle = Callable[[bytearray, bytes, int], None]
# ciphertext -> raw plaintext
DecryptionOracle = Callable[[bytes], bytes]

MAX_RANDOM_PREFIX = 17


def random_key() -> bytes:
    return get_random_bytes(16)


def random_nonce() -> int:
    return int.from_bytes(get_random_bytes(8), "little")


# -----------------------------------------------------------------------------
# ECB: prefix || attacker || secret
# -----------------------------------------------------------------------------
class EcbSuffixVictim:
    """
    Encrypts ``prefix || attacker_bytes || secret`` under ECB with PKCS#7.
    With no prefix given, a random one of 0..17 bytes is drawn once.
    """

    def __init__(self, secret: bytes, prefix: Optional[bytes] = None, key: Optional[bytes] = None):
        if prefix is None:
            prefix = get_random_bytes(crypto_random.randint(0, MAX_RANDOM_PREFIX))
        self._secret = bytes(secret)
        self._prefix = bytes(prefix)
        self._key = key if key is not None else random_key()

    def encrypt(self, attacker_bytes: bytes) -> bytes:
        plaintext = pkcs7_pad(self._prefix + bytes(attacker_bytes) + self._secret)
        return ecb(plaintext, self._key, encrypt_block)


# -----------------------------------------------------------------------------
# CBC: padding oracle
# -----------------------------------------------------------------------------
class CbcPaddingVictim:
    """
    Keeps a secret AES key. Exposes:
      - encrypt(plaintext) -> (IV, C)        CBC with PKCS#7
      - padding_oracle(block, iv) -> bool    True iff D_K(block) XOR iv is validly padded
    """

    def __init__(self, key: Optional[bytes] = None):
        self._key = key if key is not None else random_key()

    def encrypt(self, plaintext: bytes, iv: Optional[bytes] = None) -> Tuple[bytes, bytes]:
        if iv is None:
            iv = get_random_bytes(BLOCK)
        return bytes(iv), cbc_encrypt(pkcs7_pad(plaintext), self._key, iv)

    def padding_oracle(self, block: bytes, iv: bytes) -> bool:
        try:
            pkcs7_unpad(cbc_decrypt(block, self._key, iv))
        except PaddingError:
            return False
        return True


class CbcKeyAsIvVictim:
    """CBC service that (wrongly) reuses its key as the IV."""

    def __init__(self, key: Optional[bytes] = None):
        self._key = key if key is not None else random_key()

    def encrypt(self, plaintext: bytes) -> bytes:
        return cbc_encrypt(pkcs7_pad(plaintext), self._key, self._key)

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Raw CBC decryption, padding left in place."""
        return cbc_decrypt(ciphertext, self._key, self._key)

    def check_key(self, key: bytes) -> bool:
        return key == self._key


# -----------------------------------------------------------------------------
# CTR: edit oracle and fixed nonce
# -----------------------------------------------------------------------------
class CtrEditVictim:
    """CTR under a hidden key and nonce with a 'replace one block' service."""

    def __init__(self, key: Optional[bytes] = None, nonce: Optional[int] = None):
        self._key = key if key is not None else random_key()
        self._nonce = nonce if nonce is not None else random_nonce()

    def encrypt(self, plaintext: bytes) -> bytes:
        return ctr(plaintext, self._key, self._nonce)

    def decrypt(self, ciphertext: bytes) -> bytes:
        return ctr(ciphertext, self._key, self._nonce)

    def edit(self, buffer: bytearray, new_block: bytes, block_index: int) -> None:
        ctr_edit(buffer, new_block, block_index, self._key, self._nonce)


class FixedNonceCtrVictim:
    """Encrypts every message with the same key and nonce."""

    def __init__(self, key: Optional[bytes] = None, nonce: int = 0):
        self._key = key if key is not None else random_key()
        self._nonce = nonce

    def encrypt(self, plaintext: bytes) -> bytes:
        return ctr(plaintext, self._key, self._nonce)

