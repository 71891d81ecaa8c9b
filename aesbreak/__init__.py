"""AES-128 from GF(2^8) up, ECB/CBC/CTR modes, and oracle attacks on their misuse."""
from .aes import AES, decrypt_block, encrypt_block
from .exceptions import AESBreakError, AttackError, BlockSizeError, OracleError, PaddingError
from .modes import AESModes, cbc_decrypt, cbc_encrypt, ctr, ctr_edit, ecb
from .padding import has_valid_padding, pkcs7_pad, pkcs7_unpad

__version__ = "0.1.0"

__all__ = [
    "AES",
    "AESModes",
    "AESBreakError",
    "AttackError",
    "BlockSizeError",
    "OracleError",
    "PaddingError",
    "cbc_decrypt",
    "cbc_encrypt",
    "ctr",
    "ctr_edit",
    "decrypt_block",
    "ecb",
    "encrypt_block",
    "has_valid_padding",
    "pkcs7_pad",
    "pkcs7_unpad",
]
