"""Oracle-driven attacks on ECB, CBC and CTR misuse."""
from .cbc import decrypt_block, padding_oracle_decrypt, recover_iv_from_decrypt
from .ctr import break_fixed_nonce_ctr, edit_oracle_decrypt, fixed_nonce_keystream
from .ecb import decrypt_ecb_suffix, detect_block_size, detect_ecb, detect_prefix_length

__all__ = [
    "decrypt_block",
    "padding_oracle_decrypt",
    "recover_iv_from_decrypt",
    "break_fixed_nonce_ctr",
    "edit_oracle_decrypt",
    "fixed_nonce_keystream",
    "decrypt_ecb_suffix",
    "detect_block_size",
    "detect_ecb",
    "detect_prefix_length",
]
