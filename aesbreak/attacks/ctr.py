"""CTR attacks: an edit oracle, and many messages under one key and nonce."""
import logging
from typing import List, Sequence

import numpy as np

from ..oracles import EditOracle
from ..scoring import candidate_scores

log = logging.getLogger(__name__)

BLOCK = 16


def edit_oracle_decrypt(ciphertext: bytes, edit: EditOracle, block_size: int = BLOCK) -> bytes:
    """
    Decrypt CTR ciphertext through an edit oracle.

    Writing an all-zero plaintext block at every index turns the buffer into
    the keystream itself; XOR with the original ciphertext gives the plaintext.
    """
    keystream = bytearray(ciphertext)
    blocks = -(-len(ciphertext) // block_size)
    zero_block = bytes(block_size)
    for index in range(blocks):
        edit(keystream, zero_block, index)
    log.info("keystream recovered through %d edits", blocks)
    return bytes(c ^ k for c, k in zip(ciphertext, keystream))


def fixed_nonce_keystream(ciphertexts: Sequence[bytes]) -> bytes:
    """
    Best-guess keystream shared by 'ciphertexts'.

    Position i collects byte i of every ciphertext long enough to have it
    and is solved as single-byte XOR, scored with the English heuristic;
    among equal scores the highest key byte is kept.
    Short columns are unreliable; no error is raised for them.
    """
    max_len = max((len(c) for c in ciphertexts), default=0)
    keystream = bytearray(max_len)
    for pos in range(max_len):
        column = bytes(c[pos] for c in ciphertexts if len(c) > pos)
        scores = candidate_scores(column)
        keystream[pos] = 255 - int(np.argmax(scores[::-1]))
    log.debug("keystream %s", keystream.hex())
    return bytes(keystream)


def break_fixed_nonce_ctr(ciphertexts: Sequence[bytes]) -> List[bytes]:
    """Decrypt every ciphertext with the recovered shared keystream (best effort)."""
    keystream = fixed_nonce_keystream(ciphertexts)
    return [bytes(c ^ k for c, k in zip(ct, keystream)) for ct in ciphertexts]
