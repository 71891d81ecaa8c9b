"""Byte-at-a-time recovery of a secret suffix behind an ECB encryption oracle.

The oracle computes ECB(pad(prefix || attacker_bytes || secret)) for a fixed
unknown key, prefix and secret. Steps:

  1. block size    feed 0, 1, 2, ... bytes until the output length jumps
  2. ECB check     three identical blocks must give two identical output blocks
  3. prefix length find the block an attacker byte lands in, then how many
                   filler bytes it takes for that block to stop changing
  4. secret        align each unknown byte as the last byte of a probe block
                   and try the 256 candidates against the reference output
"""
import logging
from typing import Tuple

from ..exceptions import AttackError, OracleError
from ..oracles import EncryptionOracle

log = logging.getLogger(__name__)

MAX_BLOCK_SIZE = 64


def detect_ecb(data: bytes, block_size: int = 16) -> bool:
    """True when any block of 'data' occurs twice."""
    seen = set()
    for i in range(0, len(data), block_size):
        block = bytes(data[i:i + block_size])
        if block in seen:
            return True
        seen.add(block)
    return False


def detect_block_size(oracle: EncryptionOracle) -> Tuple[int, int]:
    """
    Returns (block_size, payload_len) where payload_len is the number of
    bytes the oracle adds around the attacker input (prefix + secret).
    """
    base = len(oracle(b''))
    for n in range(1, MAX_BLOCK_SIZE + 1):
        grown = len(oracle(bytes(n)))
        if grown != base:
            block_size = grown - base
            log.info("block size %d, payload length %d", block_size, base - n)
            return block_size, base - n
    raise AttackError(f"output length did not change within {MAX_BLOCK_SIZE} input bytes")


def _block(data: bytes, index: int, block_size: int) -> bytes:
    return data[index * block_size:(index + 1) * block_size]


def detect_prefix_block(oracle: EncryptionOracle, block_size: int) -> int:
    """Index of the first output block that changes when one attacker byte is toggled."""
    c0 = oracle(b'\x00')
    c1 = oracle(b'\x01')
    for index in range(len(c0) // block_size):
        if _block(c0, index, block_size) != _block(c1, index, block_size):
            return index
    raise AttackError("attacker input does not influence the output")


def _fill_to_stable(oracle: EncryptionOracle, block_size: int, index: int, filler: int) -> int:
    # smallest n where block 'index' is the same for n - 1 and n filler bytes
    prev = _block(oracle(b''), index, block_size)
    for n in range(1, block_size + 2):
        cur = _block(oracle(bytes([filler]) * n), index, block_size)
        if cur == prev:
            return n
        prev = cur
    raise AttackError(f"block {index} never stabilised")


def detect_prefix_length(oracle: EncryptionOracle, block_size: int) -> int:
    """
    Exact length of the unknown prefix.

    Once the filler reaches the end of the prefix block, one more filler byte
    no longer changes it. Two different filler values are tried because a
    secret starting with the filler byte makes the block settle early; the
    larger fill count is the real one.
    """
    index = detect_prefix_block(oracle, block_size)
    n = max(_fill_to_stable(oracle, block_size, index, filler) for filler in (0x00, 0xFF))
    prefix_len = (index + 1) * block_size - n + 1
    log.info("prefix length %d (block %d)", prefix_len, index)
    return prefix_len


def decrypt_ecb_suffix(oracle: EncryptionOracle) -> bytes:
    """Recover the secret that the oracle appends after the attacker input."""
    block_size, payload_len = detect_block_size(oracle)
    if not detect_ecb(oracle(bytes(3 * block_size)), block_size):
        raise AttackError("oracle output is not ECB")

    prefix_len = detect_prefix_length(oracle, block_size)
    secret_len = payload_len - prefix_len
    if secret_len < 0:
        raise AttackError("prefix longer than the whole payload")

    # filler that completes the prefix block; everything before prefix_end is ignored
    filler = bytes(block_size - prefix_len % block_size)
    prefix_end = (prefix_len // block_size + 1) * block_size

    def skip_prefix(data: bytes) -> bytes:
        return oracle(data)[prefix_end:]

    # reference[f]: output with f extra filler bytes, so secret[pos] ends a block when f == bs-1-pos%bs
    reference = [skip_prefix(filler + bytes(f)) for f in range(block_size)]

    recovered = bytearray()
    for pos in range(secret_len):
        start = pos // block_size * block_size
        target = reference[block_size - 1 - pos % block_size][start:start + block_size]
        # the block_size - 1 bytes in front of secret[pos]
        window = (bytes(block_size - 1) + recovered)[-(block_size - 1):]
        for candidate in range(256):
            probe = filler + window + bytes([candidate])
            if skip_prefix(probe)[:block_size] == target:
                recovered.append(candidate)
                log.debug("secret[%d] = %#04x", pos, candidate)
                break
        else:
            raise OracleError(f"no candidate matched secret byte {pos}")

    return bytes(recovered)
