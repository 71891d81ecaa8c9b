"""XOR helpers and frequency-analysis breaking of XOR ciphers.

single-byte XOR: try all 256 key bytes and keep the most English-looking
                 plaintext (scoring.text_score).
repeating XOR:   guess the key length from the Hamming distance between
                 adjacent chunks, split the ciphertext into one column per
                 key byte, and solve every column as single-byte XOR.
"""
import logging
from typing import Iterable, List, Tuple

import numpy as np

from .scoring import candidate_scores, hamming_distance, text_score

log = logging.getLogger(__name__)

MAX_KEYSIZE = 40
# a shorter key length wins when its plaintext scores at least this share of the best
KEYSIZE_TOLERANCE = 0.9


def xor_bytes(data: bytes, key: bytes) -> bytes:
    """XOR 'data' with 'key', repeating the key as needed. The result has len(data)."""
    if not key:
        raise ValueError("xor key must not be empty")
    k = len(key)
    return bytes(b ^ key[i % k] for i, b in enumerate(data))


# ================================================================
# 1. SINGLE-BYTE XOR
# ================================================================

def single_byte_candidates(data: bytes, n: int = 1) -> List[Tuple[int, int]]:
    """Top 'n' (score, key_byte) pairs for 'data', best first."""
    scores = candidate_scores(data)
    order = np.argsort(-scores, kind="stable")[:n]
    return [(int(scores[k]), int(k)) for k in order]


def break_single_byte_xor(data: bytes) -> Tuple[int, bytes]:
    """Return (key_byte, plaintext) with the best English score."""
    _, key = single_byte_candidates(data, 1)[0]
    return key, xor_bytes(data, bytes([key]))


def best_single_byte_xor(lines: Iterable[bytes]) -> Tuple[int, int, bytes]:
    """
    Find the line that was single-byte-XOR encrypted among 'lines'.
    Returns (score, key_byte, plaintext) for the best-scoring line.
    """
    best = None
    for line in lines:
        score, key = single_byte_candidates(line, 1)[0]
        if best is None or score > best[0]:
            best = (score, key, xor_bytes(line, bytes([key])))
    if best is None:
        raise ValueError("no lines to score")
    return best


# ================================================================
# 2. REPEATING-KEY XOR
# ================================================================

def keysize_candidates(data: bytes, n: int = 3, max_keysize: int = MAX_KEYSIZE) -> List[Tuple[float, int]]:
    """
    Rank key lengths 2..min(max_keysize, len(data) // 2).

    Each length is scored by the negated Hamming distance between adjacent
    chunks, averaged over every pair of full chunks and normalised per byte.
    Returns the top 'n' (score, keysize) pairs, best first.
    """
    scored = []
    for keysize in range(2, min(max_keysize, len(data) // 2) + 1):
        chunks = [data[i:i + keysize] for i in range(0, len(data) - keysize + 1, keysize)]
        pairs = list(zip(chunks, chunks[1:]))
        distance = sum(hamming_distance(a, b) for a, b in pairs) / len(pairs) / keysize
        scored.append((-distance, keysize))
    scored.sort(key=lambda item: item[0], reverse=True)
    return scored[:n]


def transpose(data: bytes, keysize: int) -> List[bytes]:
    """Split 'data' into 'keysize' columns; column i holds every byte XORed with key[i]."""
    return [data[i::keysize] for i in range(keysize)]


def _minimal_period(key: bytes) -> bytes:
    for size in range(1, len(key)):
        if len(key) % size == 0 and key[:size] * (len(key) // size) == key:
            return key[:size]
    return key


def _with_divisors(keysizes: Iterable[int]) -> List[int]:
    sizes = set()
    for keysize in keysizes:
        sizes.update(d for d in range(2, keysize + 1) if keysize % d == 0)
    return sorted(sizes)


def break_repeating_xor(data: bytes, n: int = 5) -> Tuple[bytes, bytes]:
    """
    Recover (key, plaintext) of a repeating-key XOR ciphertext.

    The n most likely key lengths and all their divisors are solved column
    by column. A multiple of the real length always scores a little higher,
    because its shorter columns let single bytes fit noise, so the shortest
    length whose plaintext scores within KEYSIZE_TOLERANCE of the best wins.
    """
    solved = []
    for keysize in _with_divisors(size for _, size in keysize_candidates(data, n)):
        key = bytes(break_single_byte_xor(column)[0] for column in transpose(data, keysize))
        plaintext = xor_bytes(data, key)
        score = text_score(plaintext)
        log.debug("keysize %d -> key %r score %d", keysize, key, score)
        solved.append((score, key, plaintext))
    if not solved:
        raise ValueError("ciphertext too short to guess a key length")

    best = max(score for score, _, _ in solved)
    _, key, plaintext = next(item for item in solved if item[0] >= KEYSIZE_TOLERANCE * best)
    return _minimal_period(key), plaintext
