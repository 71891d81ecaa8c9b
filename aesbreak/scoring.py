"""English-likeness scoring for byte strings.

text_score() sums a per-byte weight: whitespace and punctuation score
highest, letters follow their English frequency (lowercase doubled),
everything else scores 0. Only the ordering of scores is meaningful.

hamming_score() is the negated bit distance between two buffers, used to
guess repeating-XOR key lengths (higher = more alike).
"""
import string

import numpy as np

WHITESPACE_SCORE = 140
PUNCTUATION_SCORE = 50

# Relative letter weights (roughly percentage x 10)
LETTER_WEIGHTS = {
    'a': 82, 'b': 15, 'c': 28, 'd': 43, 'e': 127, 'f': 22, 'g': 20,
    'h': 61, 'i': 70, 'j': 2, 'k': 8, 'l': 40, 'm': 24, 'n': 67,
    'o': 75, 'p': 19, 'q': 1, 'r': 60, 's': 63, 't': 91, 'u': 28,
    'v': 10, 'w': 24, 'x': 2, 'y': 20, 'z': 7,
}

# ASCII whitespace: space, \t, \n, \x0c, \r (vertical tab is not counted)
_WHITESPACE = b" \t\n\x0c\r"


def _build_table() -> np.ndarray:
    table = np.zeros(256, dtype=np.int64)
    for b in _WHITESPACE:
        table[b] = WHITESPACE_SCORE
    for ch in string.punctuation:
        table[ord(ch)] = PUNCTUATION_SCORE
    for letter, weight in LETTER_WEIGHTS.items():
        table[ord(letter)] = 2 * weight
        table[ord(letter.upper())] = weight
    table.flags.writeable = False
    return table


CHAR_SCORES = _build_table()

# bit count of every byte value
_POPCOUNT = np.array([bin(i).count("1") for i in range(256)], dtype=np.int64)


def _as_array(data: bytes) -> np.ndarray:
    return np.frombuffer(bytes(data), dtype=np.uint8)


def char_score(byte: int) -> int:
    return int(CHAR_SCORES[byte])


def text_score(data: bytes) -> int:
    """Sum of char_score over every byte of 'data'."""
    return int(CHAR_SCORES[_as_array(data)].sum())


def candidate_scores(column: bytes) -> np.ndarray:
    """
    Score 'column' XORed with every possible key byte.

    Returns an array of 256 scores where entry k is text_score(column ^ k).
    """
    keys = np.arange(256, dtype=np.uint8)[:, None]
    return CHAR_SCORES[np.bitwise_xor(keys, _as_array(column)[None, :])].sum(axis=1)


def hamming_distance(a: bytes, b: bytes) -> int:
    """Number of differing bits between two equal-length buffers."""
    if len(a) != len(b):
        raise ValueError("hamming distance needs buffers of equal length")
    return int(_POPCOUNT[np.bitwise_xor(_as_array(a), _as_array(b))].sum())


def hamming_score(a: bytes, b: bytes) -> int:
    return -hamming_distance(a, b)
