"""PKCS#7 padding.

pkcs7_unpad is also the validity check behind the CBC padding oracle, so
all of its rejections look identical to the caller.
"""
from .exceptions import PaddingError

BLOCK = 16


def pkcs7_pad(data: bytes, block_size: int = BLOCK) -> bytes:
    """
    Append n bytes of value n, n = block_size - len(data) % block_size.
    Always adds between 1 and block_size bytes (a full block when data is aligned).
    """
    if block_size <= 0 or block_size > 255:
        raise ValueError("block_size must be in 1..255")
    pad_len = block_size - (len(data) % block_size)
    return bytes(data) + bytes([pad_len]) * pad_len


def pkcs7_unpad(data: bytes) -> bytes:
    """
    Remove PKCS#7 padding and return the remaining bytes.

    Raises PaddingError when the buffer is empty, the last byte is 0, the
    buffer is shorter than the claimed pad length, or any of the trailing
    bytes differs from it.
    """
    if not data:
        raise PaddingError()
    pad_len = data[-1]
    if pad_len == 0 or len(data) < pad_len:
        raise PaddingError()

    bad = 0
    for b in data[-pad_len:]:
        bad |= b ^ pad_len
    if bad:
        raise PaddingError()
    return bytes(data[:-pad_len])


def has_valid_padding(data: bytes) -> bool:
    try:
        pkcs7_unpad(data)
    except PaddingError:
        return False
    return True
