"""CBC attacks driven by oracles.

padding_oracle_decrypt
    Full decryption with an oracle that only says whether D_K(block) XOR iv
    is validly padded. Only the IV sent with each block is forged.

recover_iv_from_decrypt
    Recovers the IV (and so the key, when the key doubles as IV) from a plain
    decryption oracle.
"""
import logging

from ..exceptions import BlockSizeError, OracleError
from ..modes import split_blocks
from ..oracles import DecryptionOracle, PaddingOracle
from ..padding import pkcs7_unpad
from ..xor import xor_bytes

log = logging.getLogger(__name__)


def find_valid_iv(block: bytes, iv: bytearray, pos: int, oracle: PaddingOracle) -> bool:
    """
    Increment iv[pos] (in place) until the oracle accepts (block, iv).
    Returns False once iv[pos] has run through 255 without a hit.
    """
    while not oracle(block, bytes(iv)):
        if iv[pos] == 255:
            return False
        iv[pos] += 1
    return True


def valid_pad_bytes(block: bytes, valid_iv: bytes, oracle: PaddingOracle) -> int:
    """
    Length of the valid padding that 'valid_iv' produces for 'block'.

    Bytes are flipped cumulatively from the front; the first flip the oracle
    rejects marks the first padding byte.
    """
    size = len(valid_iv)
    iv = bytearray(valid_iv)
    for pos in range(size):
        iv[pos] ^= 1
        if not oracle(block, bytes(iv)):
            return size - pos
    return 0


def decrypt_block(block: bytes, oracle: PaddingOracle) -> bytes:
    """
    Recover D_K(block), the block decryption before the CBC XOR.

    Works from the last byte backwards. For byte 'pos' the IV bytes after it
    are set so those plaintext bytes equal the pad value size - pos, then
    iv[pos] is searched. At the last byte a hit can come from a longer
    accidental padding (e.g. ..02 02), so the actual pad length is measured
    with valid_pad_bytes instead of being assumed.
    """
    size = len(block)
    decrypted = bytearray(size)
    for pos in range(size - 1, -1, -1):
        pad = size - pos
        iv = bytearray(size)
        for i in range(pos + 1, size):
            iv[i] = decrypted[i] ^ pad
        if not find_valid_iv(block, iv, pos, oracle):
            raise OracleError(f"padding oracle never accepted byte {pos}")
        found = valid_pad_bytes(block, bytes(iv), oracle)
        if found == 0:
            raise OracleError(f"padding oracle accepted every flip at byte {pos}")
        decrypted[pos] = iv[pos] ^ found
    return bytes(decrypted)


def padding_oracle_decrypt(ciphertext: bytes, iv: bytes, oracle: PaddingOracle, *,
                           unpad: bool = True) -> bytes:
    """
    Decrypt 'ciphertext' without the key.

    Each block's intermediate is XORed with the real previous ciphertext
    block (or 'iv'). With unpad=True the PKCS#7 padding is stripped.
    """
    size = len(iv)
    if size == 0:
        raise BlockSizeError("iv must not be empty")
    blocks = split_blocks(ciphertext, size)
    prev = bytes(iv)
    out = bytearray()
    for k, block in enumerate(blocks, start=1):
        log.info("recovering block %d/%d", k, len(blocks))
        plain = xor_bytes(decrypt_block(block, oracle), prev)
        log.debug("block %d: %r", k, plain)
        out += plain
        prev = block
    return pkcs7_unpad(bytes(out)) if unpad else bytes(out)


def recover_iv_from_decrypt(decrypt: DecryptionOracle, block_size: int = 16) -> bytes:
    """
    Decrypting two zero blocks gives P0 = D(0) XOR IV and P1 = D(0) XOR 0,
    so IV = P0 XOR P1.
    """
    plain = decrypt(bytes(2 * block_size))
    if len(plain) < 2 * block_size:
        raise BlockSizeError("decryption oracle returned less than two blocks")
    return xor_bytes(plain[:block_size], plain[block_size:2 * block_size])
