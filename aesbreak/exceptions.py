"""Error types raised by aesbreak.

Every failure in the cipher, the modes and the attacks is a subclass of
AESBreakError, so callers can retry or report without catching bare
exceptions. None of them is fatal.
"""


class AESBreakError(Exception):
    """Base class for every aesbreak failure."""


class BlockSizeError(AESBreakError, ValueError):
    """Input is not a whole number of blocks, or a block/key/IV has the wrong size."""


class PaddingError(AESBreakError, ValueError):
    """PKCS#7 padding is invalid.

    Raised with a single message whatever the cause, so the exception
    carries exactly one bit: padding valid or not.
    """

    def __init__(self, message: str = "invalid PKCS#7 padding"):
        super().__init__(message)


class AttackError(AESBreakError, RuntimeError):
    """An attack could not reach a consistent answer (block size, mode, prefix)."""


class OracleError(AttackError):
    """A byte search ran through all 256 candidates without an oracle hit."""
