# ==============================================
# ReadResult
# ==============================================
#
# PURPOSE:
#   Closed set of outcomes for FlatStore.read(). The load and dump
#   procedures decide whether to continue or abort from this value alone.
#
# POLICY:
# -------
#   OK                       → proceed with the loaded object
#   FILE_ERROR               → recoverable (first run, nothing on disk)
#   INCORRECT_FORMAT         → recoverable (object was reset to empty)
#   INCORRECT_HASH           → fatal
#   INCORRECT_MAGIC_MESSAGE  → fatal
#   INCORRECT_MAGIC_NUMBER   → fatal
#   HASH_READ_ERROR          → fatal
#
# ==============================================

from enum import Enum


class ReadResult(Enum):
    """
    Outcome of reading a flat store file.

    - OK: header, payload and checksum all valid
    - FILE_ERROR: the file could not be opened (usually absent)
    - HASH_READ_ERROR: the trailing checksum could not be read
    - INCORRECT_HASH: checksum does not match the data
    - INCORRECT_MAGIC_MESSAGE: store tag belongs to another store type
    - INCORRECT_MAGIC_NUMBER: environment tag belongs to another network
    - INCORRECT_FORMAT: tags are fine but the payload did not decode
    """
    OK = "ok"
    FILE_ERROR = "file_error"
    HASH_READ_ERROR = "hash_read_error"
    INCORRECT_HASH = "incorrect_hash"
    INCORRECT_MAGIC_MESSAGE = "incorrect_magic_message"
    INCORRECT_MAGIC_NUMBER = "incorrect_magic_number"
    INCORRECT_FORMAT = "incorrect_format"

    @property
    def is_recoverable(self) -> bool:
        """True if the caller may continue (possibly with an empty object)."""
        return self in (ReadResult.OK, ReadResult.FILE_ERROR, ReadResult.INCORRECT_FORMAT)

    @property
    def is_fatal(self) -> bool:
        return not self.is_recoverable
