# ==============================================
# PERSISTENCE (Single-object flat files)
# ==============================================
#
# This package saves one in-memory object to a checksummed flat file
# and restores it on the next start.
#
# Modules:
# --------
# - serialize.py         → DataStream, compact sizes, checksum
# - read_result.py       → ReadResult outcomes and their policy
# - persisted_object.py  → PersistedObject capability base class
# - flat_store.py        → FlatStore write / read
# - procedures.py        → load_flat_db / dump_flat_db
#
# ==============================================

from .serialize import DataStream, SerializationError, checksum, CHECKSUM_SIZE, ENV_TAG_SIZE
from .read_result import ReadResult
from .persisted_object import PersistedObject, RawPayload
from .flat_store import FlatStore
from .procedures import load_flat_db, dump_flat_db

__all__ = [
    "DataStream",
    "SerializationError",
    "checksum",
    "CHECKSUM_SIZE",
    "ENV_TAG_SIZE",
    "ReadResult",
    "PersistedObject",
    "RawPayload",
    "FlatStore",
    "load_flat_db",
    "dump_flat_db",
]
