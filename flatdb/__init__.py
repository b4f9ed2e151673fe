# ==============================================
# flatdb
# ==============================================
#
# Package Structure:
#
# flatdb/
# ├── persistence/   # Checksummed single-object flat files
# ├── config.py      # Configuration management
# └── cli.py         # Command line entry point
#
# ==============================================

__version__ = "0.1.0"

from .persistence import (
    FlatStore,
    PersistedObject,
    RawPayload,
    ReadResult,
    dump_flat_db,
    load_flat_db,
)

__all__ = [
    "FlatStore",
    "PersistedObject",
    "RawPayload",
    "ReadResult",
    "dump_flat_db",
    "load_flat_db",
]
