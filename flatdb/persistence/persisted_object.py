# ==============================================
# PersistedObject
# ==============================================
#
# PURPOSE:
#   The capability set a FlatStore needs from the object it saves.
#   Subclasses own their field encoding and their pruning rules;
#   the store only handles the envelope around them.
#
# CLASS: PersistedObject (abstract)
# ---------------------------------
#   Attributes:
#   -----------
#   - lock: threading.RLock  → held by FlatStore.write() while serializing
#
#   Methods:
#   --------
#   - serialize() -> bytes              (abstract)
#   - deserialize(data: bytes) -> None  (abstract, raise on bad data)
#   - clear() -> None                   (abstract, reset to empty state)
#   - check_and_remove() -> None        prune stale entries after a load
#   - to_string() -> str                one-line diagnostic summary
#   - empty_copy() -> PersistedObject   fresh empty instance of the same type
#
# CLASS: RawPayload
# -----------------
#   Keeps the payload as opaque bytes. Lets tooling verify any store
#   file without knowing what type wrote it.
#
# ==============================================

import threading
from abc import ABC, abstractmethod


class PersistedObject(ABC):
    """
    Base class for objects saved by a FlatStore.

    Subclasses must call ``super().__init__()`` so the lock exists.
    """

    def __init__(self):
        self.lock = threading.RLock()

    @abstractmethod
    def serialize(self) -> bytes:
        """Encode the object's fields."""
        raise NotImplementedError

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Replace the object's fields with the ones decoded from ``data``.

        Args:
            data: Everything after the store header, up to the checksum

        Raises:
            Any exception if ``data`` does not decode; the store clears
            the object and reports INCORRECT_FORMAT.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Reset to the empty state used on a first run."""
        raise NotImplementedError

    def check_and_remove(self) -> None:
        """Drop stale or expired entries. Runs after a non-dry-run load."""

    def to_string(self) -> str:
        return str(self)

    def empty_copy(self) -> "PersistedObject":
        """
        Return a new, empty instance of the same type.

        The default requires a no-argument constructor; override otherwise.
        """
        return type(self)()


class RawPayload(PersistedObject):
    """Opaque payload holder used to verify files of any store type."""

    def __init__(self, payload: bytes = b""):
        super().__init__()
        self.payload = payload

    def serialize(self) -> bytes:
        return self.payload

    def deserialize(self, data: bytes) -> None:
        self.payload = bytes(data)

    def clear(self) -> None:
        self.payload = b""

    def to_string(self) -> str:
        return f"RawPayload: {len(self.payload)} bytes"
