# ==============================================
# FlatStore
# ==============================================
#
# PURPOSE:
#   Save one PersistedObject to a flat file and load it back, refusing
#   files that are corrupted, belong to another store type, or were
#   written for another environment.
#
# FILE LAYOUT:
# ------------
#   [store_tag: compact-size length + UTF-8 bytes]
#   [env_tag:   4 bytes]
#   [payload:   obj.serialize()]
#   [checksum:  32 bytes, double SHA-256 of everything above]
#
# CLASS: FlatStore
# ----------------
#   Stateless apart from its configuration, which is fixed at construction.
#
#   Constructor:
#   ------------
#   - __init__(filename, store_tag, env_tag, data_dir=".", atomic=False)
#   - from_config(filename, store_tag, config=None)  (classmethod)
#       Resolve data_dir / env_tag / atomic from AppConfig.
#
#   Methods:
#   --------
#   - write(obj) -> bool
#       Holds obj.lock for the whole call. Overwrites the file in place
#       (or via temp file + rename when atomic=True). Never raises for
#       serialize or I/O problems; logs them and returns False.
#
#   - read(obj, dry_run=False) -> ReadResult
#       Validates checksum, then store tag, then env tag, then decodes the
#       payload into obj. Does NOT lock obj; keep it private until loaded.
#       obj.check_and_remove() runs only when dry_run is False.
#
# NOTES:
# ------
#   - A file shorter than the checksum is read as an empty payload followed
#     by a short checksum read, which reports HASH_READ_ERROR.
#   - Atomic writes chmod the temp file to 0666 minus the umask, the same
#     mode a plain "wb" open would give a new file.
#   - The default write is not crash-atomic. A torn file fails the checksum
#     on the next read and is reported as fatal.
#
# ==============================================

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Optional, Union

from flatdb.persistence.persisted_object import PersistedObject
from flatdb.persistence.read_result import ReadResult
from flatdb.persistence.serialize import (
    CHECKSUM_SIZE,
    ENV_TAG_SIZE,
    DataStream,
    SerializationError,
    checksum,
    parse_env_tag,
)

logger = logging.getLogger(__name__)

# Read once at import; os.umask() can only be queried by setting it.
_UMASK = os.umask(0)
os.umask(_UMASK)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class FlatStore:
    """
    Checksummed single-object file store.

    Create one instance per logical store type at process start.
    """

    def __init__(
        self,
        filename: str,
        store_tag: str,
        env_tag: Union[bytes, str],
        data_dir: Union[str, Path] = ".",
        atomic: bool = False,
    ):
        """
        Args:
            filename: File name inside data_dir (e.g. "mncache.dat")
            store_tag: Identifies the type of object stored in the file
            env_tag: 4 bytes (or 8 hex digits) identifying the environment
            data_dir: Base directory supplied by the path resolver
            atomic: Write through a temp file + rename instead of in place

        Raises:
            ValueError: If filename or store_tag is empty, or env_tag is not 4 bytes
        """
        if not filename:
            raise ValueError("FlatStore needs a file name")
        if not store_tag:
            raise ValueError("FlatStore needs a non-empty store tag")

        self._filename = filename
        self._path = Path(data_dir) / filename
        self._store_tag = store_tag
        self._env_tag = parse_env_tag(env_tag)
        self._atomic = atomic

    @classmethod
    def from_config(cls, filename: str, store_tag: str, config=None) -> "FlatStore":
        """
        Build a store from the application configuration.

        Args:
            filename: File name inside the configured data directory
            store_tag: Identifies the type of object stored in the file
            config: Optional AppConfig. If None, loads from environment.
        """
        from flatdb.config import get_config

        config = config or get_config()
        return cls(
            filename,
            store_tag,
            config.store.env_tag,
            data_dir=config.store.resolve_data_dir(),
            atomic=config.store.atomic_writes,
        )

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def path(self) -> Path:
        return self._path

    @property
    def store_tag(self) -> str:
        return self._store_tag

    @property
    def env_tag(self) -> bytes:
        return self._env_tag

    @property
    def atomic(self) -> bool:
        return self._atomic

    def __repr__(self) -> str:
        return (
            f"FlatStore(path={str(self._path)!r}, store_tag={self._store_tag!r}, "
            f"env_tag={self._env_tag.hex()!r})"
        )

    # ------------------------------------------
    # Write
    # ------------------------------------------

    def write(self, obj: PersistedObject) -> bool:
        """
        Serialize obj behind the store header and checksum, then write it out.

        Returns:
            True on success, False if serialization or the file write failed
        """
        with obj.lock:
            start = time.monotonic()

            stream = DataStream()
            try:
                stream.write_string(self._store_tag)
                stream.write_bytes(self._env_tag)
                stream.write_bytes(obj.serialize())
            except Exception as e:
                logger.error("FlatStore.write: Serialize error for %s - %s", self._path, e)
                return False
            stream.write_bytes(checksum(stream.getvalue()))

            if self._atomic:
                written = self._write_atomic(stream.getvalue())
            else:
                written = self._write_in_place(stream.getvalue())
            if not written:
                return False

            logger.info("Written info to %s  %dms", self._filename, _elapsed_ms(start))
            logger.info("     %s", obj.to_string())
            return True

    def _write_in_place(self, data: bytes) -> bool:
        try:
            f = open(self._path, "wb")
        except OSError as e:
            logger.error("FlatStore.write: Failed to open file %s - %s", self._path, e)
            return False

        try:
            with f:
                f.write(data)
        except OSError as e:
            logger.error("FlatStore.write: Serialize or I/O error - %s", e)
            return False
        return True

    def _write_atomic(self, data: bytes) -> bool:
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(self._path.parent), prefix=self._filename + ".")
        except OSError as e:
            logger.error("FlatStore.write: Failed to open temp file in %s - %s", self._path.parent, e)
            return False

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                os.fchmod(f.fileno(), 0o666 & ~_UMASK)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error("FlatStore.write: Serialize or I/O error - %s", e)
            return False
        finally:
            try:
                os.remove(tmp_path)
            except FileNotFoundError:
                pass
        return True

    # ------------------------------------------
    # Read
    # ------------------------------------------

    def read(self, obj: PersistedObject, dry_run: bool = False) -> ReadResult:
        """
        Load the file into obj.

        Args:
            obj: Target object, mutated in place
            dry_run: Validate only; skip obj.check_and_remove()

        Returns:
            ReadResult describing what happened; never raises for
            file or format problems
        """
        start = time.monotonic()

        try:
            f = open(self._path, "rb")
        except OSError as e:
            logger.error("FlatStore.read: Failed to open file %s - %s", self._path, e)
            return ReadResult.FILE_ERROR

        with f:
            try:
                file_size = os.fstat(f.fileno()).st_size
                data_size = max(file_size - CHECKSUM_SIZE, 0)
                data = f.read(data_size)
                hash_in = f.read(CHECKSUM_SIZE)
            except OSError as e:
                logger.error("FlatStore.read: Deserialize or I/O error - %s", e)
                return ReadResult.HASH_READ_ERROR

        if len(data) != data_size or len(hash_in) != CHECKSUM_SIZE:
            logger.error(
                "FlatStore.read: Deserialize or I/O error - %s is truncated (%d bytes)",
                self._path, file_size,
            )
            return ReadResult.HASH_READ_ERROR

        if checksum(data) != hash_in:
            logger.error("FlatStore.read: Checksum mismatch, data corrupted")
            return ReadResult.INCORRECT_HASH

        stream = DataStream(data)
        try:
            # Raw bytes: a tag that is not valid UTF-8 is still a foreign tag.
            store_tag = stream.read_bytes(stream.read_compact_size())
            if store_tag != self._store_tag.encode("utf-8"):
                logger.error("FlatStore.read: Invalid magic message %r", store_tag)
                return ReadResult.INCORRECT_MAGIC_MESSAGE

            env_tag = stream.read_bytes(ENV_TAG_SIZE)
            if env_tag != self._env_tag:
                logger.error("FlatStore.read: Invalid network magic number %s", env_tag.hex())
                return ReadResult.INCORRECT_MAGIC_NUMBER
        except SerializationError as e:
            obj.clear()
            logger.error("FlatStore.read: Deserialize or I/O error - %s", e)
            return ReadResult.INCORRECT_FORMAT

        # The payload decoder belongs to obj; any failure there is format drift.
        try:
            obj.deserialize(stream.remaining())
        except Exception as e:
            obj.clear()
            logger.error("FlatStore.read: Deserialize or I/O error - %s", e)
            return ReadResult.INCORRECT_FORMAT

        logger.info("Loaded info from %s  %dms", self._filename, _elapsed_ms(start))
        logger.info("     %s", obj.to_string())
        if not dry_run:
            logger.info("FlatStore - cleaning....")
            obj.check_and_remove()
            logger.info("FlatStore - %s", obj.to_string())

        return ReadResult.OK
