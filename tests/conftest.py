# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - cache_cls      → IntListCache, a small PersistedObject used everywhere
# - cache          → IntListCache holding [1, 2, 3], pruning values > 2
# - env_tag        → AA BB CC DD
# - store          → FlatStore("cache.dat", "CACHE1", env_tag) in tmp_path
#
# ==============================================

from typing import Iterable, Optional

import pytest

from flatdb.persistence import DataStream, FlatStore, PersistedObject, SerializationError


class IntListCache(PersistedObject):
    """
    List of ints encoded as compact-size count + int32 LE values.

    check_and_remove() drops every value above ``prune_above``.
    """

    def __init__(self, values: Optional[Iterable[int]] = None, prune_above: Optional[int] = None):
        super().__init__()
        self.values = list(values or [])
        self.prune_above = prune_above
        self.prune_calls = 0

    def serialize(self) -> bytes:
        stream = DataStream()
        stream.write_compact_size(len(self.values))
        for value in self.values:
            stream.write_int32(value)
        return stream.getvalue()

    def deserialize(self, data: bytes) -> None:
        stream = DataStream(data)
        values = [stream.read_int32() for _ in range(stream.read_compact_size())]
        if not stream.eof():
            raise SerializationError("Trailing bytes after values")
        self.values = values

    def clear(self) -> None:
        self.values = []

    def check_and_remove(self) -> None:
        self.prune_calls += 1
        if self.prune_above is not None:
            self.values = [v for v in self.values if v <= self.prune_above]

    def to_string(self) -> str:
        return f"IntListCache: {len(self.values)} values"

    def empty_copy(self) -> "IntListCache":
        return IntListCache(prune_above=self.prune_above)


@pytest.fixture
def cache_cls():
    return IntListCache


@pytest.fixture
def cache():
    return IntListCache([1, 2, 3], prune_above=2)


@pytest.fixture
def env_tag() -> bytes:
    return bytes([0xAA, 0xBB, 0xCC, 0xDD])


@pytest.fixture
def store(tmp_path, env_tag) -> FlatStore:
    return FlatStore("cache.dat", "CACHE1", env_tag, data_dir=tmp_path)
