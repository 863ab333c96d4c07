import logging
import random
import secrets
import threading
from typing import Any, Iterable, Optional, Union

import numpy as np
import pyarrow as pa
import pyarrow.compute as pc

from arrow_bloom.algorithms.probing import probe_matrix, probe_positions, salt_key
from arrow_bloom.algorithms.sizing import SizingMode
from arrow_bloom.config import FilterConfig

logger = logging.getLogger(__name__)

SALT_BYTES = 16


class BloomFilter:
    """A space-efficient probabilistic data structure for membership testing.

    Bloom filters are used to test whether an element is a member of a set.
    They are probabilistic in nature, meaning there is a small chance of false positives
    (indicating an element is present when it's not), but no false negatives
    (indicating an element is not present when it is).

    The bit array is a NumPy byte array laid out as an Arrow validity bitmap
    (bit ``i`` lives in byte ``i // 8`` at position ``i % 8``), so it can be
    handed to PyArrow as a ``BooleanArray`` without copying.

    Mutation happens in place behind an internal lock: inserts are serialized,
    a query never sees half of an insert, and ``clear`` excludes everything else.

    Attributes:
        capacity (int): The expected maximum number of elements to be added to the filter.
        error_rate (float): The desired false positive rate (between 0 and 1).
        size (int): The size of the underlying bit array, calculated based on capacity and error rate.
        hash_count (int): The number of hash probes, calculated based on capacity and size.
        salt (bytes or None): Per-instance salt mixed into every hash.
        sizing (SizingMode): Formula used to derive size and hash_count.

    Example:
        >>> bf = BloomFilter(capacity=100000, error_rate=0.0001)
        >>> bf.insert("kek").member("kek")
        True
        >>> "pepe" in bf
        False  # Potentially, with a small probability of being True (false positive)
        >>> bf.clear().member("kek")
        False

    """
    def __init__(
        self,
        capacity: int,
        error_rate: float,
        salt: Union[bytes, int, None] = None,
        sizing: SizingMode = SizingMode.OPTIMAL,
    ):
        self.config = FilterConfig(capacity, error_rate, salt, sizing)
        self.size = self.config.size
        self.hash_count = self.config.hash_count
        self._key = salt_key(self.config.salt)
        self._bits = np.zeros((self.size + 7) // 8, dtype=np.uint8)
        self._lock = threading.Lock()
        logger.debug(
            f"Allocated bloom filter capacity={self.capacity} error_rate={self.error_rate} "
            f"size={self.size} hash_count={self.hash_count} salted={self.salt is not None}"
        )

    @classmethod
    def from_config(cls, config: FilterConfig) -> "BloomFilter":
        return cls(config.capacity, config.error_rate, config.salt, config.sizing)

    @classmethod
    def with_seed(
        cls,
        capacity: int,
        error_rate: float,
        seed: Optional[int] = None,
        sizing: SizingMode = SizingMode.OPTIMAL,
    ) -> "BloomFilter":
        """Build a filter with a random salt.

        Args:
        seed: Seeds the salt generator for reproducible filters. When omitted
            the salt comes from ``secrets`` and probe positions cannot be
            predicted across instances.
        """
        if seed is None:
            salt = secrets.token_bytes(SALT_BYTES)
        else:
            salt = random.Random(seed).randbytes(SALT_BYTES)
        return cls(capacity, error_rate, salt, sizing)

    @property
    def capacity(self) -> int:
        return self.config.capacity

    @property
    def error_rate(self) -> float:
        return self.config.error_rate

    @property
    def salt(self) -> Optional[bytes]:
        return self.config.salt

    @property
    def sizing(self) -> SizingMode:
        return self.config.sizing

    @property
    def nbytes(self) -> int:
        return self._bits.nbytes

    def _positions(self, item: Any):
        return probe_positions(item, self.size, self.hash_count, self._key)

    def insert(self, item: Any) -> "BloomFilter":
        """Insert item into filter"""
        positions = self._positions(item)
        with self._lock:
            for pos in positions:
                self._bits[pos >> 3] |= 1 << (pos & 7)
        return self

    add = insert

    def update(self, items: Iterable[Any]) -> "BloomFilter":
        """Insert a batch of items with a single vectorized scatter"""
        if isinstance(items, (pa.Array, pa.ChunkedArray)):
            items = items.to_pylist()
        positions = probe_matrix(items, self.size, self.hash_count, self._key).ravel()
        if len(positions) > self.capacity * self.hash_count:
            logger.warning(
                f"Batch of {len(positions) // self.hash_count} items exceeds capacity "
                f"{self.capacity}; false positive rate will exceed {self.error_rate}"
            )
        masks = np.left_shift(1, positions & 7).astype(np.uint8)
        with self._lock:
            np.bitwise_or.at(self._bits, positions >> 3, masks)
        return self

    def member(self, item: Any) -> bool:
        """Check item membership"""
        positions = self._positions(item)
        with self._lock:
            for pos in positions:
                if not self._bits[pos >> 3] & (1 << (pos & 7)):
                    return False
        return True

    def __contains__(self, item: Any) -> bool:
        return self.member(item)

    def contains_many(self, items: Iterable[Any]) -> pa.BooleanArray:
        """Check membership of a batch of items
        Returns:
        BooleanArray with one entry per item, in input order
        """
        if isinstance(items, (pa.Array, pa.ChunkedArray)):
            items = items.to_pylist()
        positions = probe_matrix(items, self.size, self.hash_count, self._key)
        masks = np.left_shift(1, positions & 7).astype(np.uint8)
        with self._lock:
            hits = np.all(self._bits[positions >> 3] & masks, axis=1)
        return pa.array(hits, type=pa.bool_())

    def clear(self) -> "BloomFilter":
        """Reset every bit, keeping capacity, error rate, size, probes and salt"""
        with self._lock:
            self._bits[:] = 0
        logger.debug(f"Cleared bloom filter size={self.size}")
        return self

    def copy(self) -> "BloomFilter":
        """Independent filter with the same parameters, salt and bits"""
        clone = BloomFilter.from_config(self.config)
        with self._lock:
            clone._bits[:] = self._bits
        return clone

    def to_arrow(self) -> pa.BooleanArray:
        """Zero-copy Arrow view of the bit array.

        The view shares memory with the filter, so later inserts and clears
        show through it. Use ``copy().to_arrow()`` for a snapshot.
        """
        return pa.Array.from_buffers(pa.bool_(), self.size, [None, pa.py_buffer(self._bits)])

    @property
    def bit_count(self) -> int:
        with self._lock:
            return pc.sum(self.to_arrow()).as_py()

    @property
    def fill_ratio(self) -> float:
        return self.bit_count / self.size

    def estimated_error_rate(self) -> float:
        """False positive probability implied by the current bit density"""
        return self.fill_ratio ** self.hash_count

    def __eq__(self, other):
        if not isinstance(other, BloomFilter):
            return NotImplemented
        return self.config == other.config and np.array_equal(self._bits, other._bits)

    __hash__ = None

    def __repr__(self):
        return (
            f"BloomFilter(capacity={self.capacity}, error_rate={self.error_rate}, "
            f"size={self.size}, hash_count={self.hash_count}, "
            f"salted={self.salt is not None}, sizing={self.sizing.value})"
        )
