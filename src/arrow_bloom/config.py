"""Construction parameters for a membership filter."""

from dataclasses import dataclass
from typing import Optional, Union

from arrow_bloom.algorithms.sizing import (
    SizingMode,
    bit_array_size,
    probe_count,
    validate_capacity,
    validate_error_rate,
)


def normalize_salt(salt: Union[bytes, bytearray, memoryview, int, None]) -> Optional[bytes]:
    """Canonical bytes for a salt. An empty salt means no salt.

    Integers are encoded by value as signed little-endian bytes.
    """
    if salt is None:
        return None
    if isinstance(salt, (bytes, bytearray, memoryview)):
        salt = bytes(salt)
    elif isinstance(salt, int) and not isinstance(salt, bool):
        salt = salt.to_bytes((salt.bit_length() + 8) // 8, "little", signed=True)
    else:
        raise TypeError(f"salt must be bytes-like or an int, got {type(salt).__name__}")
    return salt or None


@dataclass(frozen=True)
class FilterConfig:
    """Validated, immutable parameters of a :class:`BloomFilter`.

    Attributes:
        capacity: Expected number of distinct elements (n)
        error_rate: Target false positive rate (p), strictly between 0 and 1
        salt: Optional per-instance salt mixed into every hash, bytes or int
        sizing: Formula used to derive ``size`` and ``hash_count``

    Raises:
        InvalidCapacityError: capacity is not a positive integer
        InvalidErrorRateError: error_rate is not strictly between 0 and 1
        TypeError: salt is neither bytes-like nor an int
    """

    capacity: int
    error_rate: float
    salt: Optional[bytes] = None
    sizing: SizingMode = SizingMode.OPTIMAL

    def __post_init__(self):
        object.__setattr__(self, "capacity", validate_capacity(self.capacity))
        object.__setattr__(self, "error_rate", validate_error_rate(self.error_rate))
        object.__setattr__(self, "salt", normalize_salt(self.salt))
        object.__setattr__(self, "sizing", SizingMode(self.sizing))

    @property
    def size(self) -> int:
        return bit_array_size(self.capacity, self.error_rate, self.sizing)

    @property
    def hash_count(self) -> int:
        return probe_count(self.capacity, self.size, self.sizing)
