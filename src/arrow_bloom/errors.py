"""Exceptions raised by arrow-bloom.

Only construction can fail. Once a filter exists, ``insert``, ``member``
and ``clear`` are total.
"""


class BloomFilterError(ValueError):
    """Base class for invalid filter parameters."""


class InvalidCapacityError(BloomFilterError):
    """Raised when the capacity hint is not a positive integer."""

    def __init__(self, capacity):
        self.capacity = capacity
        super().__init__(f"capacity must be a positive integer, got {capacity!r}")


class InvalidErrorRateError(BloomFilterError):
    """Raised when the target error rate is not strictly between 0 and 1."""

    def __init__(self, error_rate):
        self.error_rate = error_rate
        super().__init__(
            f"error_rate must be strictly between 0 and 1, got {error_rate!r}"
        )
