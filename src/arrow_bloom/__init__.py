"""arrow-bloom: a Bloom filter backed by NumPy/PyArrow bitmaps."""

__version__ = "0.1.0"

from arrow_bloom.algorithms.sizing import SizingMode, bit_array_size, probe_count
from arrow_bloom.config import FilterConfig
from arrow_bloom.data_structures.bloom_filter import BloomFilter
from arrow_bloom.errors import (
    BloomFilterError,
    InvalidCapacityError,
    InvalidErrorRateError,
)

__all__ = [
    "BloomFilter",
    "FilterConfig",
    "SizingMode",
    "bit_array_size",
    "probe_count",
    "BloomFilterError",
    "InvalidCapacityError",
    "InvalidErrorRateError",
]
