from arrow_bloom.algorithms.probing import encode_item, probe_positions
from arrow_bloom.algorithms.sizing import SizingMode, bit_array_size, probe_count

__all__ = ["SizingMode", "bit_array_size", "probe_count", "encode_item", "probe_positions"]
