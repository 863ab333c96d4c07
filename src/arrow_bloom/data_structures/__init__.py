from arrow_bloom.data_structures.bloom_filter import BloomFilter

__all__ = ["BloomFilter"]
