import dataclasses

import pytest

from arrow_bloom.config import FilterConfig
from arrow_bloom.algorithms.sizing import SizingMode, bit_array_size, probe_count
from arrow_bloom.errors import BloomFilterError, InvalidCapacityError, InvalidErrorRateError


class TestFilterConfig:
    def test_derived_parameters(self):
        config = FilterConfig(1000, 0.01)
        assert config.size == bit_array_size(1000, 0.01)
        assert config.hash_count == probe_count(1000, config.size)
        assert config.sizing is SizingMode.OPTIMAL
        assert config.salt is None

    def test_normalizes_inputs(self):
        config = FilterConfig(10, 0.5, salt=bytearray(b"abc"), sizing="compat")
        assert config.salt == b"abc"
        assert isinstance(config.salt, bytes)
        assert config.sizing is SizingMode.COMPAT

    def test_frozen(self):
        config = FilterConfig(10, 0.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.capacity = 20

    def test_validation(self):
        with pytest.raises(InvalidCapacityError):
            FilterConfig(0, 0.5)
        with pytest.raises(InvalidErrorRateError):
            FilterConfig(10, 1.0)
        with pytest.raises(BloomFilterError):
            FilterConfig(-1, 0.5)

    def test_unknown_sizing_mode(self):
        with pytest.raises(ValueError):
            FilterConfig(10, 0.5, sizing="exact")

    def test_equality(self):
        assert FilterConfig(10, 0.5, b"s") == FilterConfig(10, 0.5, b"s")
        assert FilterConfig(10, 0.5, b"s") != FilterConfig(10, 0.5, b"t")

    @pytest.mark.parametrize("salt, expected", [
        (1000, (1000).to_bytes(2, "little", signed=True)),
        (-1, b"\xff"),
        (10**12, (10**12).to_bytes(6, "little", signed=True)),
        (0, b"\x00"),
        (memoryview(b"xy"), b"xy"),
    ])
    def test_salt_encoding(self, salt, expected):
        assert FilterConfig(10, 0.5, salt=salt).salt == expected

    def test_int_salt_distinguishes_values(self):
        assert FilterConfig(10, 0.5, salt=1).salt != FilterConfig(10, 0.5, salt=2).salt
        assert len(FilterConfig(10, 0.5, salt=1000).salt) == 2

    @pytest.mark.parametrize("salt", [b"", bytearray(), None])
    def test_empty_salt_means_unsalted(self, salt):
        config = FilterConfig(10, 0.5, salt=salt)
        assert config.salt is None
        assert config == FilterConfig(10, 0.5)

    @pytest.mark.parametrize("salt", ["pepper", 1.5, True, [1, 2]])
    def test_salt_type_rejected(self, salt):
        with pytest.raises(TypeError):
            FilterConfig(10, 0.5, salt=salt)
