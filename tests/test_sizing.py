import math

import pytest
from hypothesis import given, strategies as st

from arrow_bloom.algorithms.sizing import SizingMode, bit_array_size, probe_count
from arrow_bloom.errors import InvalidCapacityError, InvalidErrorRateError

rates = st.floats(1e-12, 0.999)
capacities = st.integers(1, 10**9)


class TestSizing:
    @given(capacities, rates, st.sampled_from(list(SizingMode)))
    def test_positive_parameters(self, n, p, mode):
        m = bit_array_size(n, p, mode)
        assert m > 0
        assert probe_count(n, m, mode) >= 1

    @given(capacities, rates, st.sampled_from(list(SizingMode)))
    def test_monotonic_in_capacity(self, n, p, mode):
        assert bit_array_size(n, p, mode) <= bit_array_size(n + 1, p, mode)

    @given(capacities, rates, rates, st.sampled_from(list(SizingMode)))
    def test_tighter_rate_needs_more_bits(self, n, p1, p2, mode):
        low, high = sorted((p1, p2))
        assert bit_array_size(n, low, mode) >= bit_array_size(n, high, mode)

    def test_optimal_formula(self):
        n, p = 100000, 0.0001
        m = bit_array_size(n, p)
        assert m == math.ceil(-(n * math.log(p)) / (math.log(2) ** 2))
        assert probe_count(n, m) == round((m / n) * math.log(2)) == 13

    def test_compat_formula(self):
        assert bit_array_size(100000, 0.0001, SizingMode.COMPAT) == 1328772
        assert probe_count(100000, 1328772, SizingMode.COMPAT) == 13

    def test_probe_count_clamped(self):
        # m < n would give zero probes
        assert probe_count(1000, 10, SizingMode.COMPAT) == 1
        assert probe_count(1000, 10) == 1
        assert bit_array_size(1, 0.99) == 1

    @pytest.mark.parametrize("n", [0, -3, 2.0])
    def test_invalid_capacity(self, n):
        with pytest.raises(InvalidCapacityError):
            bit_array_size(n, 0.1)
        with pytest.raises(InvalidCapacityError):
            probe_count(n, 100)

    @pytest.mark.parametrize("p", [0, 1, 2.5, -1e-9, float("inf"), float("nan"), "0.5", b"0.5"])
    def test_invalid_error_rate(self, p):
        with pytest.raises(InvalidErrorRateError) as excinfo:
            bit_array_size(10, p)
        assert excinfo.value.error_rate is p
