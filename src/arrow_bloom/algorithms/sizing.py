import enum
import math
import numbers

from arrow_bloom.errors import InvalidCapacityError, InvalidErrorRateError

LN2 = math.log(2)


class SizingMode(enum.Enum):
    """How the bit array size and probe count are derived.

    ``OPTIMAL`` uses the textbook relations, which actually reach the target
    error rate. ``COMPAT`` reproduces the truncated integer-log2 variant, where
    the ``(ln 2)^2`` divisor collapses to 1, so filters sized that way keep
    identical ``size``/``hash_count`` values.
    """
    OPTIMAL = "optimal"
    COMPAT = "compat"


def validate_capacity(n) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n <= 0:
        raise InvalidCapacityError(n)
    return int(n)


def validate_error_rate(p) -> float:
    if isinstance(p, (bool, str, bytes)):
        raise InvalidErrorRateError(p)
    try:
        rate = float(p)
    except (TypeError, ValueError):
        raise InvalidErrorRateError(p) from None
    # NaN fails both comparisons
    if not 0.0 < rate < 1.0:
        raise InvalidErrorRateError(p)
    return rate


def bit_array_size(n: int, p: float, mode: SizingMode = SizingMode.OPTIMAL) -> int:
    """Number of bits needed to hold ``n`` elements at false positive rate ``p``.

    Args:
        n: Expected number of distinct elements
        p: Target false positive rate, strictly between 0 and 1
        mode: Sizing formula to apply

    Returns:
        ``ceil(-n*ln(p) / ln(2)^2)`` for ``OPTIMAL``, ``floor(|n*log2(p)|) + 1``
        for ``COMPAT``. Never less than 1.
    """
    n = validate_capacity(n)
    p = validate_error_rate(p)
    if mode is SizingMode.COMPAT:
        return math.floor(abs(n * math.log2(p))) + 1
    return max(1, math.ceil(-(n * math.log(p)) / (LN2 ** 2)))


def probe_count(n: int, m: int, mode: SizingMode = SizingMode.OPTIMAL) -> int:
    """Number of hash probes per element for ``n`` elements in ``m`` bits.

    ``OPTIMAL`` gives ``round((m/n) * ln 2)``, ``COMPAT`` gives ``m // n``.
    Both are clamped so that at least one probe is made.
    """
    n = validate_capacity(n)
    if mode is SizingMode.COMPAT:
        return max(1, m // n)
    return max(1, round((m / n) * LN2))
