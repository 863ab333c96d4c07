"""Hash probing for the membership filter.

Every element is hashed once with BLAKE2b. The 128-bit digest is split into
two 64-bit halves ``h1`` and ``h2``; ``h2`` is reduced to a stride in
``[1, m-1]`` and probe ``i`` lands on ``(h1 + i*stride) % m``, so ``k``
probes cost a single digest.
"""
import decimal
import hashlib
import math
import numbers
import struct
from typing import Any, Iterable, List, Optional

import numpy as np

SALT_KEY_SIZE = 32


def _int_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 8) // 8, "little", signed=True)


def _framed(parts: Iterable[bytes]) -> bytes:
    return b"".join(struct.pack("<I", len(part)) + part for part in parts)


def encode_item(item: Any) -> bytes:
    """Deterministic byte encoding of an element.

    Bytes-like objects are used as-is and strings are UTF-8 encoded. Other
    values get a type tag and a canonical body, so elements that compare
    equal encode identically: ``True``, ``1`` and ``1.0`` share the int
    encoding, ``-0.0`` folds into ``0``, tuples are encoded member by member
    and sets by their sorted member encodings. Anything else falls back to
    ``repr()`` and needs a repr that is stable across processes.
    """
    if isinstance(item, bytes):
        return item
    if isinstance(item, (bytearray, memoryview)):
        return bytes(item)
    if isinstance(item, str):
        return item.encode("utf-8")
    if item is None:
        return b"n"
    if isinstance(item, numbers.Integral):
        return b"i" + _int_bytes(int(item))
    if isinstance(item, float):
        if item.is_integer():
            return b"i" + _int_bytes(int(item))
        return b"f" + struct.pack("<d", item)
    if isinstance(item, (numbers.Real, decimal.Decimal)):
        # Fraction, Decimal: match the int or float they compare equal to
        if math.isfinite(item) and item == int(item):
            return b"i" + _int_bytes(int(item))
        if float(item) == item:
            return encode_item(float(item))
        return b"q" + repr(item).encode("utf-8")
    if isinstance(item, complex):
        if item.imag == 0:
            return encode_item(item.real)
        return b"c" + struct.pack("<dd", item.real + 0.0, item.imag + 0.0)
    if isinstance(item, tuple):
        return b"t" + _framed(encode_item(member) for member in item)
    if isinstance(item, (frozenset, set)):
        return b"s" + _framed(sorted(encode_item(member) for member in item))
    return b"r" + repr(item).encode("utf-8")


def salt_key(salt: Optional[bytes]) -> bytes:
    """Fold an arbitrary length salt into a BLAKE2b key."""
    if not salt:
        return b""
    return hashlib.blake2b(salt, digest_size=SALT_KEY_SIZE).digest()


def base_hashes(item: Any, key: bytes = b"") -> tuple:
    """Return the two 64-bit halves of the element's (keyed) digest."""
    digest = hashlib.blake2b(encode_item(item), digest_size=16, key=key).digest()
    return int.from_bytes(digest[:8], "little"), int.from_bytes(digest[8:], "little")


def probe_positions(item: Any, size: int, count: int, key: bytes = b"") -> List[int]:
    """Bit positions probed for ``item`` in a ``size`` bit array."""
    h1, h2 = base_hashes(item, key)
    # a stride of 0 mod size would put every probe on the same bit
    stride = 1 + h2 % (size - 1) if size > 1 else 0
    return [(h1 + i * stride) % size for i in range(count)]


def probe_matrix(items: Iterable[Any], size: int, count: int, key: bytes = b"") -> np.ndarray:
    """Probe positions for a batch, one row per element.

    Rows are computed with Python integers and only then packed into an
    ``int64`` array, so they match :func:`probe_positions` exactly.
    """
    rows = [probe_positions(item, size, count, key) for item in items]
    if not rows:
        return np.empty((0, count), dtype=np.int64)
    return np.array(rows, dtype=np.int64)
