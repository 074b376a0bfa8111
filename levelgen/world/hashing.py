from __future__ import annotations

import numpy as np

_U32_MASK = 0xFFFFFFFF

_HASH_XOR = np.uint32(2747636419)
_HASH_MUL = np.uint32(2654435769)
_RAND_DIV = np.float32(4294967295.0)


def wrapping_mul(seed: int, k: int) -> int:
    """seed * k modulo 2**32 (sub-seed derivation)."""
    return (int(seed) * int(k)) & _U32_MASK


def _as_u32(v) -> np.ndarray:
    # int32 lattice coordinates are reinterpreted two's-complement, so -1 -> 0xFFFFFFFF
    a = np.asarray(v)
    if a.dtype == np.uint32:
        return np.atleast_1d(a)
    if a.dtype.kind in "iu":
        return np.atleast_1d(a.astype(np.int64) & _U32_MASK).astype(np.uint32)
    raise TypeError(f"expected integer input, got {a.dtype}")


def khash(state) -> np.ndarray:
    """Integer avalanche hash on uint32 (vectorized, wrapping arithmetic).

    Always returns an array (at least 1-D); use int(khash(s)[0]) for a scalar.
    """
    s = _as_u32(state).copy()
    s = (s ^ _HASH_XOR) * _HASH_MUL
    s = (s ^ (s >> np.uint32(16))) * _HASH_MUL
    s = (s ^ (s >> np.uint32(16))) * _HASH_MUL
    return s


def khash2i(x, y, seed: int) -> np.ndarray:
    """Hash an integer lattice coordinate together with a seed."""
    xs = _as_u32(x)
    ys = _as_u32(y)
    hs = khash(int(seed) & _U32_MASK)
    return khash(xs + khash(ys + hs))


def rand(h) -> np.ndarray:
    """Map a hash to a float32 in [0,1] (the top edge may round to 1.0)."""
    return khash(h).astype(np.float32) / _RAND_DIV
