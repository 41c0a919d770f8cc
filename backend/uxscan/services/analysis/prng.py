"""Seeded pseudo-random stream and string hashing for reproducible mock analyses."""

from __future__ import annotations

from typing import Callable

UINT32_MASK = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
DEFAULT_SEED = 0x9E3779B9


def hash_string(value: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of *value*."""
    h = FNV_OFFSET_BASIS
    data = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * FNV_PRIME) & UINT32_MASK
    return h


def make_rand(seed: int) -> Callable[[], float]:
    """Return a xorshift32 generator yielding floats in ``[0, 1)``.

    Every call builds a fresh stream; never share one between requests.
    """
    state = seed & UINT32_MASK or DEFAULT_SEED

    def rand() -> float:
        nonlocal state
        x = state
        x ^= (x << 13) & UINT32_MASK
        x ^= x >> 17
        x ^= (x << 5) & UINT32_MASK
        state = x
        # 0xFFFFFFFF folds to 0 so the result never reaches 1.0
        return (x % UINT32_MASK) / UINT32_MASK

    return rand


def derive_seed(
    file_name: str,
    file_size: int,
    width: int,
    height: int,
    platform: str,
) -> int:
    return hash_string(f"{file_name}|{file_size}|{width}|{height}|{platform}")
