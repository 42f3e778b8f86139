"""Deterministic coordinate hashing.

Every "random" choice made by the synthesizers goes through these helpers so
that the same coordinates always produce the same output. Nothing here reads
from an ambient random source or any clock.
"""

import math
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


def slot_product(latitude: float, longitude: float, index: int) -> float:
    """Mix a coordinate pair with a slot index."""
    return (latitude + index) * (longitude + index)


def wave(value: float, scale: float, fn: Callable[[float], float] = math.sin) -> float:
    """abs(fn(value * scale)), a fraction in [0, 1]."""
    return abs(fn(value * scale))


def bucket(value: float, scale: float, size: int) -> int:
    """floor(abs(value * scale)) modulo size."""
    if size <= 0:
        raise ValueError("size must be positive")
    return int(math.floor(abs(value * scale))) % size


def coordinate_bucket(latitude: float, longitude: float, scale: float, modulus: float) -> float:
    return abs(latitude * longitude * scale) % modulus


def pick(items: Sequence[T], value: float, scale: float) -> T:
    return items[bucket(value, scale, len(items))]


def draw_int(fraction: float, low: int, high: int) -> int:
    """Map a fraction in [0, 1] onto the inclusive range [low, high]."""
    return min(high, low + int(math.floor(fraction * (high - low + 1))))


def count_between(latitude: float, longitude: float, scale: float, modulus: float, low: int, high: int) -> int:
    """Seeded count in [low, high]."""
    span = high - low + 1
    seed = coordinate_bucket(latitude, longitude, scale, modulus)
    return low + int(math.floor(seed % span))
