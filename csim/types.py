"""
Shared types for the cache simulator.

Provides:
- AccessKind / Outcome: string literals for trace record kinds and access results.
- TraceRecord: one data access parsed from a trace.
- _parse_size / _log2: helpers for turning human-readable sizes into bit counts.
"""

from __future__ import annotations

import re
from typing import Literal

ADDRESS_BITS = 64
"""Width of a memory address in bits."""

AccessKind = Literal["L", "S", "M"]
Outcome = Literal["hit", "miss", "eviction"]

HIT: Outcome = "hit"
MISS: Outcome = "miss"
EVICTION: Outcome = "eviction"

# Number of cache accesses each record kind turns into.
ACCESSES_PER_KIND = {"L": 1, "S": 1, "M": 2}


def _parse_size(s) -> int:
    """Parse a size string like '32KB', '4MB', '64B' into bytes. Ints pass through."""
    if isinstance(s, int):
        return s
    if not isinstance(s, str):
        raise TypeError(f"Expected str or int, got {type(s).__name__}")
    m = re.fullmatch(r"(\d+)\s*(B|KB|MB|GB)", s.strip(), re.IGNORECASE)
    if not m:
        raise ValueError(f"Cannot parse size: {s!r} (expected e.g. '32KB', '4MB')")
    val = int(m.group(1))
    unit = m.group(2).upper()
    mult = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}
    return val * mult[unit]


def _parse_count(s) -> int:
    """Parse a count like '500K', '5M', '1G' or '1000'. Ints pass through."""
    if isinstance(s, int):
        return s
    m = re.fullmatch(r"(\d+)\s*([KMG]?)", str(s).strip(), re.IGNORECASE)
    if not m:
        raise ValueError(f"Cannot parse count: {s!r} (expected e.g. '1000', '500K', '5M')")
    mult = {"": 1, "K": 1_000, "M": 1_000_000, "G": 1_000_000_000}
    return int(m.group(1)) * mult[m.group(2).upper()]


def _log2(n: int, what: str = "value") -> int:
    """Exact base-2 logarithm of a positive power of two."""
    if n <= 0 or n & (n - 1):
        raise ValueError(f"{what} must be a power of two, got {n}")
    return n.bit_length() - 1


class TraceRecord:
    """A single data access from a trace: kind, address and byte length."""

    __slots__ = ("kind", "address", "length")

    def __init__(self, kind: AccessKind, address: int, length: int):
        self.kind = kind
        self.address = address
        self.length = length

    def __eq__(self, other) -> bool:
        if not isinstance(other, TraceRecord):
            return NotImplemented
        return (self.kind, self.address, self.length) == (
            other.kind,
            other.address,
            other.length,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.address, self.length))

    def __str__(self) -> str:
        return f"{self.kind} {self.address:x},{self.length}"

    def __repr__(self) -> str:
        return (
            f"TraceRecord(kind={self.kind!r}, address={self.address:#x}, "
            f"length={self.length})"
        )
