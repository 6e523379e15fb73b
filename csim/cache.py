"""
Set-associative cache model with LRU replacement.

Provides:
- CacheLine: one slot (valid bit, tag, recency stamp).
- CacheSet: the E lines an address can map to.
- Cache: 2**s sets, address decomposition, hit/miss/eviction counters.

Every access stamps the touched line with the cache's recency clock and then
advances the clock, so stamps within a cache are unique and the line with the
smallest stamp is always the least recently used one. Lookups and victim
selection are linear scans over the set, O(E) per access.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .config import Config, ConfigError
from .stats import Stats
from .types import ADDRESS_BITS, EVICTION, HIT, MISS, Outcome


def _reserve(n: int) -> list:
    """A list of n empty slots. Raises MemoryError when it cannot be allocated."""
    try:
        return [None] * n
    except OverflowError as e:
        raise MemoryError(f"cannot reserve {n} slots") from e


class CacheLine:
    """One cache slot. ``tag`` and ``recency`` are meaningless while invalid."""

    __slots__ = ("valid", "tag", "recency")

    def __init__(self):
        self.valid = False
        self.tag = 0
        self.recency = 0

    def fill(self, tag: int, stamp: int) -> None:
        self.valid = True
        self.tag = tag
        self.recency = stamp

    def __repr__(self) -> str:
        if not self.valid:
            return "CacheLine(invalid)"
        return f"CacheLine(tag={self.tag:#x}, recency={self.recency})"


class CacheSet:
    """Fixed group of E lines. Valid lines never share a tag."""

    __slots__ = ("lines",)

    def __init__(self, E: int):
        lines = _reserve(E)
        for i in range(E):
            lines[i] = CacheLine()
        self.lines: List[CacheLine] = lines

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, idx: int) -> CacheLine:
        return self.lines[idx]

    def find(self, tag: int) -> Optional[CacheLine]:
        """The valid line holding *tag*, if any."""
        for line in self.lines:
            if line.valid and line.tag == tag:
                return line
        return None

    def free_line(self) -> Optional[CacheLine]:
        """The first invalid line, if any."""
        for line in self.lines:
            if not line.valid:
                return line
        return None

    def lru_line(self) -> CacheLine:
        """The line with the oldest recency stamp."""
        victim = self.lines[0]
        for line in self.lines[1:]:
            if line.recency < victim.recency:
                victim = line
        return victim

    def __repr__(self) -> str:
        return f"CacheSet({self.lines!r})"


class Cache:
    """
    Set-associative LRU cache with 2**s sets of E lines and 2**b byte blocks.

    Counters and the recency clock belong to the instance, so independent
    caches can be simulated side by side.

    Example::

        cache = Cache(s=4, E=2, b=4)
        cache.access(0x7ff000)   # "miss"
        cache.access(0x7ff004)   # "hit"
        print(cache.stats.summary())
        cache.close()
    """

    def __init__(self, s: int, E: int, b: int):
        for name, value in (("s", s), ("E", E), ("b", b)):
            if not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if s + b > ADDRESS_BITS:
            raise ConfigError(
                f"s + b = {s + b} exceeds the {ADDRESS_BITS}-bit address width"
            )
        self.s = s
        self.E = E
        self.b = b
        self._set_mask = (1 << s) - 1
        self._block_mask = (1 << b) - 1

        # MemoryError from here is fatal for the run
        sets = _reserve(1 << s)
        for i in range(len(sets)):
            sets[i] = CacheSet(E)
        self.sets: Optional[List[CacheSet]] = sets

        self.clock = 0
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @classmethod
    def from_config(cls, config: Config) -> Cache:
        config.validate(require_trace=False)
        return cls(config.s, config.E, config.b)

    # ── Geometry ─────────────────────────────────────────────────────────────

    @property
    def num_sets(self) -> int:
        return 1 << self.s

    @property
    def block_size(self) -> int:
        return 1 << self.b

    @property
    def size_bytes(self) -> int:
        return self.num_sets * self.E * self.block_size

    def decompose(self, address: int) -> Tuple[int, int, int]:
        """Split *address* into (tag, set index, block offset)."""
        tag = address >> (self.s + self.b)
        set_index = (address >> self.b) & self._set_mask
        return tag, set_index, address & self._block_mask

    # ── Simulation ───────────────────────────────────────────────────────────

    def access(self, address: int) -> Outcome:
        """
        Simulate one data access at *address*.

        Returns ``"hit"``, ``"miss"`` (filled an empty line) or ``"eviction"``
        (a miss that replaced the least recently used line).
        """
        if self.sets is None:
            raise RuntimeError("cache has been closed")
        tag = address >> (self.s + self.b)
        cache_set = self.sets[(address >> self.b) & self._set_mask]
        stamp = self.clock
        self.clock += 1

        line = cache_set.find(tag)
        if line is not None:
            line.recency = stamp
            self.hits += 1
            return HIT

        self.misses += 1
        line = cache_set.free_line()
        if line is not None:
            line.fill(tag, stamp)
            return MISS

        self.evictions += 1
        cache_set.lru_line().fill(tag, stamp)
        return EVICTION

    @property
    def stats(self) -> Stats:
        return Stats.from_counts(self.hits, self.misses, self.evictions)

    # ── Teardown ─────────────────────────────────────────────────────────────

    @property
    def closed(self) -> bool:
        return self.sets is None

    def close(self) -> None:
        """Release set/line storage. Counters stay readable."""
        self.sets = None

    def __enter__(self) -> Cache:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Cache(s={self.s}, E={self.E}, b={self.b}, "
            f"hits={self.hits}, misses={self.misses}, evictions={self.evictions})"
        )
