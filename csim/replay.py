"""
Trace replay: drives a Cache with the records of a memory trace.

Loads and stores are one access each; a modify is a load followed by a store
to the same address, so it is two consecutive accesses. Records are replayed
strictly in input order, which makes a replay fully deterministic.
"""

from __future__ import annotations

import sys
from typing import Iterable, Optional, TextIO

from .cache import Cache
from .types import ACCESSES_PER_KIND, EVICTION, HIT, MISS, TraceRecord

# Verbose annotation per access outcome
_OUTCOME_TEXT = {HIT: "hit", MISS: "miss", EVICTION: "miss eviction"}


def replay(
    records: Iterable[TraceRecord],
    cache: Cache,
    verbose: bool = False,
    out: Optional[TextIO] = None,
    progress: int = 0,
    progress_stream: Optional[TextIO] = None,
) -> int:
    """
    Replay *records* against *cache*. Returns the number of records replayed.

    Args:
        verbose: Write one line per record to *out* (default stdout): the
                 record itself, then the outcome of each of its accesses.
        progress: Report the record count to *progress_stream* (default
                  stderr) every N records. 0 disables it.
    """
    if out is None:
        out = sys.stdout
    if progress_stream is None:
        progress_stream = sys.stderr

    count = 0
    for record in records:
        if verbose:
            out.write(str(record))
        outcomes = [
            cache.access(record.address)
            for _ in range(ACCESSES_PER_KIND[record.kind])
        ]
        if verbose:
            out.write("".join(" " + _OUTCOME_TEXT[o] for o in outcomes) + "\n")
        count += 1
        if progress and count % progress == 0:
            print(f"[csim] {count:,} records replayed", file=progress_stream)
            progress_stream.flush()
    return count
