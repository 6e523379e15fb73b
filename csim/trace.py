"""
Valgrind (lackey) memory trace reader.

Relevant lines look like ``" M 7ff000,8"``: a leading space, the access kind
(``L`` load, ``S`` store, ``M`` modify), the hex address and the byte length.
Instruction fetches (``I``) and every other line are skipped.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

from .types import ADDRESS_BITS, TraceRecord

_RECORD_RE = re.compile(r" ([LSM]) +(?:0[xX])?([0-9a-fA-F]+),(\d+)")


class TraceSourceError(OSError):
    """The trace file could not be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def parse_line(line: str) -> Optional[TraceRecord]:
    """Parse one trace line. Returns None for lines that are not data accesses."""
    m = _RECORD_RE.match(line)
    if not m:
        return None
    address = int(m.group(2), 16)
    if address >> ADDRESS_BITS:
        return None
    return TraceRecord(m.group(1), address, int(m.group(3)))


def iter_trace(lines: Iterable[str]) -> Iterator[TraceRecord]:
    """Lazily turn trace text lines into records, in order."""
    for line in lines:
        record = parse_line(line)
        if record is not None:
            yield record


def read_trace(path: str) -> Iterator[TraceRecord]:
    """
    Lazily read records from the trace file at *path*.

    The file is opened before the first record is requested, so a missing
    file raises :class:`TraceSourceError` from this call, not mid-replay.
    """
    try:
        f = open(path, "r", errors="replace")
    except OSError as e:
        raise TraceSourceError(path, e.strerror or str(e)) from e
    return _read_records(f)


def _read_records(f) -> Iterator[TraceRecord]:
    with f:
        yield from iter_trace(f)
