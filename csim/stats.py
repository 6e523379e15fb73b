"""
Simulation statistics container with reporting and comparison.

Provides ``Stats`` (dict subclass) with ``.summary()`` and
``.write_results()`` for the final report,
``.compare(other)`` for two-way comparison, and a top-level ``compare()``
function for multi-config / multi-trace result matrices.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union


class Stats(dict):
    """
    Dict-like simulation statistics with reporting and comparison.

    Keys produced by the cache model: hits, misses, evictions, accesses,
    hit_rate, miss_rate.

    Example::

        result.stats["misses"]
        result.stats["miss_rate"]
        print(result.stats.summary())
    """

    def __init__(self, data: Dict[str, Any]):
        super().__init__(data)

    @classmethod
    def from_counts(cls, hits: int, misses: int, evictions: int) -> Stats:
        """Build the standard stats set from the three final counters."""
        accesses = hits + misses
        return cls(
            {
                "hits": hits,
                "misses": misses,
                "evictions": evictions,
                "accesses": accesses,
                "hit_rate": hits / accesses if accesses else 0.0,
                "miss_rate": misses / accesses if accesses else 0.0,
            }
        )

    def counts(self):
        """The (hits, misses, evictions) triple."""
        return self.get("hits", 0), self.get("misses", 0), self.get("evictions", 0)

    def summary(self) -> str:
        """Human-readable one-line report."""
        hits, misses, evictions = self.counts()
        return f"hits:{hits} misses:{misses} evictions:{evictions}"

    def write_results(self, path: str) -> None:
        """Persist ``hits misses evictions`` as one whitespace-separated line."""
        hits, misses, evictions = self.counts()
        with open(path, "w") as f:
            f.write(f"{hits} {misses} {evictions}\n")

    def write_json(self, path: str) -> None:
        with open(path, "w") as f:
            json.dump(dict(self), f, indent=2)

    def compare(self, other: Stats) -> None:
        """Print a two-column comparison table (self vs other) to stdout."""
        all_keys = sorted(set(self) | set(other))
        if not all_keys:
            print("(no stats to compare)")
            return
        rows = []
        for key in all_keys:
            v_self = self.get(key, "—")
            v_other = other.get(key, "—")
            diff = ""
            if isinstance(v_self, (int, float)) and isinstance(v_other, (int, float)):
                d = v_other - v_self
                if isinstance(d, float):
                    diff = f"{d:+.4f}"
                else:
                    diff = f"{d:+,}"
            rows.append([key, _fmt(v_self), _fmt(v_other), diff])
        print(_format_table(["metric", "self", "other", "diff"], rows))

    @staticmethod
    def tabulate(rows: Dict[str, Stats], title: Optional[str] = None) -> str:
        """Render ``{label: Stats}`` as a table with one row per label."""
        keys: List[str] = []
        for st in rows.values():
            for k in st:
                if k not in keys:
                    keys.append(k)
        body = [[label] + [_fmt(st.get(k, "—")) for k in keys] for label, st in rows.items()]
        table = _format_table(["config"] + keys, body)
        if title:
            return f"{title}\n{table}"
        return table

    def __repr__(self) -> str:
        return "Stats(" + ", ".join(f"{k}={_fmt(v)}" for k, v in self.items()) + ")"


# ── Formatting helpers ───────────────────────────────────────────────────────


def _fmt(v) -> str:
    if isinstance(v, float):
        return f"{v:.4f}"
    if isinstance(v, int):
        return f"{v:,}"
    return str(v)


_RATE_METRICS = {"hit_rate", "miss_rate"}
_COUNT_METRICS = {"hits", "misses", "evictions", "accesses"}


def _format_table(headers: List[str], rows: List[List[str]]) -> str:
    """Render an ASCII table: first column left-aligned, the rest right-aligned."""
    widths = [max([len(h)] + [len(r[i]) for r in rows if i < len(r)]) for i, h in enumerate(headers)]

    def _line(cells):
        cells = list(cells) + [""] * (len(headers) - len(cells))
        first = f"{cells[0]:<{widths[0]}}"
        rest = [f"{c:>{w}}" for c, w in zip(cells[1:], widths[1:])]
        return "  ".join([first] + rest)

    out = [_line(headers), "  ".join("-" * w for w in widths)]
    out.extend(_line(r) for r in rows)
    return "\n".join(out)


def compare(
    results: Dict[str, Any],
    *,
    metrics: Optional[List[str]] = None,
    baseline: Optional[str] = None,
) -> None:
    """
    Print a comparison table for experiment results.

    Args:
        results: Either ``dict[str, Result]`` (one trace, multiple configs)
                 or ``dict[str, dict[str, Result]]`` (multi-trace x multi-config).
        metrics: Specific metric names to show. If None, shows a default set.
        baseline: Config name to normalize against (shows miss ratios).
    """
    if not results:
        print("(no results to compare)")
        return
    first_val = next(iter(results.values()))
    if isinstance(first_val, dict):
        _compare_matrix(results, metrics=metrics)
    else:
        _compare_flat(results, metrics=metrics, baseline=baseline)


def _compare_flat(
    results: Dict[str, Any],
    *,
    metrics: Optional[List[str]] = None,
    baseline: Optional[str] = None,
) -> None:
    """Compare one trace across multiple configs."""
    config_names = list(results.keys())

    all_stat_keys = set()
    for r in results.values():
        all_stat_keys.update(r.stats.keys())
    if metrics is not None:
        show_metrics = [m for m in metrics if m in all_stat_keys]
    else:
        show_metrics = sorted(all_stat_keys & (_RATE_METRICS | _COUNT_METRICS))
        if not show_metrics:
            show_metrics = sorted(all_stat_keys)

    headers = ["metric"] + config_names
    rows: List[List[str]] = []
    for m in show_metrics:
        row = [m]
        for cfg_name in config_names:
            row.append(_fmt(results[cfg_name].stats.get(m, "—")))
        rows.append(row)

    # Misses relative to baseline; lower is better
    if baseline is not None and baseline in results:
        bv = results[baseline].stats.get("misses", 0)
        rows.append([""] * len(headers))
        row = ["misses vs " + baseline]
        for cfg_name in config_names:
            v = results[cfg_name].stats.get("misses", 0)
            row.append(f"{v / bv:.3f}x" if bv else "—")
        rows.append(row)

    print(_format_table(headers, rows))


def _compare_matrix(
    results: Dict[str, Dict[str, Any]],
    *,
    metrics: Optional[List[str]] = None,
) -> None:
    """Compare multi-trace x multi-config matrix."""
    trace_names = list(results.keys())
    config_names: List[str] = []
    for tdict in results.values():
        for k in tdict:
            if k not in config_names:
                config_names.append(k)

    if not config_names:
        print("(no results to compare)")
        return

    if metrics is None:
        metrics = ["miss_rate", "evictions"]

    for metric in metrics:
        print(f"\n=== {metric} ===")
        headers = ["trace"] + config_names
        rows: List[List[str]] = []
        totals: Dict[str, List[Union[int, float]]] = {c: [] for c in config_names}

        for tname in trace_names:
            row = [tname]
            for cname in config_names:
                r = results[tname].get(cname)
                if r is None:
                    row.append("—")
                    continue
                v = r.stats.get(metric, "—")
                row.append(_fmt(v))
                if isinstance(v, (int, float)):
                    totals[cname].append(v)
            rows.append(row)

        # Rates are averaged, counts are summed
        agg_row = ["AGGREGATE"]
        for cname in config_names:
            vals = totals[cname]
            if not vals:
                agg_row.append("—")
            elif metric in _RATE_METRICS:
                agg_row.append(f"{sum(vals) / len(vals):.4f}")
            else:
                agg_row.append(_fmt(int(sum(vals))))
        rows.append(agg_row)

        print(_format_table(headers, rows))
