#!/usr/bin/env python3
"""Sweep cache size and associativity over a trace and compare miss rates.

Usage:
    python scripts/analysis/cache_sweep.py traces/yi.trace
    python scripts/analysis/cache_sweep.py traces/long.trace --sizes 1KB 2KB 4KB --ways 1 2 4
    python scripts/analysis/cache_sweep.py traces/trans.trace --line 32B --baseline 1KB/1w
"""

import argparse

from csim import Config, Stats, compare, sweep

SIZES = ["512B", "1KB", "2KB", "4KB", "8KB"]
WAYS = [1, 2, 4]


def main():
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("trace", help="Valgrind trace to replay")
    ap.add_argument("--sizes", nargs="+", default=SIZES, help="Cache sizes to sweep")
    ap.add_argument("--ways", type=int, nargs="+", default=WAYS, help="Associativities to sweep")
    ap.add_argument("--line", default="16B", help="Line size (default: 16B)")
    ap.add_argument("--baseline", default=None, help="Config label to normalize misses against")
    args = ap.parse_args()

    configs = {}
    for size in args.sizes:
        for ways in args.ways:
            configs[f"{size}/{ways}w"] = Config.from_sizes(size, line=args.line, ways=ways)

    results = sweep(args.trace, configs)
    failed = {name: r.error for name, r in results.items() if not r.ok}
    for name, err in failed.items():
        print(f"  {name}: {err}")

    rows = {
        name: Stats({
            "s": r.config["s"],
            "E": r.config["E"],
            "b": r.config["b"],
            "hits": r.stats["hits"],
            "misses": r.stats["misses"],
            "evictions": r.stats["evictions"],
            "miss%": r.stats["miss_rate"] * 100,
        })
        for name, r in results.items()
        if r.ok
    }
    print(Stats.tabulate(rows, title=f"{args.trace} — cache sweep ({args.line} lines)"))
    print()
    ok = {name: r for name, r in results.items() if r.ok}
    if ok:
        compare(ok, metrics=["misses", "evictions", "miss_rate"], baseline=args.baseline)


if __name__ == "__main__":
    main()
