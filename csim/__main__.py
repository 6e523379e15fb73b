"""
CLI entry point for csim.

Invoked by the ``csim`` console script installed by pip, or directly via
``python -m csim``.

Usage::

    csim [-hv] -s <num> -E <num> -b <num> -t <file>
    csim --config cfg.py -t <file>            Geometry from a Python config file
    csim ... --output-stats stats.json        Also write stats as JSON
"""

import argparse
import sys
from typing import List, Optional

from .config import Config, ConfigError, load_config
from .experiment import simulate
from .trace import TraceSourceError
from .types import _parse_count

PROG = "csim"


def _build_parser() -> argparse.ArgumentParser:
    from importlib.metadata import version as _meta_version

    parser = argparse.ArgumentParser(
        prog=PROG,
        usage="%(prog)s [-hv] -s <num> -E <num> -b <num> -t <file>",
        description="Set-associative LRU cache simulator for Valgrind traces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  csim -s 4 -E 1 -b 4 -t traces/yi.trace\n"
            "  csim -v -s 8 -E 2 -b 4 -t traces/yi.trace\n"
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"csim {_meta_version('csim')}",
    )

    # Geometry
    parser.add_argument("-s", type=int, metavar="<num>", help="number of set index bits")
    parser.add_argument("-E", type=int, metavar="<num>", help="number of lines per set")
    parser.add_argument("-b", type=int, metavar="<num>", help="number of block offset bits")
    parser.add_argument("-t", dest="trace", metavar="<file>", help="trace file")
    parser.add_argument(
        "-v", dest="verbose", action="store_true", default=None, help="verbose trace output"
    )

    # Configuration
    parser.add_argument("--config", metavar="FILE", help="Python config file")

    # Output
    parser.add_argument(
        "--results",
        metavar="FILE",
        default=None,
        help="where to persist 'hits misses evictions' (default: .csim_results)",
    )
    parser.add_argument(
        "--output-stats",
        metavar="FILE",
        default=None,
        help="write stats as JSON to FILE",
    )
    parser.add_argument(
        "--progress",
        metavar="N",
        type=_parse_count,
        default=0,
        help="print progress every N records (supports K/M/G, e.g. 500K)",
    )
    return parser


def _resolve_config(args) -> Config:
    """Config file first, then command-line flags on top."""
    cfg = load_config(args.config) if args.config else Config()
    for name in ("s", "E", "b", "trace", "verbose"):
        value = getattr(args, name)
        if value is not None:
            setattr(cfg, name, value)
    if args.results is not None:
        cfg.results_path = args.results
    return cfg


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _resolve_config(args).validate()
    except ConfigError as e:
        print(f"{PROG}: {e}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    try:
        stats = simulate(config, progress=args.progress)
    except TraceSourceError as e:
        print(e, file=sys.stderr)
        return 1
    except MemoryError:
        print(
            f"{PROG}: cannot allocate {1 << config.s} sets of {config.E} lines",
            file=sys.stderr,
        )
        return 1

    print(stats.summary())
    if config.results_path:
        stats.write_results(config.results_path)
    if args.output_stats:
        stats.write_json(args.output_stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
