"""
csim cache simulator Python API.

Replays Valgrind memory traces against a set-associative LRU cache:
1. **Configuration:** ``Config``, ``load_config``.
2. **Model:** ``Cache``, ``CacheSet``, ``CacheLine``.
3. **Traces:** ``TraceRecord``, ``read_trace``, ``parse_line``, ``replay``.
4. **Experiments:** ``simulate``, ``Environment``, ``Result``, ``run_experiment``, ``sweep``.
5. **Statistics:** ``Stats``, ``compare``.
"""

from importlib.metadata import version as _metadata_version

from .cache import Cache, CacheLine, CacheSet
from .config import Config, ConfigError, load_config
from .experiment import Environment, Result, run_experiment, simulate, sweep
from .replay import replay
from .stats import Stats, compare
from .trace import TraceSourceError, iter_trace, parse_line, read_trace
from .types import TraceRecord

__version__ = _metadata_version("csim")


def version() -> str:
    """Return the installed csim version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "Config",
    "ConfigError",
    "load_config",
    "Cache",
    "CacheSet",
    "CacheLine",
    "TraceRecord",
    "TraceSourceError",
    "parse_line",
    "iter_trace",
    "read_trace",
    "replay",
    "simulate",
    "Environment",
    "Result",
    "run_experiment",
    "sweep",
    "Stats",
    "compare",
]
