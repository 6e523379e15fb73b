"""
Reproducible experiment API for evaluating cache geometries.

Provides:
- simulate: build a cache from a Config, replay its trace, return Stats.
- Environment: Immutable description of a run (trace, config).
- Result: Structured result with stats, record count, and wall time.
- run_experiment / sweep: run one environment or one trace over many configs.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, TextIO, Union

from .cache import Cache
from .config import Config, _config_to_dict
from .replay import replay
from .stats import Stats
from .trace import read_trace
from .types import TraceRecord


def simulate(
    config: Config,
    records: Optional[Iterable[TraceRecord]] = None,
    out: Optional[TextIO] = None,
    progress: int = 0,
) -> Stats:
    """
    Run one simulation: validate *config*, replay the trace, return final stats.

    *records* overrides reading ``config.trace``. The cache is released once
    the replay finishes.
    """
    config.validate(require_trace=records is None)
    if records is None:
        records = read_trace(config.trace)
    with Cache.from_config(config) as cache:
        n = replay(records, cache, verbose=config.verbose, out=out, progress=progress)
        stats = cache.stats
    stats["records"] = n
    return stats


@dataclass
class Environment:
    """Immutable description of a simulation run for reproducibility."""

    trace: str
    """Path to the memory trace."""

    config: Optional[Union[Config, Dict[str, Any]]] = None
    """Config or dict with s/E/b. The trace path here wins over config.trace."""

    def get_config(self) -> Config:
        if self.config is None:
            raise ValueError("Environment needs a config with s, E and b")
        params = dict(_config_to_dict(self.config))
        params.update(trace=self.trace, verbose=False)
        return Config(**params)

    def run(self, quiet: bool = True, progress: int = 0) -> Result:
        """
        Run the simulation and return a :class:`Result`.

        Args:
            quiet: Suppress exceptions and return an error Result instead.

        Example::

            env = Environment(trace="traces/yi.trace", config=Config(s=4, E=1, b=4))
            result = env.run()
            print(result.stats["misses"], result.stats["miss_rate"])
        """
        t0 = time.perf_counter()
        try:
            config = self.get_config()
            stats = simulate(config, progress=progress)
        except Exception as e:
            if not quiet:
                raise
            return Result(
                stats=Stats({"error": str(e)}),
                wall_time_sec=time.perf_counter() - t0,
                trace=self.trace,
                error=str(e),
            )
        return Result(
            stats=stats,
            wall_time_sec=time.perf_counter() - t0,
            trace=self.trace,
            config=config.to_dict(),
        )


@dataclass
class Result:
    """Structured result of a single run."""

    stats: Stats = field(default_factory=lambda: Stats({}))
    """All stats as a Stats object."""

    wall_time_sec: float = 0.0
    """Wall-clock time of the run in seconds."""

    trace: str = ""
    """Trace path (from Environment)."""

    config: Dict[str, Any] = field(default_factory=dict)
    """Geometry the run used."""

    error: Optional[str] = None
    """Error message when the run failed under ``quiet=True``."""

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable dict for saving and comparison."""
        return {
            "trace": self.trace,
            "config": self.config,
            "wall_time_sec": self.wall_time_sec,
            "error": self.error,
            "stats": dict(self.stats),
        }


def run_experiment(env: Environment, quiet: bool = True) -> Result:
    """Run *env* and return its Result."""
    return env.run(quiet=quiet)


def sweep(
    trace: str,
    configs: Dict[str, Union[Config, Dict[str, Any]]],
    quiet: bool = True,
) -> Dict[str, Result]:
    """Replay one trace against each named config, in order."""
    return {
        name: Environment(trace=trace, config=cfg).run(quiet=quiet)
        for name, cfg in configs.items()
    }
