"""
Flat simulator configuration.

A single ``Config`` class holds the cache geometry (``s``, ``E``, ``b``) and
the run settings (trace path, verbosity, results file). ``to_dict()`` gives a
JSON-friendly view for result files and comparison tables.
"""

from __future__ import annotations

import importlib.util
import os
import sys
from typing import Any, Dict, Optional

from .types import ADDRESS_BITS, _log2, _parse_size

DEFAULT_RESULTS_PATH = ".csim_results"


class ConfigError(ValueError):
    """Missing or invalid simulator configuration."""


class Config:
    """
    Cache geometry plus run settings with flat parameter access.

    Example::

        from csim import Config

        cfg = Config(s=4, E=2, b=4, trace="traces/yi.trace")
        cfg = Config.from_sizes("32KB", line="64B", ways=8)
    """

    def __init__(
        self,
        # Geometry
        s: Optional[int] = None,
        E: Optional[int] = None,
        b: Optional[int] = None,
        # Run
        trace: Optional[str] = None,
        verbose: bool = False,
        results_path: Optional[str] = DEFAULT_RESULTS_PATH,
    ):
        self.s = s
        self.E = E
        self.b = b

        self.trace = trace
        self.verbose = verbose
        self.results_path = results_path

    @classmethod
    def from_sizes(cls, size="32KB", line="64B", ways: int = 1, **kwargs) -> Config:
        """Derive ``s``/``E``/``b`` from a total size, a line size and associativity."""
        size_bytes = _parse_size(size)
        line_bytes = _parse_size(line)
        if ways < 1:
            raise ConfigError(f"ways must be at least 1, got {ways}")
        b = _log2(line_bytes, "line size")
        if size_bytes % (line_bytes * ways):
            raise ConfigError(
                f"cache size {size_bytes}B is not a multiple of line*ways "
                f"({line_bytes}B x {ways})"
            )
        s = _log2(size_bytes // (line_bytes * ways), "number of sets")
        return cls(s=s, E=ways, b=b, **kwargs)

    # ── Derived geometry ─────────────────────────────────────────────────────

    @property
    def num_sets(self) -> int:
        return 1 << self.s

    @property
    def block_size(self) -> int:
        return 1 << self.b

    @property
    def size_bytes(self) -> int:
        return self.num_sets * self.E * self.block_size

    def validate(self, require_trace: bool = True) -> Config:
        """
        Check the configuration before a run.

        ``s``, ``E`` and ``b`` must all be given and non-zero, and ``s + b``
        must fit in an address. Raises :class:`ConfigError` otherwise.
        """
        missing = [
            name
            for name, value in (("s", self.s), ("E", self.E), ("b", self.b))
            if not value
        ]
        if require_trace and not self.trace:
            missing.append("trace")
        if missing:
            raise ConfigError(
                f"Missing required command line argument: {', '.join(missing)}"
            )
        for name in ("s", "E", "b"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.s + self.b > ADDRESS_BITS:
            raise ConfigError(
                f"s + b = {self.s + self.b} exceeds the {ADDRESS_BITS}-bit address width"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Geometry and run settings as a plain dict."""
        return {
            "s": self.s,
            "E": self.E,
            "b": self.b,
            "trace": self.trace,
            "verbose": self.verbose,
            "results_path": self.results_path,
        }

    def __repr__(self) -> str:
        parts = [f"s={self.s}", f"E={self.E}", f"b={self.b}"]
        if self.trace is not None:
            parts.append(f"trace={self.trace!r}")
        if self.verbose:
            parts.append("verbose=True")
        return f"Config({', '.join(parts)})"


def _config_to_dict(config) -> Dict[str, Any]:
    """Normalize config to a dict. Accepts Config or plain dict."""
    if hasattr(config, "to_dict") and callable(getattr(config, "to_dict")):
        return config.to_dict()
    if isinstance(config, dict):
        return config
    raise TypeError("config must be Config or dict")


def _coerce_config(value) -> Config:
    if isinstance(value, Config):
        return value
    if isinstance(value, dict):
        return Config(**value)
    raise ConfigError(f"config entry point returned {type(value).__name__}")


def load_config(path: str) -> Config:
    """
    Load a configuration from a Python file.

    The file may define a function named after the file, a ``get_config()``
    function, or a ``config`` variable (a :class:`Config`, a dict, or a
    callable returning one of those).
    """
    if not os.path.exists(path):
        raise ConfigError(f"Config file {path} not found")

    spec = importlib.util.spec_from_file_location("csim_user_config", path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot load config file {path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)

    name = os.path.splitext(os.path.basename(path))[0]
    if callable(getattr(mod, name, None)):
        cfg = _coerce_config(getattr(mod, name)())
        print(f"[csim] Loaded config from {name}() in {path}", file=sys.stderr)
    elif hasattr(mod, "get_config"):
        cfg = _coerce_config(mod.get_config())
        print(f"[csim] Loaded config from get_config() in {path}", file=sys.stderr)
    elif hasattr(mod, "config"):
        c = mod.config
        cfg = _coerce_config(c() if callable(c) else c)
        print(f"[csim] Loaded config from 'config' in {path}", file=sys.stderr)
    else:
        raise ConfigError(
            f"Could not find config entry point in {path}. "
            f"Expected function '{name}' or 'get_config' or variable 'config'."
        )
    return cfg
