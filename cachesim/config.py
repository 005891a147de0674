import os
from dataclasses import dataclass, field
from typing import List, Optional

from cachesim.entity.model import CacheConfig
from cachesim.utils.config_utils import load_config


@dataclass
class SimulatorConfig:
    cache: CacheConfig
    verbose: bool = field(default=False)
    traces: List[str] = field(default_factory=list)


def load_simulator_config(config_path: str) -> SimulatorConfig:
    config = load_config(config_path, SimulatorConfig)
    # trace paths in the file are relative to the file itself
    root = os.path.dirname(os.path.abspath(config_path))
    config.traces = [os.path.join(root, trace) for trace in config.traces]
    return config


def merge_cache_config(base: Optional[CacheConfig], s=None, E=None, b=None) -> CacheConfig:
    """Command-line values win over values read from a config file."""
    values = {"s": s, "E": E, "b": b}
    for name, value in values.items():
        if value is None and base is not None:
            values[name] = getattr(base, name)
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise KeyError(", ".join(missing))
    return CacheConfig(**values).validate()


__all__ = ["SimulatorConfig", "load_simulator_config", "merge_cache_config"]
