"""
Trace-driven simulator of an LRU set-associative data cache.

``SetAssociativeCache`` models the sets, lines and tags; ``TraceReplayer``
feeds it valgrind-style access records and counts hits, misses and evictions.
"""

from cachesim.entity.model import (AccessRecord, AccessResult, CacheConfig,
                                   CacheConfigError, Operation, TraceFormatError)
from cachesim.entity.report import Statistics
from cachesim.memory.memory_manager import SetAssociativeCache
from cachesim.replay import TraceReplayer, simulate
from cachesim.trace import read_trace

__all__ = [
    "AccessRecord",
    "AccessResult",
    "CacheConfig",
    "CacheConfigError",
    "Operation",
    "SetAssociativeCache",
    "Statistics",
    "TraceFormatError",
    "TraceReplayer",
    "read_trace",
    "simulate",
]
