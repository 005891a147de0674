from __future__ import annotations

from typing import Dict, List, Optional

from cachesim.entity.model import AccessResult, CacheConfig, CacheLine, ModelContext
from cachesim.memory import AbstractMemoryManager
from cachesim.memory.addr_converter import decompose

import logging
logger = logging.getLogger(__name__)


class _LRUSet:
    def __init__(self, ways: int, context: ModelContext):
        self._context = context
        self.lines: List[CacheLine] = [CacheLine() for _ in range(ways)]

    def lookup(self, tag: int) -> Optional[CacheLine]:
        for line in self.lines:
            if line.valid and line.tag == tag:
                return line
        return None

    def victim(self) -> CacheLine:
        """First invalid line, else the least recently used one (lowest index on ties)."""
        for line in self.lines:
            if not line.valid:
                return line
        return min(self.lines, key=lambda line: line.recency)

    def access(self, tag: int) -> AccessResult:
        line = self.lookup(tag)
        if line is not None:
            line.recency = self._context.tick()
            return AccessResult.HIT

        line = self.victim()
        result = AccessResult.MISS_EVICTION if line.valid else AccessResult.MISS
        line.valid = True
        line.tag = tag
        line.recency = self._context.tick()
        return result


class SetAssociativeCache(AbstractMemoryManager):
    """
    LRU set-associative cache holding ``2**s`` sets of ``E`` lines, each line
    covering a ``2**b`` byte block. Only tags are modelled, never data.
    """

    def __init__(self, config: CacheConfig, context: ModelContext | None = None):
        super().__init__(config.validate(), context)
        self.num_sets = config.num_sets
        self.associativity = config.E
        self.block_size = config.block_size
        # sets are built on first touch, 2**s may be far larger than what a trace visits
        self._sets: Dict[int, _LRUSet] = {}
        logger.debug("cache built: S=%d E=%d B=%d",
                     self.num_sets, self.associativity, self.block_size)

    def _set(self, set_index: int) -> _LRUSet:
        cache_set = self._sets.get(set_index)
        if cache_set is None:
            cache_set = self._sets[set_index] = _LRUSet(self.associativity, self.context)
        return cache_set

    @property
    def sets(self) -> List[List[CacheLine]]:
        """All S x E lines, materializing untouched sets as empty ones."""
        return [self._set(idx).lines for idx in range(self.num_sets)]

    def access(self, addr: int) -> AccessResult:
        parts = decompose(addr, self.config.s, self.config.b)
        return self._set(parts.set_index).access(parts.tag)

    def reset(self):
        super().reset()
        self._sets.clear()

    def dump(self) -> str:
        """One row per touched set, each line as ``valid,tag,recency``."""
        rows = []
        for idx in sorted(self._sets):
            cells = " | ".join(
                f"{int(line.valid)},{line.tag:10x},{line.recency:4d}" for line in self._sets[idx].lines)
            rows.append(f"{idx:4d}: {cells}")
        return "\n".join(rows)


__all__ = ["SetAssociativeCache"]
