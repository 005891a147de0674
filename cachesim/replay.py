from typing import Iterable, Iterator, List, Tuple

from cachesim.entity.model import AccessRecord, AccessResult, CacheConfig, Operation
from cachesim.entity.report import Statistics
from cachesim.memory import AbstractMemoryManager
from cachesim.memory.memory_manager import SetAssociativeCache

import logging
logger = logging.getLogger(__name__)


class TraceReplayer:
    """
    Drives a cache with a stream of access records and folds the outcome of
    every data access into a ``Statistics`` instance.

    A replayer is bound to one cache; replaying another trace needs a fresh
    cache (or ``cache.reset()``) and a fresh replayer.
    """

    def __init__(self, cache: AbstractMemoryManager):
        self.cache = cache
        self.stats = Statistics()

    def step(self, record: AccessRecord) -> List[AccessResult]:
        # I -> no access, L/S -> one, M -> load then store to the same block
        results = [self.cache.access(record.address)
                   for _ in range(record.operation.accesses)]
        for result in results:
            self.stats.record(result)
        return results

    def iter_replay(self, records: Iterable[AccessRecord]) -> Iterator[Tuple[AccessRecord, List[AccessResult]]]:
        for record in records:
            yield record, self.step(record)

    def replay(self, records: Iterable[AccessRecord]) -> Statistics:
        count = 0
        for _ in self.iter_replay(records):
            count += 1
        logger.info("replayed %d records: %s", count, self.stats.summary())
        return self.stats


def simulate(config: CacheConfig, records: Iterable[AccessRecord]) -> Statistics:
    return TraceReplayer(SetAssociativeCache(config)).replay(records)


def format_step(record: AccessRecord, results: List[AccessResult]) -> str:
    """Verbose line for one record, e.g. ``M 20,1 miss eviction hit``."""
    return " ".join([str(record)] + [result.value for result in results])


__all__ = ["TraceReplayer", "format_step", "simulate"]
