from dataclasses import dataclass

from cachesim.entity.model import AccessResult


@dataclass
class Statistics:
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def accesses(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return self.hits/self.accesses if self.accesses > 0 else 0

    def record(self, result: AccessResult):
        if result.hit:
            self.hits += 1
        else:
            self.misses += 1
            if result.eviction:
                self.evictions += 1

    def summary(self) -> str:
        return f"hits:{self.hits} misses:{self.misses} evictions:{self.evictions}"

    def __add__(self, b: 'Statistics'):
        return Statistics(
            hits=self.hits + b.hits,
            misses=self.misses + b.misses,
            evictions=self.evictions + b.evictions,
        )

    def __str__(self):
        return self.summary()


__all__ = ["Statistics"]
