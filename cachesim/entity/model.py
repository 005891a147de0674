from dataclasses import dataclass, field
from enum import Enum

from cachesim.utils.config_utils import BaseEnum

ADDRESS_BITS = 64


class CacheConfigError(ValueError):
    """Raised when a cache geometry cannot be built."""


class TraceFormatError(ValueError):
    """Raised when a trace line does not have the ``<op> <addr>,<size>`` shape."""


class Operation(BaseEnum):
    INSTRUCTION = "I"
    LOAD = "L"
    STORE = "S"
    MODIFY = "M"

    @property
    def accesses(self) -> int:
        """Number of data cache accesses one record of this kind performs."""
        return _OPERATION_ACCESSES[self]


_OPERATION_ACCESSES = {
    Operation.INSTRUCTION: 0,
    Operation.LOAD: 1,
    Operation.STORE: 1,
    Operation.MODIFY: 2,
}


class AccessResult(Enum):
    HIT = "hit"
    MISS = "miss"
    MISS_EVICTION = "miss eviction"

    @property
    def hit(self) -> bool:
        return self is AccessResult.HIT

    @property
    def eviction(self) -> bool:
        return self is AccessResult.MISS_EVICTION


@dataclass
class CacheConfig:
    s: int
    E: int
    b: int

    @property
    def num_sets(self) -> int:
        return 1 << self.s

    @property
    def block_size(self) -> int:
        return 1 << self.b

    @property
    def tag_bits(self) -> int:
        return ADDRESS_BITS - self.s - self.b

    def validate(self) -> "CacheConfig":
        for name in ("s", "E", "b"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise CacheConfigError(
                    f"{name} must be an integer, got {value!r}")
        if self.s < 0 or self.b < 0:
            raise CacheConfigError(
                f"set index bits and block offset bits must be non-negative (s={self.s}, b={self.b})")
        if self.E < 1:
            raise CacheConfigError(
                f"associativity must be at least 1 (E={self.E})")
        if self.s + self.b > ADDRESS_BITS:
            raise CacheConfigError(
                f"s + b must not exceed {ADDRESS_BITS} (s={self.s}, b={self.b})")
        return self


@dataclass
class CacheLine:
    valid: bool = False
    tag: int = 0
    recency: int = 0


@dataclass
class ModelContext:
    # global LRU clock, bumped on every touch
    timestamp: int = 0

    def tick(self) -> int:
        self.timestamp += 1
        return self.timestamp


@dataclass(frozen=True)
class AccessRecord:
    operation: Operation
    address: int
    size: int = field(default=0)

    def __str__(self):
        return f"{self.operation.value} {self.address:x},{self.size}"


__all__ = [
    "ADDRESS_BITS",
    "AccessRecord",
    "AccessResult",
    "CacheConfig",
    "CacheConfigError",
    "CacheLine",
    "ModelContext",
    "Operation",
    "TraceFormatError",
]
