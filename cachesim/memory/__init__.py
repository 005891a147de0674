from cachesim.entity.model import AccessResult, CacheConfig, ModelContext


class AbstractMemoryManager:
    def __init__(self, config: CacheConfig, context: ModelContext = None):
        self.config = config
        self.context = context if context is not None else ModelContext()

    def access(self, addr: int) -> AccessResult:
        raise NotImplementedError

    def reset(self):
        self.context.timestamp = 0


__all__ = ["AbstractMemoryManager"]
