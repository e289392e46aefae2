from .local_storage import LocalDirectoryBackend
from .memory_store import InMemoryKeyValueStore

__all__ = ["InMemoryKeyValueStore", "LocalDirectoryBackend"]
