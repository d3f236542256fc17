"""Object store adapters."""

from infrastructure.object_store.in_memory import InMemoryObjectStore

__all__ = ["InMemoryObjectStore"]
