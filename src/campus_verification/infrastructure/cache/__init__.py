from .memory_name_cache import InMemoryDisplayNameCache

__all__ = ['InMemoryDisplayNameCache']
