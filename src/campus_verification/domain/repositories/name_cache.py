from abc import ABC, abstractmethod
from typing import Optional


class DisplayNameCache(ABC):
    """Bounded, time-expiring email -> display name cache."""

    @abstractmethod
    async def get(self, email: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, email: str, name: str) -> None:
        pass

    @abstractmethod
    async def invalidate(self, email: str) -> None:
        pass
