"""Cache strategy interface."""

from abc import ABC, abstractmethod
from typing import Any


class CacheStrategy(ABC):
    """Abstract cache strategy."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the cached value or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store a value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a value."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry."""
        pass
