from abc import ABC, abstractmethod
from typing import Optional


class BlobStore(ABC):
    """Object storage for uploaded verification images."""

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str,
                     bucket: Optional[str] = None) -> str:
        """Store ``data`` under ``key`` (overwriting) and return its public URL.

        ``bucket`` defaults to the store's configured bucket. Raises
        ``UploadError`` on failure.
        """
        pass

    @abstractmethod
    def public_url(self, key: str, bucket: Optional[str] = None) -> str:
        pass
