from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from ..entities.verification import VerificationRequest, VerificationStatus


class VerificationRepository(ABC):

    @abstractmethod
    async def create(self, request: VerificationRequest,
                     supersedes: Optional[UUID] = None) -> VerificationRequest:
        """Insert a request; when ``supersedes`` is given the rejected request
        with that id is deleted in the same transaction."""
        pass

    @abstractmethod
    async def get_by_id(self, request_id: UUID) -> Optional[VerificationRequest]:
        pass

    @abstractmethod
    async def get_latest_by_email(self, email: str) -> Optional[VerificationRequest]:
        pass

    @abstractmethod
    async def update_status(self, request_id: UUID, status: VerificationStatus) -> bool:
        pass

    @abstractmethod
    async def list_requests(self, status: Optional[VerificationStatus] = None,
                            limit: int = 100, offset: int = 0) -> List[VerificationRequest]:
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[VerificationStatus, int]:
        pass
