from abc import ABC, abstractmethod
from typing import Optional

from ..entities.verification import Applicant


class IdentityProvider(ABC):

    @abstractmethod
    async def current_user(self, token: Optional[str]) -> Optional[Applicant]:
        """Resolve the caller behind ``token``; None when unauthenticated."""
        pass
