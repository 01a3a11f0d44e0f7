from abc import ABC, abstractmethod
from typing import List

from ..entities.report import UserReport


class ReportRepository(ABC):

    @abstractmethod
    async def create(self, report: UserReport) -> UserReport:
        pass

    @abstractmethod
    async def list_reports(self, limit: int = 100, offset: int = 0) -> List[UserReport]:
        pass
