from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class ReportReason(str, Enum):
    SPAM = "spam"
    SCAM = "scam"
    INAPPROPRIATE = "inappropriate"
    HARASSMENT = "harassment"
    FAKE = "fake"
    VIOLENCE = "violence"
    OTHER = "other"

    @property
    def label(self) -> str:
        return REPORT_REASON_LABELS[self]


REPORT_REASON_LABELS = {
    ReportReason.SPAM: "Spam or misleading",
    ReportReason.SCAM: "Scam or fraud",
    ReportReason.INAPPROPRIATE: "Inappropriate content",
    ReportReason.HARASSMENT: "Harassment or bullying",
    ReportReason.FAKE: "Fake account or listing",
    ReportReason.VIOLENCE: "Violence or threats",
    ReportReason.OTHER: "Other",
}


@dataclass
class UserReport:
    id: UUID
    reporter_id: str
    reported_user_id: str
    reason: ReportReason
    description: str
    created_at: datetime
    reported_user_name: Optional[str] = None

    @classmethod
    def create(cls, reporter_id: str, reported_user_id: str, reason: ReportReason,
               description: str, reported_user_name: Optional[str] = None):
        return cls(
            id=uuid4(),
            reporter_id=reporter_id,
            reported_user_id=reported_user_id,
            reason=reason,
            description=description.strip(),
            created_at=datetime.utcnow(),
            reported_user_name=reported_user_name
        )
