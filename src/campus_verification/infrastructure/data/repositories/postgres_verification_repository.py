from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities.verification import VerificationRequest, VerificationStatus
from ....domain.repositories.verification_repository import VerificationRepository
from .postgres_base import PostgresRepository, measure_performance, rows_affected

VERIFICATION_COLUMNS = """
    id, user_id, email, phone_number, student_id,
    id_image, cor_image, status, created_at
"""


class PostgresVerificationRepository(PostgresRepository, VerificationRepository):
    """PostgreSQL implementation of VerificationRepository"""

    @measure_performance("create_verification")
    async def create(self, request: VerificationRequest,
                     supersedes: Optional[UUID] = None) -> VerificationRequest:
        """Insert a pending request, replacing a rejected one atomically"""
        async with self.get_connection() as conn:
            async with conn.transaction():
                if supersedes is not None:
                    result = await conn.execute(
                        "DELETE FROM verifications WHERE id = $1 AND status = $2",
                        supersedes,
                        VerificationStatus.REJECTED.value
                    )
                    if rows_affected(result) == 0:
                        self.logger.warning(
                            f"Rejected verification {supersedes} was already gone when resubmitting"
                        )

                await conn.execute(
                    """
                    INSERT INTO verifications (
                        id, user_id, email, phone_number, student_id,
                        id_image, cor_image, status, created_at
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                    """,
                    request.id,
                    request.user_id,
                    request.email,
                    request.phone_number,
                    request.student_id,
                    request.id_image,
                    request.cor_image,
                    request.status.value,
                    request.created_at
                )

        self.logger.info(f"Created verification {request.id} for {request.email}")
        return request

    @measure_performance("get_verification_by_id")
    async def get_by_id(self, request_id: UUID) -> Optional[VerificationRequest]:
        async with self.get_connection() as conn:
            row = await conn.fetchrow(
                f"SELECT {VERIFICATION_COLUMNS} FROM verifications WHERE id = $1",
                request_id
            )
            return self._row_to_request(row) if row else None

    @measure_performance("get_latest_verification")
    async def get_latest_by_email(self, email: str) -> Optional[VerificationRequest]:
        async with self.get_connection() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {VERIFICATION_COLUMNS} FROM verifications
                WHERE LOWER(email) = LOWER($1)
                ORDER BY created_at DESC
                LIMIT 1
                """,
                email.strip()
            )
            return self._row_to_request(row) if row else None

    @measure_performance("update_verification_status")
    async def update_status(self, request_id: UUID, status: VerificationStatus) -> bool:
        async with self.get_connection() as conn:
            result = await conn.execute(
                "UPDATE verifications SET status = $2 WHERE id = $1",
                request_id,
                status.value
            )
            return rows_affected(result) == 1

    @measure_performance("list_verifications")
    async def list_requests(self, status: Optional[VerificationStatus] = None,
                            limit: int = 100, offset: int = 0) -> List[VerificationRequest]:
        async with self.get_connection() as conn:
            if status is None:
                rows = await conn.fetch(
                    f"""
                    SELECT {VERIFICATION_COLUMNS} FROM verifications
                    ORDER BY created_at DESC
                    LIMIT $1 OFFSET $2
                    """,
                    limit,
                    offset
                )
            else:
                rows = await conn.fetch(
                    f"""
                    SELECT {VERIFICATION_COLUMNS} FROM verifications
                    WHERE status = $1
                    ORDER BY created_at DESC
                    LIMIT $2 OFFSET $3
                    """,
                    status.value,
                    limit,
                    offset
                )
            return [self._row_to_request(row) for row in rows]

    @measure_performance("count_verifications_by_status")
    async def count_by_status(self) -> Dict[VerificationStatus, int]:
        async with self.get_connection() as conn:
            rows = await conn.fetch(
                "SELECT status, COUNT(*) AS total FROM verifications GROUP BY status"
            )

        counts = {status: 0 for status in VerificationStatus}
        for row in rows:
            counts[VerificationStatus(row['status'])] = row['total']
        return counts

    def _row_to_request(self, row) -> VerificationRequest:
        return VerificationRequest(
            id=row['id'],
            user_id=row['user_id'],
            email=row['email'],
            phone_number=row['phone_number'],
            student_id=row['student_id'],
            id_image=row['id_image'],
            cor_image=row['cor_image'],
            status=VerificationStatus(row['status']),
            created_at=row['created_at']
        )
