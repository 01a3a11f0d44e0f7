from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from ....domain.entities.user import AccountStatus, UserRecord
from ....domain.repositories.user_repository import UserRepository
from .postgres_base import PostgresRepository, measure_performance, rows_affected

USER_COLUMNS = """
    id, email, name, phone_number, student_id, account_status,
    suspended_until, profile_photo, credential, created_at
"""


class PostgresUserRepository(PostgresRepository, UserRepository):
    """PostgreSQL implementation of UserRepository"""

    @measure_performance("get_user_by_id")
    async def get_by_id(self, user_id: UUID) -> Optional[UserRecord]:
        async with self.get_connection() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = $1",
                user_id
            )
            return self._row_to_user(row) if row else None

    @measure_performance("get_user_by_email")
    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        """Get user by email address with validation"""
        if not email or not email.strip():
            raise ValueError("Email is required")

        async with self.get_connection() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER($1)",
                email.strip()
            )
            return self._row_to_user(row) if row else None

    @measure_performance("update_user_contact_details")
    async def update_contact_details(self, email: str, phone_number: Optional[str],
                                     student_id: Optional[str]) -> UserRecord:
        """Update phone number and student id, creating the user when missing"""
        now = datetime.utcnow()

        async with self.get_connection() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    f"""
                    UPDATE users SET
                        phone_number = COALESCE($2, phone_number),
                        student_id = COALESCE($3, student_id),
                        updated_at = $4
                    WHERE LOWER(email) = LOWER($1)
                    RETURNING {USER_COLUMNS}
                    """,
                    email.strip(),
                    phone_number,
                    student_id,
                    now
                )

                if row is None:
                    row = await conn.fetchrow(
                        f"""
                        INSERT INTO users (
                            id, email, phone_number, student_id, account_status,
                            created_at, updated_at
                        ) VALUES ($1, $2, $3, $4, $5, $6, $6)
                        ON CONFLICT (email) DO UPDATE SET
                            phone_number = COALESCE(EXCLUDED.phone_number, users.phone_number),
                            student_id = COALESCE(EXCLUDED.student_id, users.student_id),
                            updated_at = EXCLUDED.updated_at
                        RETURNING {USER_COLUMNS}
                        """,
                        uuid4(),
                        email.strip(),
                        phone_number,
                        student_id,
                        AccountStatus.ACTIVE.value,
                        now
                    )
                    self.logger.info(f"Created user record for {email} during copy-through")

        return self._row_to_user(row)

    @measure_performance("set_account_status")
    async def set_account_status(self, user_id: UUID, status: AccountStatus,
                                 suspended_until: Optional[datetime] = None) -> bool:
        if status != AccountStatus.SUSPENDED:
            suspended_until = None

        async with self.get_connection() as conn:
            result = await conn.execute(
                """
                UPDATE users SET
                    account_status = $2,
                    suspended_until = $3,
                    updated_at = $4
                WHERE id = $1
                """,
                user_id,
                status.value,
                suspended_until,
                datetime.utcnow()
            )
            return rows_affected(result) == 1

    @measure_performance("set_user_credential")
    async def set_credential(self, user_id: UUID, credential: Optional[str]) -> bool:
        async with self.get_connection() as conn:
            result = await conn.execute(
                "UPDATE users SET credential = $2, updated_at = $3 WHERE id = $1",
                user_id,
                credential,
                datetime.utcnow()
            )
            return rows_affected(result) == 1

    @measure_performance("delete_user")
    async def delete(self, user_id: UUID) -> bool:
        """Hard delete; the account cannot be recovered"""
        async with self.get_connection() as conn:
            result = await conn.execute("DELETE FROM users WHERE id = $1", user_id)
            deleted = rows_affected(result) == 1

        if deleted:
            self.logger.info(f"Deleted user with ID: {user_id}")
        else:
            self.logger.warning(f"User {user_id} not found or already deleted")
        return deleted

    @measure_performance("get_all_users")
    async def get_all(self, limit: int = 100, offset: int = 0) -> List[UserRecord]:
        async with self.get_connection() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {USER_COLUMNS} FROM users
                ORDER BY created_at DESC
                LIMIT $1 OFFSET $2
                """,
                limit,
                offset
            )
            return [self._row_to_user(row) for row in rows]

    @measure_performance("get_user_count")
    async def get_count(self) -> int:
        async with self.get_connection() as conn:
            return await conn.fetchval("SELECT COUNT(*) FROM users")

    def _row_to_user(self, row) -> UserRecord:
        return UserRecord(
            id=row['id'],
            email=row['email'],
            name=row['name'],
            phone_number=row['phone_number'],
            student_id=row['student_id'],
            account_status=AccountStatus(row['account_status'] or AccountStatus.ACTIVE.value),
            suspended_until=row['suspended_until'],
            profile_photo=row['profile_photo'],
            credential=row['credential'],
            created_at=row['created_at']
        )
