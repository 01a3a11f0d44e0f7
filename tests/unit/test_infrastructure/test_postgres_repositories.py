"""
Unit tests for the PostgreSQL repositories.

The asyncpg pool and connection are mocked; tests assert on the SQL issued,
transaction use and the translation of driver errors.
"""

import asyncio
import pytest
from datetime import datetime
from uuid import uuid4

import asyncpg

from campus_verification.domain.entities.report import ReportReason
from campus_verification.domain.entities.user import AccountStatus
from campus_verification.domain.entities.verification import VerificationStatus
from campus_verification.domain.errors import RecordStoreError
from campus_verification.infrastructure.data.repositories import (
    PostgresReportRepository, PostgresUserRepository, PostgresVerificationRepository
)
from campus_verification.infrastructure.data.repositories.postgres_base import rows_affected
from tests.utils.data_factories import ReportFactory, VerificationRequestFactory
from tests.utils.test_helpers import DatabaseTestHelpers


def verification_row(request):
    return {
        'id': request.id,
        'user_id': request.user_id,
        'email': request.email,
        'phone_number': request.phone_number,
        'student_id': request.student_id,
        'id_image': request.id_image,
        'cor_image': request.cor_image,
        'status': request.status.value,
        'created_at': request.created_at,
    }


def user_row(**overrides):
    row = {
        'id': uuid4(),
        'email': "mark@campus.edu",
        'name': "Mark",
        'phone_number': None,
        'student_id': None,
        'account_status': "active",
        'suspended_until': None,
        'profile_photo': None,
        'credential': None,
        'created_at': datetime(2024, 1, 1),
    }
    row.update(overrides)
    return row


class TestRowsAffected:

    @pytest.mark.parametrize("status,expected", [
        ("UPDATE 1", 1), ("DELETE 0", 0), ("INSERT 0 1", 1), ("", 0), (None, 0)
    ])
    def test_parse(self, status, expected):
        assert rows_affected(status) == expected


class TestPostgresVerificationRepository:
    """Test cases for PostgreSQL Verification Repository."""

    def setup_method(self):
        self.pool, self.conn = DatabaseTestHelpers.create_mock_pool()
        self.repository = PostgresVerificationRepository(self.pool)
        self.factory = VerificationRequestFactory()

    @pytest.mark.asyncio
    async def test_create_inserts_in_transaction(self):
        request = self.factory.create()
        self.conn.execute.return_value = "INSERT 0 1"

        result = await self.repository.create(request)

        assert result is request
        self.conn.transaction.assert_called_once()
        assert self.conn.execute.call_count == 1
        sql, *params = self.conn.execute.call_args.args
        assert "INSERT INTO verifications" in sql
        assert params[0] == request.id
        assert params[7] == "pending"
        self.pool.release.assert_awaited_once_with(self.conn)

    @pytest.mark.asyncio
    async def test_create_with_supersedes_deletes_rejected_first(self):
        request = self.factory.create()
        rejected_id = uuid4()
        self.conn.execute.side_effect = ["DELETE 1", "INSERT 0 1"]

        await self.repository.create(request, supersedes=rejected_id)

        delete_call, insert_call = self.conn.execute.call_args_list
        assert "DELETE FROM verifications" in delete_call.args[0]
        assert "status = $2" in delete_call.args[0]
        assert delete_call.args[1:] == (rejected_id, "rejected")
        assert "INSERT INTO verifications" in insert_call.args[0]
        self.conn.transaction.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_translates_driver_errors(self):
        self.conn.execute.side_effect = asyncpg.PostgresError("relation does not exist")

        with pytest.raises(RecordStoreError):
            await self.repository.create(self.factory.create())

        self.pool.release.assert_awaited_once_with(self.conn)

    @pytest.mark.asyncio
    async def test_connection_timeout_becomes_record_store_error(self):
        self.pool.acquire.side_effect = asyncio.TimeoutError()

        with pytest.raises(RecordStoreError):
            await self.repository.get_by_id(uuid4())

    @pytest.mark.asyncio
    async def test_get_latest_by_email(self):
        request = self.factory.create_with_status(VerificationStatus.REJECTED)
        self.conn.fetchrow.return_value = verification_row(request)

        result = await self.repository.get_latest_by_email(" Juan@Campus.edu ")

        sql, email = self.conn.fetchrow.call_args.args
        assert "LOWER(email) = LOWER($1)" in sql
        assert "ORDER BY created_at DESC" in sql
        assert "LIMIT 1" in sql
        assert email == "Juan@Campus.edu"
        assert result.id == request.id
        assert result.status == VerificationStatus.REJECTED

    @pytest.mark.asyncio
    async def test_get_latest_by_email_none(self):
        self.conn.fetchrow.return_value = None
        assert await self.repository.get_latest_by_email("nobody@campus.edu") is None

    @pytest.mark.asyncio
    async def test_update_status(self):
        request_id = uuid4()
        self.conn.execute.return_value = "UPDATE 1"

        assert await self.repository.update_status(request_id, VerificationStatus.APPROVED) is True
        assert self.conn.execute.call_args.args[1:] == (request_id, "approved")

    @pytest.mark.asyncio
    async def test_update_status_missing_row(self):
        self.conn.execute.return_value = "UPDATE 0"
        assert await self.repository.update_status(uuid4(), VerificationStatus.REJECTED) is False

    @pytest.mark.asyncio
    async def test_list_requests_with_status_filter(self):
        requests = self.factory.create_batch(2, status=VerificationStatus.PENDING)
        self.conn.fetch.return_value = [verification_row(r) for r in requests]

        result = await self.repository.list_requests(status=VerificationStatus.PENDING, limit=10, offset=5)

        sql, *params = self.conn.fetch.call_args.args
        assert "WHERE status = $1" in sql
        assert params == ["pending", 10, 5]
        assert [r.id for r in result] == [r.id for r in requests]

    @pytest.mark.asyncio
    async def test_count_by_status_fills_missing(self):
        self.conn.fetch.return_value = [{'status': 'pending', 'total': 4}]

        counts = await self.repository.count_by_status()

        assert counts == {
            VerificationStatus.PENDING: 4,
            VerificationStatus.APPROVED: 0,
            VerificationStatus.REJECTED: 0,
        }

    @pytest.mark.asyncio
    async def test_health_check(self):
        self.conn.fetchval.return_value = 1
        health = await self.repository.health_check()
        assert health["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        self.conn.fetchval.side_effect = asyncpg.InterfaceError("pool is closed")
        health = await self.repository.health_check()
        assert health["status"] == "unhealthy"


class TestPostgresUserRepository:
    """Test cases for PostgreSQL User Repository."""

    def setup_method(self):
        self.pool, self.conn = DatabaseTestHelpers.create_mock_pool()
        self.repository = PostgresUserRepository(self.pool)

    @pytest.mark.asyncio
    async def test_update_contact_details_updates_existing(self):
        self.conn.fetchrow.return_value = user_row(phone_number="09171234567", student_id="2021123456")

        user = await self.repository.update_contact_details("mark@campus.edu", "09171234567", "2021123456")

        assert self.conn.fetchrow.call_count == 1
        sql = self.conn.fetchrow.call_args.args[0]
        assert "UPDATE users SET" in sql
        assert "COALESCE($2, phone_number)" in sql
        assert user.phone_number == "09171234567"
        self.conn.transaction.assert_called_once()

    @pytest.mark.asyncio
    async def test_update_contact_details_inserts_missing_user(self):
        self.conn.fetchrow.side_effect = [
            None,
            user_row(email="new@campus.edu", name=None, student_id="2021123456"),
        ]

        user = await self.repository.update_contact_details("new@campus.edu", None, "2021123456")

        insert_sql = self.conn.fetchrow.call_args_list[1].args[0]
        assert "INSERT INTO users" in insert_sql
        assert "ON CONFLICT (email) DO UPDATE" in insert_sql
        assert user.email == "new@campus.edu"
        assert user.student_id == "2021123456"

    @pytest.mark.asyncio
    async def test_get_by_email_requires_email(self):
        with pytest.raises(ValueError):
            await self.repository.get_by_email("  ")

    @pytest.mark.asyncio
    async def test_row_mapping(self):
        until = datetime(2024, 6, 1)
        self.conn.fetchrow.return_value = user_row(account_status="suspended", suspended_until=until)

        user = await self.repository.get_by_id(uuid4())

        assert user.account_status == AccountStatus.SUSPENDED
        assert user.suspended_until == until

    @pytest.mark.asyncio
    async def test_set_account_status_clears_end_unless_suspended(self):
        user_id = uuid4()
        self.conn.execute.return_value = "UPDATE 1"

        await self.repository.set_account_status(user_id, AccountStatus.FROZEN,
                                                 suspended_until=datetime(2024, 6, 1))

        args = self.conn.execute.call_args.args
        assert args[1:4] == (user_id, "frozen", None)

    @pytest.mark.asyncio
    async def test_set_account_status_suspended(self):
        user_id = uuid4()
        until = datetime(2024, 6, 1)
        self.conn.execute.return_value = "UPDATE 1"

        assert await self.repository.set_account_status(user_id, AccountStatus.SUSPENDED, until)
        assert self.conn.execute.call_args.args[1:4] == (user_id, "suspended", until)

    @pytest.mark.asyncio
    async def test_delete_missing_user(self):
        self.conn.execute.return_value = "DELETE 0"
        assert await self.repository.delete(uuid4()) is False

    @pytest.mark.asyncio
    async def test_get_count(self):
        self.conn.fetchval.return_value = 12
        assert await self.repository.get_count() == 12


class TestPostgresReportRepository:

    def setup_method(self):
        self.pool, self.conn = DatabaseTestHelpers.create_mock_pool()
        self.repository = PostgresReportRepository(self.pool)

    @pytest.mark.asyncio
    async def test_create(self):
        report = ReportFactory().create(reason=ReportReason.HARASSMENT)
        self.conn.execute.return_value = "INSERT 0 1"

        assert await self.repository.create(report) is report
        args = self.conn.execute.call_args.args
        assert "INSERT INTO reports" in args[0]
        assert args[5] == "harassment"

    @pytest.mark.asyncio
    async def test_list_reports(self):
        report = ReportFactory().create(reason=ReportReason.SPAM)
        self.conn.fetch.return_value = [{
            'id': report.id,
            'reporter_id': report.reporter_id,
            'reported_user_id': report.reported_user_id,
            'reported_user_name': report.reported_user_name,
            'reason': 'spam',
            'description': report.description,
            'created_at': report.created_at,
        }]

        reports = await self.repository.list_reports(limit=5)

        assert reports[0].reason == ReportReason.SPAM
        assert reports[0].id == report.id
        assert self.conn.fetch.call_args.args[1:] == (5, 0)
