"""
Global pytest configuration and fixtures for the verification service test suite.

Provides in-memory repositories, services wired to them, and an API client
with the repository factory and identity provider replaced by test doubles.
"""

import os
import pytest
from unittest.mock import Mock

from fastapi.testclient import TestClient

# Test environment setup
os.environ["TESTING"] = "1"
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret")

from campus_verification.domain.services import (
    ModerationService, ReportService, UserDirectoryService, VerificationService
)
from tests.utils.data_factories import (
    ApplicantFactory, FactoryConfig, ReportFactory, UserRecordFactory, VerificationRequestFactory
)
from tests.utils.test_helpers import (
    DictNameCache, InMemoryReportRepository, InMemoryUserRepository,
    InMemoryVerificationRepository, RecordingBlobStore, StaticIdentityProvider
)

APPLICANT_TOKEN = "applicant-token"
ADMIN_TOKEN = "admin-token"


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


# =======================
# Factories
# =======================

@pytest.fixture
def applicant_factory():
    return ApplicantFactory(FactoryConfig(seed=42))


@pytest.fixture
def request_factory():
    return VerificationRequestFactory(FactoryConfig(seed=42))


@pytest.fixture
def user_factory():
    return UserRecordFactory(FactoryConfig(seed=42))


@pytest.fixture
def report_factory():
    return ReportFactory(FactoryConfig(seed=42))


@pytest.fixture
def applicant(applicant_factory):
    return applicant_factory.create(email="juan@campus.edu")


@pytest.fixture
def admin(applicant_factory):
    return applicant_factory.create_admin()


# =======================
# In-memory ports
# =======================

@pytest.fixture
def verification_repository():
    return InMemoryVerificationRepository()


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def report_repository():
    return InMemoryReportRepository()


@pytest.fixture
def blob_store():
    return RecordingBlobStore()


@pytest.fixture
def name_cache():
    return DictNameCache()


# =======================
# Services
# =======================

@pytest.fixture
def verification_service(verification_repository, user_repository, blob_store):
    return VerificationService(verification_repository, user_repository, blob_store)


@pytest.fixture
def directory_service(user_repository, name_cache):
    return UserDirectoryService(user_repository, name_cache)


@pytest.fixture
def moderation_service(user_repository, verification_repository, directory_service):
    return ModerationService(user_repository, verification_repository, directory_service)


@pytest.fixture
def report_service(report_repository):
    return ReportService(report_repository)


# =======================
# API
# =======================

@pytest.fixture
def mock_repository_factory(verification_service, moderation_service,
                            directory_service, report_service):
    factory = Mock()
    factory.get_verification_service.return_value = verification_service
    factory.get_moderation_service.return_value = moderation_service
    factory.get_directory_service.return_value = directory_service
    factory.get_report_service.return_value = report_service
    factory.is_initialized.return_value = True
    return factory


@pytest.fixture
def api_client(mock_repository_factory, applicant, admin):
    """TestClient without the lifespan so no real backends are contacted."""
    from campus_verification.application.api.main import app

    app.state.repository_factory = mock_repository_factory
    app.state.identity_provider = StaticIdentityProvider({
        APPLICANT_TOKEN: applicant,
        ADMIN_TOKEN: admin
    })
    client = TestClient(app)
    yield client
    del app.state.repository_factory
    del app.state.identity_provider


@pytest.fixture
def applicant_headers():
    return {"Authorization": f"Bearer {APPLICANT_TOKEN}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
