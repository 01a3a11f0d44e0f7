import logging
from typing import Optional

from ...domain.repositories.name_cache import DisplayNameCache
from ...domain.services.directory_service import UserDirectoryService
from ...domain.services.moderation_service import ModerationService
from ...domain.services.report_service import ReportService
from ...domain.services.verification_service import VerificationService
from ..cache.memory_name_cache import InMemoryDisplayNameCache
from ..storage.http_blob_store import HttpBlobStore
from .config import DataConfig, DataManagerFactory
from .repositories.postgres_report_repository import PostgresReportRepository
from .repositories.postgres_user_repository import PostgresUserRepository
from .repositories.postgres_verification_repository import PostgresVerificationRepository
from .repositories.redis_cache_repository import RedisDisplayNameCache

logger = logging.getLogger(__name__)


class RepositoryFactory:
    """Factory for creating and managing repository and service instances"""

    def __init__(self, config: Optional[DataConfig] = None):
        self.config = config or DataConfig()
        self.data_manager: Optional[DataManagerFactory] = None

        # Repository instances
        self._verification_repository: Optional[PostgresVerificationRepository] = None
        self._user_repository: Optional[PostgresUserRepository] = None
        self._report_repository: Optional[PostgresReportRepository] = None
        self._name_cache: Optional[DisplayNameCache] = None
        self._blob_store: Optional[HttpBlobStore] = None

        self._initialized = False

    async def initialize(self):
        """Initialize all data connections and repositories"""
        if self._initialized:
            logger.warning("Repository factory already initialized")
            return

        try:
            self.data_manager = DataManagerFactory(self.config)
            await self.data_manager.initialize_all()

            await self._create_repositories()

            self._initialized = True
            logger.info("Repository factory initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize repository factory: {e}")
            raise

    async def _create_repositories(self):
        """Create repository instances"""
        if not self.data_manager:
            raise RuntimeError("Data manager not initialized")

        db_pool = self.data_manager.get_database_pool()
        redis_client = self.data_manager.get_redis_client()

        self._verification_repository = PostgresVerificationRepository(db_pool)
        self._user_repository = PostgresUserRepository(db_pool)
        self._report_repository = PostgresReportRepository(db_pool)

        if redis_client is not None:
            self._name_cache = RedisDisplayNameCache(
                redis_client,
                ttl_seconds=self.config.cache.ttl_seconds,
                max_entries=self.config.cache.max_entries
            )
        else:
            self._name_cache = InMemoryDisplayNameCache(
                ttl_seconds=self.config.cache.ttl_seconds,
                max_entries=self.config.cache.max_entries
            )

        self._blob_store = HttpBlobStore(self.config.storage)
        await self._blob_store.initialize()

        logger.info("All repositories created successfully")

    async def close(self):
        """Close all connections and cleanup"""
        try:
            if self._blob_store:
                await self._blob_store.close()

            if self.data_manager:
                await self.data_manager.close_all()

            self._initialized = False
            logger.info("Repository factory closed successfully")

        except Exception as e:
            logger.error(f"Error closing repository factory: {e}")
            raise

    def _require(self, instance, name: str):
        if not self._initialized or instance is None:
            raise RuntimeError(f"Repository factory not initialized or {name} not available")
        return instance

    def get_verification_repository(self) -> PostgresVerificationRepository:
        return self._require(self._verification_repository, "verification repository")

    def get_user_repository(self) -> PostgresUserRepository:
        return self._require(self._user_repository, "user repository")

    def get_report_repository(self) -> PostgresReportRepository:
        return self._require(self._report_repository, "report repository")

    def get_name_cache(self) -> DisplayNameCache:
        return self._require(self._name_cache, "name cache")

    def get_blob_store(self) -> HttpBlobStore:
        return self._require(self._blob_store, "blob store")

    def get_verification_service(self) -> VerificationService:
        return VerificationService(
            self.get_verification_repository(),
            self.get_user_repository(),
            self.get_blob_store(),
            key_prefix=self.config.storage.key_prefix
        )

    def get_directory_service(self) -> UserDirectoryService:
        return UserDirectoryService(self.get_user_repository(), self.get_name_cache())

    def get_moderation_service(self) -> ModerationService:
        return ModerationService(
            self.get_user_repository(),
            self.get_verification_repository(),
            self.get_directory_service()
        )

    def get_report_service(self) -> ReportService:
        return ReportService(self.get_report_repository())

    async def health_check(self) -> dict:
        """Perform health check on all repositories"""
        health_status = {
            "database": False,
            "redis": None,
            "storage": False,
            "repositories": False,
            "overall": False
        }

        try:
            if self._verification_repository:
                db_health = await self._verification_repository.health_check()
                health_status["database"] = db_health.get("status") == "healthy"

            if isinstance(self._name_cache, RedisDisplayNameCache):
                health_status["redis"] = await self._name_cache.health_check()

            if self._blob_store:
                health_status["storage"] = await self._blob_store.health_check()

            health_status["repositories"] = all([
                self._verification_repository is not None,
                self._user_repository is not None,
                self._report_repository is not None,
                self._name_cache is not None
            ])

            # storage is reported but does not gate readiness
            health_status["overall"] = all([
                health_status["database"],
                health_status["redis"] is not False,
                health_status["repositories"]
            ])

        except Exception as e:
            logger.error(f"Health check failed: {e}")
            health_status["error"] = str(e)

        return health_status

    def is_initialized(self) -> bool:
        """Check if factory is initialized"""
        return self._initialized


# Global repository factory instance
_repository_factory: Optional[RepositoryFactory] = None


async def get_repository_factory(config: Optional[DataConfig] = None) -> RepositoryFactory:
    """Get or create the global repository factory instance"""
    global _repository_factory

    if _repository_factory is None:
        _repository_factory = RepositoryFactory(config)
        await _repository_factory.initialize()

    return _repository_factory


async def close_repository_factory():
    """Close the global repository factory instance"""
    global _repository_factory

    if _repository_factory:
        await _repository_factory.close()
        _repository_factory = None
