import os
import logging
from typing import List, Optional
from dataclasses import dataclass, field
from pathlib import Path
import asyncpg
import redis.asyncio as redis
from redis.asyncio import Redis

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).resolve().parent / "schema.sql"


@dataclass
class DatabaseConfig:
    """Database configuration settings"""
    host: str
    port: int
    database: str
    username: str
    password: str
    pool_size: int = 10
    pool_timeout: int = 30

    @property
    def asyncpg_url(self) -> str:
        """Get database URL for asyncpg"""
        return f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class RedisConfig:
    """Redis configuration settings"""
    host: str
    port: int
    db: int = 0
    password: Optional[str] = None
    max_connections: int = 20
    socket_timeout: int = 5
    socket_connect_timeout: int = 5
    health_check_interval: int = 30

    @property
    def url(self) -> str:
        """Get Redis URL"""
        if self.password:
            return f"redis://:{self.password}@{self.host}:{self.port}/{self.db}"
        else:
            return f"redis://{self.host}:{self.port}/{self.db}"


@dataclass
class StorageConfig:
    """Object storage settings for verification images"""
    url: str
    api_key: Optional[str] = None
    bucket: str = "verification-docs"
    fallback_bucket: Optional[str] = "product-images"
    key_prefix: str = "verification"
    timeout: int = 30


@dataclass
class AuthConfig:
    """Bearer token settings for the identity provider"""
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    audience: Optional[str] = None
    admin_emails: List[str] = field(default_factory=list)


@dataclass
class CacheConfig:
    """Display-name cache settings"""
    ttl_seconds: int = 300
    max_entries: int = 1000
    use_redis: bool = True


class DataConfig:
    """Main configuration class, read from environment variables"""

    def __init__(self):
        self.database = self._load_database_config()
        self.redis = self._load_redis_config()
        self.storage = self._load_storage_config()
        self.auth = self._load_auth_config()
        self.cache = self._load_cache_config()

    def _load_database_config(self) -> DatabaseConfig:
        """Load database configuration from environment variables"""
        return DatabaseConfig(
            host=os.getenv("DB_HOST", "localhost"),
            port=int(os.getenv("DB_PORT", "5432")),
            database=os.getenv("DB_NAME", "campus_market"),
            username=os.getenv("DB_USERNAME", "postgres"),
            password=os.getenv("DB_PASSWORD", "password"),
            pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30"))
        )

    def _load_redis_config(self) -> RedisConfig:
        """Load Redis configuration from environment variables"""
        return RedisConfig(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            db=int(os.getenv("REDIS_DB", "0")),
            password=os.getenv("REDIS_PASSWORD"),
            max_connections=int(os.getenv("REDIS_MAX_CONNECTIONS", "20")),
            socket_timeout=int(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            socket_connect_timeout=int(os.getenv("REDIS_SOCKET_CONNECT_TIMEOUT", "5")),
            health_check_interval=int(os.getenv("REDIS_HEALTH_CHECK_INTERVAL", "30"))
        )

    def _load_storage_config(self) -> StorageConfig:
        """Load object storage configuration from environment variables"""
        return StorageConfig(
            url=os.getenv("STORAGE_URL", "http://localhost:54321").rstrip("/"),
            api_key=os.getenv("STORAGE_API_KEY"),
            bucket=os.getenv("STORAGE_BUCKET", "verification-docs"),
            fallback_bucket=os.getenv("STORAGE_FALLBACK_BUCKET", "product-images") or None,
            key_prefix=os.getenv("STORAGE_KEY_PREFIX", "verification"),
            timeout=int(os.getenv("STORAGE_TIMEOUT", "30"))
        )

    def _load_auth_config(self) -> AuthConfig:
        """Load identity provider configuration from environment variables"""
        admin_emails = os.getenv("AUTH_ADMIN_EMAILS", "")
        return AuthConfig(
            jwt_secret=os.getenv("AUTH_JWT_SECRET", "change-me"),
            jwt_algorithm=os.getenv("AUTH_JWT_ALGORITHM", "HS256"),
            audience=os.getenv("AUTH_JWT_AUDIENCE") or None,
            admin_emails=[e.strip().lower() for e in admin_emails.split(",") if e.strip()]
        )

    def _load_cache_config(self) -> CacheConfig:
        """Load display-name cache configuration from environment variables"""
        return CacheConfig(
            ttl_seconds=int(os.getenv("NAME_CACHE_TTL", "300")),
            max_entries=int(os.getenv("NAME_CACHE_MAX_ENTRIES", "1000")),
            use_redis=os.getenv("NAME_CACHE_BACKEND", "redis").lower() == "redis"
        )


class DatabaseManager:
    """Database connection and initialization manager"""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(self) -> asyncpg.Pool:
        """Initialize database connection pool"""
        try:
            self._pool = await asyncpg.create_pool(
                self.config.asyncpg_url,
                min_size=1,
                max_size=self.config.pool_size,
                command_timeout=self.config.pool_timeout
            )

            # Test connection
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")

            logger.info("Database connection pool initialized successfully")
            return self._pool

        except Exception as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    async def create_tables(self):
        """Create the users, verifications and reports tables if missing"""
        try:
            schema_sql = SCHEMA_FILE.read_text(encoding="utf-8")
            async with self._pool.acquire() as conn:
                await conn.execute(schema_sql)

            logger.info("Database tables and indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create tables: {e}")
            raise

    async def close(self):
        """Close database connection pool"""
        if self._pool:
            await self._pool.close()
            logger.info("Database connection pool closed")

    @property
    def pool(self) -> Optional[asyncpg.Pool]:
        """Get the database pool"""
        return self._pool


class RedisManager:
    """Redis connection manager"""

    def __init__(self, config: RedisConfig):
        self.config = config
        self._client: Optional[Redis] = None

    async def initialize(self) -> Redis:
        """Initialize Redis client"""
        try:
            self._client = redis.from_url(
                self.config.url,
                max_connections=self.config.max_connections,
                socket_timeout=self.config.socket_timeout,
                socket_connect_timeout=self.config.socket_connect_timeout,
                health_check_interval=self.config.health_check_interval,
                decode_responses=True
            )

            # Test connection
            await self._client.ping()

            logger.info("Redis client initialized successfully")
            return self._client

        except Exception as e:
            logger.error(f"Failed to initialize Redis client: {e}")
            raise

    async def close(self):
        """Close Redis connection"""
        if self._client:
            await self._client.close()
            logger.info("Redis client closed")

    @property
    def client(self) -> Optional[Redis]:
        """Get the Redis client"""
        return self._client


class DataManagerFactory:
    """Factory for creating data managers"""

    def __init__(self, config: DataConfig):
        self.config = config
        self.db_manager: Optional[DatabaseManager] = None
        self.redis_manager: Optional[RedisManager] = None

    async def initialize_all(self):
        """Initialize all data managers"""
        self.db_manager = DatabaseManager(self.config.database)
        await self.db_manager.initialize()
        await self.db_manager.create_tables()

        if self.config.cache.use_redis:
            self.redis_manager = RedisManager(self.config.redis)
            await self.redis_manager.initialize()

        logger.info("All data managers initialized successfully")

    async def close_all(self):
        """Close all connections"""
        if self.db_manager:
            await self.db_manager.close()

        if self.redis_manager:
            await self.redis_manager.close()

        logger.info("All data managers closed")

    def get_database_pool(self) -> asyncpg.Pool:
        """Get database connection pool"""
        if not self.db_manager or not self.db_manager.pool:
            raise RuntimeError("Database manager not initialized")
        return self.db_manager.pool

    def get_redis_client(self) -> Optional[Redis]:
        """Get Redis client, None when the in-memory name cache is configured"""
        if not self.redis_manager:
            return None
        return self.redis_manager.client
