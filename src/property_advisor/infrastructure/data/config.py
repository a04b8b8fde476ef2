import os
import logging
from typing import Optional
from dataclasses import dataclass
import redis.asyncio as redis
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


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
class CatalogConfig:
    """Property catalog client settings"""
    base_url: str
    properties_path: str = "/api/properties"
    timeout: float = 10.0

    @property
    def properties_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.properties_path}"


@dataclass
class BehaviorStoreConfig:
    """Behavior store settings"""
    backend: str = "redis"
    file_dir: str = ".behavior"
    key_prefix: str = "behavior:"
    default_key: str = "userBehavior"
    lock_timeout: float = 10.0


@dataclass
class RecommendationSettings:
    default_limit: int = 6
    max_limit: int = 50


class DataConfig:
    """Main data configuration class"""

    def __init__(self):
        self.redis = self._load_redis_config()
        self.catalog = self._load_catalog_config()
        self.behavior = self._load_behavior_config()
        self.recommendations = self._load_recommendation_settings()

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

    def _load_catalog_config(self) -> CatalogConfig:
        """Load property catalog client configuration from environment variables"""
        return CatalogConfig(
            base_url=os.getenv("CATALOG_BASE_URL", "http://localhost:5000"),
            properties_path=os.getenv("CATALOG_PROPERTIES_PATH", "/api/properties"),
            timeout=float(os.getenv("CATALOG_TIMEOUT", "10"))
        )

    def _load_behavior_config(self) -> BehaviorStoreConfig:
        """Load behavior store configuration from environment variables"""
        backend = os.getenv("BEHAVIOR_BACKEND", "redis").lower()
        if backend not in ("redis", "file"):
            raise ValueError(f"Unsupported BEHAVIOR_BACKEND: {backend}")
        return BehaviorStoreConfig(
            backend=backend,
            file_dir=os.getenv("BEHAVIOR_FILE_DIR", ".behavior"),
            key_prefix=os.getenv("BEHAVIOR_KEY_PREFIX", "behavior:"),
            default_key=os.getenv("BEHAVIOR_DEFAULT_KEY", "userBehavior"),
            lock_timeout=float(os.getenv("BEHAVIOR_LOCK_TIMEOUT", "10"))
        )

    def _load_recommendation_settings(self) -> RecommendationSettings:
        return RecommendationSettings(
            default_limit=int(os.getenv("RECOMMENDATION_DEFAULT_LIMIT", "6")),
            max_limit=int(os.getenv("RECOMMENDATION_MAX_LIMIT", "50"))
        )


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
            await self._client.aclose()
            self._client = None
            logger.info("Redis client closed")

    @property
    def client(self) -> Optional[Redis]:
        """Get the Redis client"""
        return self._client
