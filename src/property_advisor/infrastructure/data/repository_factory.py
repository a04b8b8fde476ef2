import logging
from typing import Optional

from ...domain.repositories.behavior_repository import BehaviorRepository
from ...domain.repositories.property_repository import PropertyRepository
from ...domain.services.behavior_tracker import BehaviorTracker
from .config import DataConfig, RedisManager
from .repositories.redis_behavior_repository import RedisBehaviorRepository
from .repositories.json_file_behavior_repository import JsonFileBehaviorRepository
from .repositories.http_property_repository import HttpPropertyRepository

logger = logging.getLogger(__name__)


class RepositoryFactory:
    """Factory for creating and managing repository instances"""

    def __init__(self, config: Optional[DataConfig] = None):
        self.config = config or DataConfig()
        self.redis_manager: Optional[RedisManager] = None

        # Repository instances
        self._behavior_repository: Optional[BehaviorRepository] = None
        self._property_repository: Optional[HttpPropertyRepository] = None

        self._initialized = False

    async def initialize(self):
        """Initialize all data connections and repositories"""
        if self._initialized:
            logger.warning("Repository factory already initialized")
            return

        try:
            await self._create_repositories()
            self._initialized = True
            logger.info(f"Repository factory initialized (behavior backend: {self.config.behavior.backend})")

        except Exception as e:
            logger.error(f"Failed to initialize repository factory: {e}")
            raise

    async def _create_repositories(self):
        """Create repository instances"""
        if self.config.behavior.backend == "redis":
            self.redis_manager = RedisManager(self.config.redis)
            redis_client = await self.redis_manager.initialize()
            self._behavior_repository = RedisBehaviorRepository(
                redis_client,
                key_prefix=self.config.behavior.key_prefix,
                lock_timeout=self.config.behavior.lock_timeout
            )
        else:
            self._behavior_repository = JsonFileBehaviorRepository(self.config.behavior.file_dir)

        self._property_repository = HttpPropertyRepository(self.config.catalog)
        await self._property_repository.initialize()

    async def close(self):
        """Close all connections and cleanup"""
        try:
            if self._property_repository:
                await self._property_repository.close()

            if self.redis_manager:
                await self.redis_manager.close()

            self._initialized = False
            logger.info("Repository factory closed successfully")

        except Exception as e:
            logger.error(f"Error closing repository factory: {e}")
            raise

    def get_behavior_repository(self) -> BehaviorRepository:
        """Get behavior repository instance"""
        if not self._initialized or not self._behavior_repository:
            raise RuntimeError("Repository factory not initialized or behavior repository not available")
        return self._behavior_repository

    def get_property_repository(self) -> PropertyRepository:
        """Get property repository instance"""
        if not self._initialized or not self._property_repository:
            raise RuntimeError("Repository factory not initialized or property repository not available")
        return self._property_repository

    def create_behavior_tracker(self, key: Optional[str] = None) -> BehaviorTracker:
        return BehaviorTracker(
            self.get_behavior_repository(),
            key or self.config.behavior.default_key
        )

    async def health_check(self) -> dict:
        """Perform health check on all repositories"""
        health_status = {
            "behavior_store": False,
            "catalog": False,
            "overall": False
        }

        try:
            if self._behavior_repository:
                health_status["behavior_store"] = await self._behavior_repository.health_check()

            if self._property_repository:
                health_status["catalog"] = await self._property_repository.health_check()

            # The catalog is an external collaborator; only the store gates readiness
            health_status["overall"] = health_status["behavior_store"]

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
