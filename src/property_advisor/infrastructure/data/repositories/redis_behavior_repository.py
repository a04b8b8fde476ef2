import json
import logging
from redis.asyncio import Redis

from ....domain.entities.user_behavior import UserBehavior
from ....domain.repositories.behavior_repository import BehaviorRepository


class RedisBehaviorRepository(BehaviorRepository):
    """Redis-backed behavior store, one JSON string per key"""

    def __init__(self, redis_client: Redis, key_prefix: str = "behavior:", lock_timeout: float = 10.0):
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.lock_timeout = lock_timeout
        self.logger = logging.getLogger(__name__)

    def _full_key(self, key: str) -> str:
        return self.key_prefix + key

    def lock(self, key: str):
        """Distributed lock so API workers in other processes serialize too"""
        return self.redis.lock(
            "lock:" + self._full_key(key),
            timeout=self.lock_timeout,
            blocking_timeout=self.lock_timeout
        )

    async def load(self, key: str) -> UserBehavior:
        """Load behavior, falling back to an empty history on any failure"""
        try:
            cached_data = await self.redis.get(self._full_key(key))
        except Exception as e:
            self.logger.error(f"Failed to load behavior for {key}: {e}")
            return UserBehavior.empty()

        if not cached_data:
            self.logger.debug(f"No stored behavior for key: {key}")
            return UserBehavior.empty()

        try:
            if isinstance(cached_data, bytes):
                cached_data = cached_data.decode("utf-8")
            return UserBehavior.from_dict(json.loads(cached_data))
        except (ValueError, UnicodeDecodeError) as e:
            self.logger.warning(f"Discarding corrupt behavior for {key}: {e}")
            return UserBehavior.empty()

    async def save(self, key: str, behavior: UserBehavior) -> bool:
        try:
            serialized_data = json.dumps(behavior.to_dict())
            success = await self.redis.set(self._full_key(key), serialized_data)

            if success:
                self.logger.debug(f"Saved behavior for key: {key}")
                return True
            else:
                self.logger.warning(f"Failed to save behavior for key: {key}")
                return False

        except Exception as e:
            self.logger.error(f"Failed to save behavior for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            deleted_count = await self.redis.delete(self._full_key(key))
            return deleted_count > 0
        except Exception as e:
            self.logger.error(f"Failed to delete behavior for {key}: {e}")
            return False

    async def health_check(self) -> bool:
        """Check Redis connection health"""
        try:
            await self.redis.ping()
            return True
        except Exception as e:
            self.logger.error(f"Redis health check failed: {e}")
            return False
