import logging
from typing import Any, Dict, List, Optional

from ..entities.user_behavior import UserBehavior
from ..repositories.behavior_repository import BehaviorRepository

logger = logging.getLogger(__name__)

DEFAULT_BEHAVIOR_KEY = "userBehavior"


class BehaviorTracker:
    """In-memory behavior history for one storage key, written through on every change.

    The caller owns the tracker: ``load()`` at session start, then every
    ``track()`` mutates the held behavior and persists the whole object.
    """

    def __init__(self, repository: BehaviorRepository, key: str = DEFAULT_BEHAVIOR_KEY):
        self.repository = repository
        self.key = key
        self._behavior: Optional[UserBehavior] = None

    @property
    def behavior(self) -> UserBehavior:
        if self._behavior is None:
            self._behavior = UserBehavior.empty()
        return self._behavior

    @property
    def is_loaded(self) -> bool:
        return self._behavior is not None

    async def load(self) -> UserBehavior:
        self._behavior = await self.repository.load(self.key)
        logger.debug(f"Loaded behavior for {self.key}: {self._behavior.count_data_points()} data points")
        return self._behavior

    async def save(self) -> bool:
        saved = await self.repository.save(self.key, self.behavior)
        if not saved:
            logger.warning(f"Behavior for {self.key} was not persisted")
        return saved

    async def track(self, action: str, data: Dict[str, Any]) -> UserBehavior:
        """Record an action and persist the full behavior object.

        The stored history is re-read under the key's lock so concurrent
        writers on the same key never drop each other's actions.
        """
        async with self.repository.lock(self.key):
            await self.load()
            self.behavior.record(action, data)
            await self.save()
        return self.behavior

    async def set_preferences(self, location_preferences: List[str] = None,
                              property_type_preferences: List[str] = None) -> UserBehavior:
        async with self.repository.lock(self.key):
            await self.load()
            self.behavior.set_preferences(location_preferences, property_type_preferences)
            await self.save()
        return self.behavior

    async def clear(self) -> bool:
        async with self.repository.lock(self.key):
            self._behavior = UserBehavior.empty()
            return await self.repository.delete(self.key)
