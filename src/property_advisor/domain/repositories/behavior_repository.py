import asyncio
import weakref
from abc import ABC, abstractmethod
from typing import AsyncContextManager

from ..entities.user_behavior import UserBehavior


class BehaviorRepository(ABC):
    """Durable storage for behavior histories, one JSON object per key.

    Implementations must return an empty UserBehavior when nothing is
    stored under the key or when the stored payload cannot be parsed.
    """

    @abstractmethod
    async def load(self, key: str) -> UserBehavior:
        pass

    @abstractmethod
    async def save(self, key: str, behavior: UserBehavior) -> bool:
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    def lock(self, key: str) -> AsyncContextManager:
        """Lock held across a load/modify/save cycle on one key.

        The default is an in-process ``asyncio.Lock`` per key, shared by every
        caller of this repository instance.
        """
        key_locks = self.__dict__.get("_key_locks")
        if key_locks is None:
            key_locks = self.__dict__["_key_locks"] = weakref.WeakValueDictionary()

        key_lock = key_locks.get(key)
        if key_lock is None:
            key_lock = asyncio.Lock()
            key_locks[key] = key_lock
        return key_lock
