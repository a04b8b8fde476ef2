import asyncio
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from ....domain.entities.user_behavior import UserBehavior
from ....domain.repositories.behavior_repository import BehaviorRepository


class JsonFileBehaviorRepository(BehaviorRepository):
    """Behavior store kept as one JSON file per key inside a directory"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.logger = logging.getLogger(__name__)

    def path_for(self, key: str) -> Path:
        # Hashed so distinct keys never share a file and any key is a valid name
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    async def load(self, key: str) -> UserBehavior:
        return await asyncio.to_thread(self._load_sync, key)

    async def save(self, key: str, behavior: UserBehavior) -> bool:
        return await asyncio.to_thread(self._save_sync, key, behavior)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete_sync, key)

    async def health_check(self) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            return os.access(self.directory, os.W_OK)
        except OSError as e:
            self.logger.error(f"Behavior directory {self.directory} is not usable: {e}")
            return False

    def _load_sync(self, key: str) -> UserBehavior:
        path = self.path_for(key)
        if not path.exists():
            self.logger.debug(f"No stored behavior for key: {key}")
            return UserBehavior.empty()

        try:
            with open(path, "r", encoding="utf-8") as f:
                return UserBehavior.from_dict(json.load(f))
        except (OSError, ValueError) as e:
            self.logger.warning(f"Discarding unreadable behavior file {path}: {e}")
            return UserBehavior.empty()

    def _save_sync(self, key: str, behavior: UserBehavior) -> bool:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Atomic replace via a sibling temp file
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(behavior.to_dict(), f)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
            self.logger.debug(f"Saved behavior for key: {key}")
            return True
        except OSError as e:
            self.logger.error(f"Failed to save behavior for {key}: {e}")
            return False

    def _delete_sync(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            self.logger.error(f"Failed to delete behavior for {key}: {e}")
            return False
