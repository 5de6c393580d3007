"""JSON-file registries of known chats and seen users.

Each registry keeps its snapshot in memory and rewrites the whole file on
every change. A missing file is an empty registry.
"""

import asyncio
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Protocol

from ..errors import PersistenceError
from ..logging_config import get_logger
from ..models import User, UserProfile

logger = get_logger(__name__)


def read_json_array(path: Path) -> list:
    """Read a JSON array file; missing or malformed files read as empty."""
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Failed to read registry file %s: %s", path, e)
        return []
    return data if isinstance(data, list) else []


def write_json_array(path: Path, items: list) -> None:
    """Overwrite `path` with `items` as a JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(items, f, ensure_ascii=False, indent=2)
    os.replace(tmp_path, path)


class IChatRegistry(Protocol):
    """Chats the assistant has joined."""

    async def mark_known(self, chat_id: str) -> bool:
        """Add a chat; returns True if it was not known before."""
        ...

    async def load_all(self) -> set[str]:
        ...


class IUserRegistry(Protocol):
    """Last-known profiles of users."""

    async def upsert(self, user: User, seen_at: datetime | None = None) -> UserProfile:
        ...

    async def load_all(self) -> list[UserProfile]:
        ...


class ChatRegistry:
    """Set of chat ids persisted as a JSON array of strings."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._chats: set[str] | None = None
        self._lock = asyncio.Lock()

    async def _ensure_loaded(self) -> set[str]:
        if self._chats is None:
            items = await asyncio.to_thread(read_json_array, self._path)
            self._chats = {str(item) for item in items}
        return self._chats

    async def mark_known(self, chat_id: str) -> bool:
        async with self._lock:
            chats = await self._ensure_loaded()
            if chat_id in chats:
                return False
            chats.add(chat_id)
            try:
                await asyncio.to_thread(write_json_array, self._path, sorted(chats))
            except OSError as e:
                raise PersistenceError(f"Failed to save chat {chat_id}: {e}") from e
            logger.info("Chat %s added to registry", chat_id)
            return True

    async def load_all(self) -> set[str]:
        async with self._lock:
            return set(await self._ensure_loaded())


class UserRegistry:
    """User profiles persisted as a JSON array of objects."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._users: dict[int, UserProfile] | None = None
        self._lock = asyncio.Lock()

    async def _ensure_loaded(self) -> dict[int, UserProfile]:
        if self._users is None:
            items = await asyncio.to_thread(read_json_array, self._path)
            users: dict[int, UserProfile] = {}
            for item in items:
                try:
                    profile = UserProfile.from_dict(item)
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning("Skipping malformed user record %r: %s", item, e)
                    continue
                users[profile.id] = profile
            self._users = users
        return self._users

    async def upsert(self, user: User, seen_at: datetime | None = None) -> UserProfile:
        profile = UserProfile.from_user(user, seen_at)
        async with self._lock:
            users = await self._ensure_loaded()
            users[profile.id] = profile
            items = [p.to_dict() for p in users.values()]
            try:
                await asyncio.to_thread(write_json_array, self._path, items)
            except OSError as e:
                raise PersistenceError(f"Failed to save user {user.id}: {e}") from e
        return profile

    async def load_all(self) -> list[UserProfile]:
        async with self._lock:
            return list((await self._ensure_loaded()).values())
