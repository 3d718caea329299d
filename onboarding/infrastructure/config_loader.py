"""Config Loader — TTL-cached access to questionnaire, documentation, and gate JSON configs.

Invariants:
    - A cached value is served only while younger than the TTL (default 5 minutes)
    - A failed load caches nothing
    - Cache keys: "questionnaire:<id>", "documentation", "gates"

Design Decisions:
    - ConfigCache is constructed and injected, never a module global: each test gets a
      fresh, resettable instance
    - Clock injected (default time.monotonic): TTL expiry testable without waiting
    - File reads run in a worker thread so the event loop never blocks on disk
"""

import asyncio
import json
import logging
import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from onboarding.core.errors import RecordValidationError, ResourceNotFoundError

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


@dataclass
class _CacheEntry:
    data: Any
    timestamp: float


class ConfigCache:
    """In-memory cache with time-based expiry."""

    def __init__(
        self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    async def get(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for `key`, loading and caching it when stale."""
        cached = self._entries.get(key)
        if cached and self._clock() - cached.timestamp < self.ttl_seconds:
            return cached.data

        data = await loader()
        self._entries[key] = _CacheEntry(data=data, timestamp=self._clock())
        return data

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict:
        return {"size": len(self._entries), "keys": list(self._entries)}


class ConfigLoader:
    """Loads JSON configuration files from `config_dir` through a ConfigCache."""

    def __init__(self, config_dir: Path | str, cache: ConfigCache):
        self.config_dir = Path(config_dir)
        self.cache = cache

    async def load_questionnaire(self, questionnaire_id: str) -> Any:
        if not _SAFE_ID.match(questionnaire_id):
            raise RecordValidationError(
                f"Invalid questionnaire id: {questionnaire_id!r}", "questionnaire_id",
            )
        return await self.cache.get(
            f"questionnaire:{questionnaire_id}",
            lambda: self._read_json(
                Path("questionnaires") / f"{questionnaire_id}.json",
                "Questionnaire", questionnaire_id,
            ),
        )

    async def load_documentation(self) -> Any:
        return await self.cache.get(
            "documentation",
            lambda: self._read_json(
                Path("documentation.json"), "Config", "documentation",
            ),
        )

    async def load_gates(self) -> Any:
        return await self.cache.get(
            "gates",
            lambda: self._read_json(Path("gates.json"), "Config", "gates"),
        )

    async def _read_json(
        self, relative: Path, resource_type: str, resource_id: str,
    ) -> Any:
        path = self.config_dir / relative
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            raise ResourceNotFoundError(resource_type, resource_id)
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error(f"Invalid JSON in config file {path}: {e}")
            raise RecordValidationError(
                f"Config file {relative} is not valid JSON", str(relative),
            ) from e
        logger.debug(f"Loaded config {relative}")
        return data
