"""
Durable disk tier.

One JSON file per namespace holding the full entry map. The file is read
wholesale and rewritten wholesale on every mutation; a missing, unreadable or
malformed file reads as an empty map. No error ever leaves this module.
"""

import asyncio
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Dict, Optional

from pydantic import TypeAdapter, ValidationError

from ..models.cache_entry import CacheEntry
from .ttl import is_expired

logger = logging.getLogger(__name__)

_ENTRY = TypeAdapter(CacheEntry)
_ENTRY_MAP = TypeAdapter(Dict[str, CacheEntry])


class DiskStore:
    """
    File-backed key/value map for a single namespace.

    Load-mutate-persist sequences are serialized with an asyncio.Lock, so
    concurrent writers in the same event loop never lose each other's
    updates. Nothing guards against other processes writing the same file.
    """

    def __init__(
        self,
        path: Path,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            path: Namespace file, e.g. ~/.mendicant/embeddings_cache_data.json
            ttl_seconds: Disk-tier TTL applied on read and when persisting
            clock: Source of epoch seconds
        """
        self.path = Path(path)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = asyncio.Lock()

    async def ensure_directory(self) -> bool:
        try:
            await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
            return True
        except OSError as e:
            logger.error(f"Could not create cache directory {self.path.parent}: {e}")
            return False

    async def load(self) -> Dict[str, CacheEntry]:
        """
        Read and parse the whole file.

        Returns:
            Entry map; empty on a missing or corrupt file
        """
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read disk cache {self.path}: {e}")
            return {}

        try:
            return _ENTRY_MAP.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Ignoring corrupt disk cache {self.path} ({e.error_count()} validation errors)"
            )
            return {}

    async def persist(self, entries: Dict[str, CacheEntry]) -> bool:
        """
        Serialize the map and replace the file.

        Entries already past the disk TTL are dropped on the way out, as are
        entries whose value cannot be serialized, so one bad value never
        blocks the rest of the map.

        Returns:
            True if the file was written with every live entry
        """
        now = self._clock()
        live = {
            key: entry for key, entry in entries.items()
            if not is_expired(entry.metadata.updated_at, self.ttl_seconds, now)
        }

        complete = True
        try:
            payload = _ENTRY_MAP.dump_json(live, by_alias=True, indent=2)
        except (ValueError, TypeError):
            # PydanticSerializationError is a ValueError
            live = self._serializable(live)
            complete = False
            payload = _ENTRY_MAP.dump_json(live, by_alias=True, indent=2)

        try:
            await asyncio.to_thread(self._write_atomic, payload)
            return complete
        except OSError as e:
            logger.error(f"Disk cache write failed for {self.path}: {e}", exc_info=True)
            return False

    async def get(self, key: str) -> Optional[CacheEntry]:
        """
        Look up one key, dropping it from disk if it has expired.

        Args:
            key: Cache key

        Returns:
            CacheEntry or None
        """
        async with self._lock:
            entries = await self.load()
            entry = entries.get(key)
            if entry is None:
                return None

            if is_expired(entry.metadata.updated_at, self.ttl_seconds, self._clock()):
                del entries[key]
                await self.persist(entries)
                return None

            return entry

    async def set(self, key: str, entry: CacheEntry) -> bool:
        return await self.set_many({key: entry})

    async def set_many(self, new_entries: Dict[str, CacheEntry]) -> bool:
        """Merge entries into the file in a single rewrite."""
        async with self._lock:
            entries = await self.load()
            entries.update(new_entries)
            return await self.persist(entries)

    async def remove(self, key: str) -> bool:
        async with self._lock:
            entries = await self.load()
            if key not in entries:
                return True
            del entries[key]
            return await self.persist(entries)

    async def replace(self, entries: Dict[str, CacheEntry]) -> bool:
        """Overwrite the file with exactly these entries."""
        async with self._lock:
            return await self.persist(entries)

    async def remove_all(self) -> bool:
        async with self._lock:
            return await self.persist({})

    async def size(self) -> int:
        return len(await self.load())

    def _serializable(self, entries: Dict[str, CacheEntry]) -> Dict[str, CacheEntry]:
        kept: Dict[str, CacheEntry] = {}
        for key, entry in entries.items():
            try:
                _ENTRY.dump_json(entry, by_alias=True)
            except (ValueError, TypeError) as e:
                logger.error(f"Not persisting '{key}' to {self.path}: {e}")
                continue
            kept[key] = entry
        return kept

    def _write_atomic(self, payload: bytes) -> None:
        # Write next to the target, then rename over it
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
