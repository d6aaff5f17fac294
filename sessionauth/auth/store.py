"""
Credential store.

Three durable record collections (users, OTP challenges, active refresh
tokens), each persisted as a whole: every write replaces the full
collection. Stores JSON files for simplicity; anything implementing
load_all/replace_all can stand in for a transactional backend without
changes to the services above.

Concurrency: there is no locking. Each derived operation (append, update,
remove) re-reads the collection right before writing it back, which narrows
but does not close the lost-update window between concurrent requests. Two
requests that both read before either writes will race and the last write
wins. Per-key locks or a transactional store are the upgrade path.
"""

import asyncio
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Callable, List, Optional
from dataclasses import dataclass

from ..errors import StoreError

logger = logging.getLogger(__name__)

USERS_FILE = "users.json"
OTPS_FILE = "otps.json"
REFRESH_TOKENS_FILE = "refresh_tokens.json"

DEFAULT_TIMEOUT_SECONDS = 5.0

Predicate = Callable[[Any], bool]


class RecordCollection:
    """
    Base class for a full-replace-on-write record collection.

    Subclasses implement load_all() and replace_all(); the derived
    operations are built on those two.
    """

    name: str = "collection"

    async def load_all(self) -> List[Any]:
        raise NotImplementedError

    async def replace_all(self, records: List[Any]) -> None:
        raise NotImplementedError

    async def append(self, record: Any) -> None:
        """Append one record."""
        records = await self.load_all()
        records.append(record)
        await self.replace_all(records)

    async def update(self, predicate: Predicate, mutate: Callable[[Any], Any]) -> int:
        """
        Replace every record matching predicate with mutate(record).

        Returns:
            Number of records updated (nothing is written when zero)
        """
        records = await self.load_all()
        updated = 0
        for i, record in enumerate(records):
            if predicate(record):
                records[i] = mutate(record)
                updated += 1

        if updated:
            await self.replace_all(records)
        return updated

    async def remove(self, predicate: Predicate, first_only: bool = False) -> int:
        """
        Remove records matching predicate.

        Args:
            predicate: Match function
            first_only: Stop after the first match in scan order

        Returns:
            Number of records removed (nothing is written when zero)
        """
        records = await self.load_all()
        kept = []
        removed = 0
        for record in records:
            if predicate(record) and not (first_only and removed):
                removed += 1
                continue
            kept.append(record)

        if removed:
            await self.replace_all(kept)
        return removed

    async def find_first(self, predicate: Predicate) -> Optional[Any]:
        """Return the first matching record in scan order."""
        for record in await self.load_all():
            if predicate(record):
                return record
        return None


class MemoryCollection(RecordCollection):
    """In-process collection. Copies on read and write like the file store."""

    def __init__(self, name: str = "memory", records: Optional[List[Any]] = None):
        self.name = name
        self._records = json.loads(json.dumps(records or []))

    async def load_all(self) -> List[Any]:
        return json.loads(json.dumps(self._records))

    async def replace_all(self, records: List[Any]) -> None:
        self._records = json.loads(json.dumps(records))


class JsonFileCollection(RecordCollection):
    """
    JSON array file collection.

    A missing file is an empty collection. A corrupt file is logged and
    treated as empty; it is rewritten on the next save. Blocking file I/O
    runs in a worker thread and is bounded by timeout_seconds.
    """

    def __init__(self, file_path: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.file_path = Path(file_path)
        self.name = self.file_path.name
        self.timeout_seconds = timeout_seconds

    def _load_sync(self) -> List[Any]:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"File {self.name} is corrupt. Initializing with empty collection.")
            return []

        if not isinstance(data, list):
            logger.warning(f"File {self.name} does not hold a list. Initializing with empty collection.")
            return []
        return data

    def _save_sync(self, records: List[Any]):
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_name(f".{self.name}.{uuid.uuid4().hex}.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.file_path)
        logger.debug(f"Data written to {self.name}")

    async def _run(self, func, *args):
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise StoreError(f"Timed out accessing {self.name}") from e
        except OSError as e:
            raise StoreError(f"Failed to access {self.name}") from e

    async def load_all(self) -> List[Any]:
        return await self._run(self._load_sync)

    async def replace_all(self, records: List[Any]) -> None:
        await self._run(self._save_sync, list(records))


@dataclass
class CredentialStore:
    """The three record collections shared by every service."""
    users: RecordCollection
    otps: RecordCollection
    refresh_tokens: RecordCollection

    @classmethod
    def open(cls, data_dir: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> "CredentialStore":
        """Open (or lazily create) the JSON collections under data_dir."""
        data_dir = Path(data_dir)
        return cls(
            users=JsonFileCollection(data_dir / USERS_FILE, timeout_seconds),
            otps=JsonFileCollection(data_dir / OTPS_FILE, timeout_seconds),
            refresh_tokens=JsonFileCollection(data_dir / REFRESH_TOKENS_FILE, timeout_seconds)
        )

    @classmethod
    def in_memory(cls) -> "CredentialStore":
        return cls(
            users=MemoryCollection("users"),
            otps=MemoryCollection("otps"),
            refresh_tokens=MemoryCollection("refresh_tokens")
        )
