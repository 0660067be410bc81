"""
History Store - bounded, best-effort log of past explanations.

The whole history is one JSON array stored under a single key in a
machine-local key-value store (the local analogue of browser
localStorage). Entries are prepended on add; when the serialized array
exceeds the budget (~4.5MB) entries are dropped from the tail until it
fits or the list is empty.

Storage failures never escape this module:
- reads fall back to an empty history
- writes are skipped, and add() still returns the entry it built

Usage:
    from explainer.services.history import get_history_store

    store = get_history_store()
    entry = store.add(HistoryDraft(question="...", html="...", ...))
    entries = store.list()
"""

import json
import logging
import re
import time
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from explainer.core.config import settings
from explainer.ai.detail_levels import DetailLevel
from explainer.schemas.explain import CustomStyleSchema

logger = logging.getLogger("explainer.services.history")


# ---------------------------------------------------------------------------
# KEY-VALUE STORAGE
# ---------------------------------------------------------------------------

class StorageQuotaExceeded(Exception):
    """A write would push the storage area past its quota."""


class LocalStorage(Protocol):
    """String key -> string value store. Any method may raise."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryLocalStorage:
    """Process-local storage, mainly for tests."""

    def __init__(self, quota: Optional[int] = None):
        self.quota = quota
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None and len(value) > self.quota:
            raise StorageQuotaExceeded(f"{len(value)} chars exceeds quota of {self.quota}")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]")


class FileLocalStorage:
    """
    One UTF-8 file per key inside a directory.

    The directory is created lazily on first write.
    """

    def __init__(self, directory: Union[str, Path], quota: Optional[int] = None):
        self.directory = Path(directory).expanduser()
        self.quota = quota

    def _path(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY.sub('_', key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None and len(value) > self.quota:
            raise StorageQuotaExceeded(f"{len(value)} chars exceeds quota of {self.quota}")
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# ENTRIES
# ---------------------------------------------------------------------------

class HistoryDraft(BaseModel):
    """What the caller supplies; id and html_size are assigned on add."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question: str
    html: str
    preview_text: str = ""
    preset_name: str
    custom_style: Optional[CustomStyleSchema] = None
    detail_level: Optional[DetailLevel] = None
    # Milliseconds since the epoch
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000))


class HistoryEntry(HistoryDraft):
    id: str
    html_size: int


def serialize_entries(entries: List[HistoryEntry]) -> str:
    """Compact JSON with camelCase keys, as stored."""
    return json.dumps(
        [e.model_dump(mode="json", by_alias=True, exclude_none=True) for e in entries],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def enforce_storage_budget(entries: List[HistoryEntry], max_bytes: int) -> List[HistoryEntry]:
    """
    Drop entries from the end of the list until the serialized size fits.

    The input list is not modified.
    """
    result = list(entries)
    serialized = serialize_entries(result)
    while len(serialized) > max_bytes and result:
        result.pop()
        serialized = serialize_entries(result)
    return result


# ---------------------------------------------------------------------------
# HISTORY STORE
# ---------------------------------------------------------------------------

class HistoryStore:
    """Best-effort history over one storage key."""

    def __init__(
        self,
        storage: LocalStorage,
        key: Optional[str] = None,
        max_bytes: Optional[int] = None,
    ):
        self._storage = storage
        self.key = key or settings.HISTORY_STORAGE_KEY
        self.max_bytes = max_bytes if max_bytes is not None else settings.HISTORY_MAX_BYTES

    def list(self) -> List[HistoryEntry]:
        """
        All entries, newest first.

        Empty on any read or parse failure; entries that fail validation are
        skipped individually so the rest survive the next write.
        """
        try:
            raw = self._storage.get_item(self.key)
            if not raw:
                return []
            items = json.loads(raw)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"History unreadable, treating as empty: {e}")
            return []
        if not isinstance(items, list):
            logger.warning(f"History is not a list ({type(items).__name__}), treating as empty")
            return []

        entries = []
        for item in items:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid history entry: {e.error_count()} error(s)")
        return sorted(entries, key=lambda e: e.timestamp, reverse=True)

    def add(self, draft: HistoryDraft) -> HistoryEntry:
        """
        Record a result. Returns the entry even when it could not be saved.
        """
        entry = HistoryEntry(
            **draft.model_dump(),
            id=str(uuid.uuid4()),
            html_size=len(draft.html),
        )

        try:
            entries = self.list()
            entries.insert(0, entry)
            trimmed = enforce_storage_budget(entries, self.max_bytes)
            if len(trimmed) < len(entries):
                logger.info(f"History over budget, evicted {len(entries) - len(trimmed)} oldest entries")
            self._storage.set_item(self.key, serialize_entries(trimmed))
        except Exception as e:
            logger.warning(f"History write failed, entry kept in memory only: {e}")

        return entry

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self.list():
            if entry.id == entry_id:
                return entry
        return None

    def delete(self, entry_id: str) -> None:
        try:
            entries = [e for e in self.list() if e.id != entry_id]
            self._storage.set_item(self.key, serialize_entries(entries))
        except Exception as e:
            logger.warning(f"History delete failed: {e}")

    def clear(self) -> None:
        try:
            self._storage.remove_item(self.key)
        except Exception as e:
            logger.warning(f"History clear failed: {e}")

    def usage(self) -> Dict[str, int]:
        """{"used": chars stored, "total": budget, "entryCount": entries}"""
        try:
            raw = self._storage.get_item(self.key)
            used = len(raw) if raw else 0
            count = len(json.loads(raw)) if raw else 0
        except (OSError, ValueError, TypeError) as e:
            logger.debug(f"History usage unavailable: {e}")
            used, count = 0, 0
        return {"used": used, "total": self.max_bytes, "entryCount": count}


# ---------------------------------------------------------------------------
# RELATIVE TIME
# ---------------------------------------------------------------------------

# Phrases used instead of "1 <unit> ago" / "in 1 <unit>"
_NAMED_OFFSETS = {
    ("second", 0): "now",
    ("day", -1): "yesterday",
    ("day", 1): "tomorrow",
    ("month", -1): "last month",
    ("month", 1): "next month",
    ("year", -1): "last year",
    ("year", 1): "next year",
}


def _format_offset(value: int, unit: str) -> str:
    named = _NAMED_OFFSETS.get((unit, value))
    if named:
        return named
    count = abs(value)
    label = unit if count == 1 else f"{unit}s"
    return f"{count} {label} ago" if value < 0 else f"in {count} {label}"


def format_relative_time(timestamp: int, now: Optional[int] = None) -> str:
    """
    Human phrase for a millisecond timestamp relative to ``now`` (ms).

    Thresholds: seconds < 60, minutes < 60, hours < 24, days < 30,
    30-day months < 12, then 365-day years.
    """
    if now is None:
        now = int(time.time() * 1000)

    # Negative for the past
    sign = -1 if timestamp <= now else 1
    seconds = abs(now - timestamp) // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return _format_offset(sign * seconds, "second")
    if minutes < 60:
        return _format_offset(sign * minutes, "minute")
    if hours < 24:
        return _format_offset(sign * hours, "hour")
    if days < 30:
        return _format_offset(sign * days, "day")

    months = days // 30
    if months < 12:
        return _format_offset(sign * months, "month")

    return _format_offset(sign * max(1, days // 365), "year")


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------

_history_store: Optional[HistoryStore] = None


def get_history_store() -> HistoryStore:
    """Get or create the store backed by HISTORY_DIR."""
    global _history_store
    if _history_store is None:
        _history_store = HistoryStore(FileLocalStorage(settings.HISTORY_DIR))
    return _history_store
