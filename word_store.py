"""
Word store: the caregiver's custom word/picture entries.

Entries live in memory in insertion order and are written in full to a
local JSON file after every mutation. The file holds one JSON array and
its name is the storage key; there is no other versioning.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "GENERAL"
ALL_CATEGORIES = "ALL"


class WordEntry(BaseModel):
    """One word with its picture. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    word: str
    category: str = DEFAULT_CATEGORY
    image: str = Field(alias="imageData")

    @field_validator("word", mode="before")
    @classmethod
    def _normalize_word(cls, value):
        word = str(value or "").strip().upper()
        if not word:
            raise ValueError("word must not be empty")
        return word

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value):
        return str(value or "").strip().upper() or DEFAULT_CATEGORY

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


_ENTRY_LIST = TypeAdapter(List[WordEntry])


def parse_entries(data) -> List[WordEntry]:
    """
    Parse a decoded JSON value (or a JSON string) into entries.

    Raises:
        ValueError: if the value is not a list of valid entries or ids repeat.
    """
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    entries = _ENTRY_LIST.validate_python(data)
    seen = set()
    for entry in entries:
        if entry.id in seen:
            raise ValueError(f"duplicate word id {entry.id}")
        seen.add(entry.id)
    return entries


def dump_entries(entries: Iterable[WordEntry]) -> str:
    """Deterministic JSON text for a collection."""
    return json.dumps(
        [entry.to_record() for entry in entries],
        ensure_ascii=False,
        separators=(",", ":"),
    )


# ── durable local storage ────────────────────────────────────────────────

class LocalStorage:
    """A single JSON value kept in a file, replaced atomically on write."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


# ── store ────────────────────────────────────────────────────────────────

class WordStore:
    """
    Ordered collection of WordEntry backed by LocalStorage.

    Listeners registered with subscribe() receive a snapshot (a new list)
    after every add/remove; the remote sync worker is the usual listener.
    One store is shared by every browser session, so mutations and their
    events run under a lock and snapshots go out in mutation order.
    """

    def __init__(self, storage: LocalStorage, clock: Callable[[], float] = time.time):
        self.storage = storage
        self._clock = clock
        self._entries: List[WordEntry] = []
        self._listeners: List[Callable[[List[WordEntry]], None]] = []
        self._last_id = 0
        self._lock = threading.RLock()

    @property
    def entries(self) -> List[WordEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    # -------- persistence --------
    def load(self) -> List[WordEntry]:
        """Read the local file; missing or malformed data gives an empty collection."""
        try:
            raw = self.storage.read()
            entries = parse_entries(raw) if raw else []
        except (OSError, ValueError) as e:
            logger.error("Error loading words from %s: %s", self.storage.path, e)
            entries = []

        with self._lock:
            self._entries = entries
            self._last_id = max((e.id for e in entries), default=0)
        logger.info("Loaded %d words from %s", len(entries), self.storage.path)
        return self.entries

    def save(self, entries: Optional[Iterable[WordEntry]] = None) -> None:
        """Write the whole collection; failures are logged, never raised."""
        with self._lock:
            if entries is not None:
                self._entries = list(entries)
            try:
                self.storage.write(dump_entries(self._entries))
            except OSError as e:
                logger.error("Error saving words to %s: %s", self.storage.path, e)

    def replace(self, entries: Iterable[WordEntry]) -> None:
        """Swap in a collection from elsewhere (remote merge). No change event."""
        with self._lock:
            self.save(entries)
            self._last_id = max([self._last_id] + [e.id for e in self._entries])

    # -------- mutation --------
    def _next_id(self) -> int:
        now = int(self._clock() * 1000)
        self._last_id = max(now, self._last_id + 1)
        return self._last_id

    def add(self, word: str, category: str, image: str) -> WordEntry:
        if not (word or "").strip():
            raise ValidationError("Please enter a WORD.")
        if not image:
            raise ValidationError("Please choose an IMAGE.")

        with self._lock:
            entry = WordEntry(id=self._next_id(), word=word, category=category, image=image)
            self._entries.append(entry)
            self.save()
            logger.info("Added word %s (%s)", entry.word, entry.category)
            self._emit()
        return entry

    def remove(self, word_id: int) -> None:
        with self._lock:
            remaining = [e for e in self._entries if e.id != word_id]
            if len(remaining) == len(self._entries):
                return
            self._entries = remaining
            self.save()
            logger.info("Removed word id %s", word_id)
            self._emit()

    # -------- queries --------
    def filter(self, category: str = ALL_CATEGORIES) -> List[WordEntry]:
        wanted = (category or ALL_CATEGORIES).strip().upper()
        if wanted == ALL_CATEGORIES:
            return self.entries
        return [e for e in self._entries if e.category.upper() == wanted]

    def categories(self) -> List[str]:
        return sorted({e.category for e in self._entries})

    # -------- events --------
    def subscribe(self, callback: Callable[[List[WordEntry]], None]) -> None:
        self._listeners.append(callback)

    def _emit(self) -> None:
        for callback in self._listeners:
            callback(self.entries)
