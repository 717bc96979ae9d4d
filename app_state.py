"""
Application state: everything the pages need.

The word store, mirror and sync worker are built once per process and
shared; each browser session gets its own GameSession via new_session().

Start-up order is fixed: load the local word list, pull the remote copy
(when configured) and let a non-empty remote list win, wire the sync
worker to the store, then start the first round.
"""

from __future__ import annotations

import logging
import random
import time
from typing import List, Optional, Tuple

import requests

from config import Settings
from errors import ValidationError
from game_session import GameSession, Outcome
from images import bytes_to_data_uri, fetch_image
from remote_mirror import RemoteMirror
from sync_worker import STATUS_ERROR, STATUS_IDLE, SyncWorker
from word_store import ALL_CATEGORIES, LocalStorage, WordEntry, WordStore

logger = logging.getLogger(__name__)


def merge_remote(store: WordStore, mirror: RemoteMirror) -> Tuple[bool, Optional[str], bool]:
    """
    Pull the remote list; a non-empty one replaces the local list.

    Returns (pulled, revision, replaced). `pulled` is False when the remote
    could not be read, in which case the local list stays as it is.
    """
    remote, revision = mirror.pull()
    if remote:
        logger.info("Using remote word list (%d words)", len(remote))
        store.replace(remote)
        return True, revision, True
    if remote is not None:
        logger.info("Remote word list is empty, keeping %d local words", len(store))
        return True, revision, False
    # a document that is not a word list may still be overwritten
    return revision is not None, revision, False


class AppState:
    def __init__(
        self,
        settings: Settings,
        store: WordStore,
        mirror: RemoteMirror,
        sync: SyncWorker,
        session: Optional[GameSession],
        http: Optional[requests.Session] = None,
    ):
        self.settings = settings
        self.store = store
        self.mirror = mirror
        self.sync = sync
        self.session = session
        self.http = http

    @classmethod
    def bootstrap(
        cls,
        settings: Settings,
        *,
        http: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
        scheduler=None,
        clock=None,
        background_sync: bool = True,
    ) -> "AppState":
        storage = LocalStorage(settings.storage_path)
        store = WordStore(storage, clock=clock or time.time)
        store.load()

        mirror = RemoteMirror(settings, session=http)
        pulled, revision = True, None
        if mirror.enabled:
            pulled, revision, _ = merge_remote(store, mirror)

        # until the remote list has been read, local edits wait instead of
        # overwriting it
        sync = SyncWorker(mirror, revision=revision, ready=pulled)
        store.subscribe(sync.submit)
        if background_sync:
            sync.start()

        shared = cls(settings, store, mirror, sync, None, http=http)
        return shared.new_session(rng=rng, scheduler=scheduler)

    def new_session(self, rng: Optional[random.Random] = None, scheduler=None) -> "AppState":
        """Another player on the same words: shares store and sync, own game."""
        session = GameSession(
            rng=rng,
            scheduler=scheduler,
            success_delay=self.settings.success_delay,
            failure_delay=self.settings.failure_delay,
        )
        session.start(self.store, ALL_CATEGORIES)
        return AppState(self.settings, self.store, self.mirror, self.sync, session, http=self.http)

    # -------- words --------
    def add_word(self, word: str, category: str, image: str) -> WordEntry:
        entry = self.store.add(word, category, image)
        self._refresh_filter()
        if self.session.current_word is None:
            self.session.start(self.store)
        return entry

    def add_word_from_upload(self, word: str, category: str, data: Optional[bytes], content_type: Optional[str]) -> WordEntry:
        if not (word or "").strip() or not data:
            raise ValidationError("Please enter a WORD and choose an IMAGE.")
        return self.add_word(word, category, bytes_to_data_uri(data, content_type))

    def add_word_from_url(self, word: str, category: str, url: str) -> WordEntry:
        if not (word or "").strip() or not (url or "").strip():
            raise ValidationError("Please enter a WORD and an IMAGE URL.")
        image = fetch_image(url, session=self.http, timeout=self.settings.http_timeout)
        return self.add_word(word, category, image)

    def delete_word(self, word_id: int) -> None:
        self.store.remove(word_id)
        self._refresh_filter()
        self.session.start(self.store)

    @property
    def words(self) -> List[WordEntry]:
        return self.store.entries

    # -------- filter --------
    def category_choices(self) -> List[str]:
        return [ALL_CATEGORIES] + self.store.categories()

    def set_filter(self, category: str) -> None:
        category = (category or ALL_CATEGORIES).strip().upper()
        if category not in self.category_choices():
            category = ALL_CATEGORIES
        self.session.start(self.store, category)

    def refresh(self) -> None:
        """Catch up with words added or removed by another session."""
        self._refresh_filter()
        current = self.session.current_word
        if current is not None and current not in self.store.entries:
            self.session.start(self.store)
        elif current is None and self.store.filter(self.session.category_filter):
            self.session.start(self.store)

    def _refresh_filter(self) -> None:
        # keep the chosen category while it still has words
        if self.session.category_filter not in self.category_choices():
            self.session.category_filter = ALL_CATEGORIES

    # -------- play --------
    def submit_letter(self, letter: str) -> Outcome:
        return self.session.submit_letter(letter)

    # -------- sync --------
    @property
    def sync_status(self) -> str:
        # a failed start-up pull shows up before any push has run
        if self.sync.status == STATUS_IDLE and self.mirror.status == STATUS_ERROR:
            return STATUS_ERROR
        return self.sync.status

    def retry_sync(self) -> None:
        """
        Manual retry. If the remote list was never read, read it first and
        merge it the way start-up does; otherwise push the local list again.
        """
        if self.sync.ready:
            self.sync.retry(self.store.entries)
            return

        pulled, revision, replaced = merge_remote(self.store, self.mirror)
        if not pulled:
            return
        # edits held while offline lose to a non-empty remote list
        self.sync.mark_ready(revision, discard_pending=replaced)
        if replaced:
            self._refresh_filter()
            self.session.start(self.store)
