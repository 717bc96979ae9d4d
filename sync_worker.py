"""
Serializes pushes of the word list to the remote mirror.

The worker keeps a single pending slot: a snapshot submitted while an
earlier one is still waiting replaces it, so at most one push is in flight
and at most one more is queued behind it.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from errors import RemoteSyncError
from remote_mirror import RemoteMirror
from word_store import WordEntry

logger = logging.getLogger(__name__)

STATUS_DISABLED = "disabled"
STATUS_IDLE = "idle"
STATUS_SYNCING = "syncing"
STATUS_SYNCED = "synced"
STATUS_ERROR = "error"


class SyncWorker:
    """
    Word store listener that mirrors every change to the remote document.

    Attributes:
        revision: last known remote sha (None means "fetch before writing")
        ready: False until the remote list has been read once; snapshots
            submitted before that are held, not pushed
        status: one of disabled / idle / syncing / synced / error
        last_error: message of the last failed push, if any
    """

    def __init__(self, mirror: RemoteMirror, revision: Optional[str] = None, ready: bool = True):
        self.mirror = mirror
        self.revision = revision
        self.ready = ready
        self.status = STATUS_IDLE if mirror.enabled else STATUS_DISABLED
        self.last_error: Optional[str] = None

        self._cond = threading.Condition()
        self._pending: Optional[List[WordEntry]] = None
        self._busy = False
        self._thread: Optional[threading.Thread] = None
        self._stopping = False

    @property
    def has_pending(self) -> bool:
        with self._cond:
            return self._pending is not None

    def submit(self, entries: List[WordEntry]) -> None:
        if not self.mirror.enabled:
            return
        with self._cond:
            self._pending = list(entries)
            self._cond.notify_all()

    def retry(self, entries: List[WordEntry]) -> None:
        """Manual retry after a failed push."""
        self.submit(entries)
        self._kick()

    def mark_ready(self, revision: Optional[str], discard_pending: bool = False) -> None:
        """Allow pushes once the remote list has been read."""
        with self._cond:
            self.ready = True
            self.revision = revision
            if discard_pending:
                self._pending = None
            self._cond.notify_all()
        self._kick()

    def _kick(self) -> None:
        if self._thread is None:
            self.drain()

    def drain(self) -> int:
        """
        Push pending snapshots one after another until none is left.

        Returns the number of pushes attempted. Returns 0 straight away if
        another caller is already draining (that caller picks up whatever
        is pending) or while the worker is not ready.
        """
        pushes = 0
        while True:
            with self._cond:
                if self._busy or self._pending is None or not self.ready:
                    return pushes
                entries, self._pending = self._pending, None
                self._busy = True
            try:
                self._push(entries)
                pushes += 1
            finally:
                with self._cond:
                    self._busy = False
                    self._cond.notify_all()

    def _push(self, entries: List[WordEntry]) -> None:
        self.status = STATUS_SYNCING
        try:
            self.revision = self.mirror.push(entries, self.revision)
        except RemoteSyncError as e:
            # the held sha may be stale; the next push asks GitHub again
            self.revision = None
            self.status = STATUS_ERROR
            self.last_error = str(e)
            logger.error("Sync error: %s", e)
            return
        self.status = STATUS_SYNCED
        self.last_error = None

    # -------- background thread --------
    def start(self) -> None:
        if self._thread is not None or not self.mirror.enabled:
            return
        self._stopping = False
        self._thread = threading.Thread(target=self._run, name="word-sync", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is None:
            return
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
        thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while True:
            with self._cond:
                while (self._pending is None or self._busy or not self.ready) and not self._stopping:
                    self._cond.wait()
                if self._stopping:
                    return
            self.drain()
