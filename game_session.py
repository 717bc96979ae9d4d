"""
Game session: one picture, one word, letter slots filled left to right.

    EMPTY    no playable word for the current filter
    ACTIVE   a word is shown, some slots may be filled
    RESOLVED every slot is filled; a scheduled callback either starts a
             new round (correct) or clears the slots (wrong)
"""

from __future__ import annotations

import enum
import functools
import logging
import random
import threading
from typing import Callable, List, Optional, Tuple

from config import FAILURE_DELAY, SUCCESS_DELAY
from word_store import ALL_CATEGORIES, WordEntry, WordStore

logger = logging.getLogger(__name__)

MSG_NO_WORDS = "Add some words in settings first."
MSG_CORRECT = "✅ Correct!"
MSG_TRY_AGAIN = "❌ Try again!"


class State(enum.Enum):
    EMPTY = "empty"
    ACTIVE = "active"
    RESOLVED = "resolved"


class Outcome(enum.Enum):
    IGNORED = "ignored"
    FILLED = "filled"
    CORRECT = "correct"
    WRONG = "wrong"


# ── schedulers ───────────────────────────────────────────────────────────

class ThreadScheduler:
    """Runs callbacks on a timer thread."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()


class ManualScheduler:
    """Collects callbacks and runs them when asked (tests, Streamlit reruns)."""

    def __init__(self):
        self.pending: List[Tuple[float, Callable[[], None]]] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        self.pending.append((delay, callback))

    @property
    def next_delay(self) -> Optional[float]:
        return self.pending[0][0] if self.pending else None

    def run_pending(self) -> int:
        ran = 0
        while self.pending:
            _, callback = self.pending.pop(0)
            callback()
            ran += 1
        return ran


# ── session ──────────────────────────────────────────────────────────────

class GameSession:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        scheduler=None,
        success_delay: float = SUCCESS_DELAY,
        failure_delay: float = FAILURE_DELAY,
    ):
        self.rng = rng or random.Random()
        self.scheduler = scheduler or ThreadScheduler()
        self.success_delay = success_delay
        self.failure_delay = failure_delay

        self.state = State.EMPTY
        self.current_word: Optional[WordEntry] = None
        self.slots: List[str] = []
        self.category_filter = ALL_CATEGORIES
        self.message = ""
        self.round = 0
        self._store: Optional[WordStore] = None

    @property
    def hint(self) -> str:
        return self.current_word.word[0] if self.current_word else ""

    @property
    def guess(self) -> str:
        return "".join(self.slots)

    def start(self, store: WordStore, category_filter: Optional[str] = None) -> Optional[WordEntry]:
        """Pick a random word from the playable set and reset the slots."""
        self._store = store
        self.round += 1
        if category_filter is not None:
            self.category_filter = category_filter

        playable = store.filter(self.category_filter)
        if not playable:
            self.state = State.EMPTY
            self.current_word = None
            self.slots = []
            self.message = ""
            return None

        self.current_word = playable[self.rng.randrange(len(playable))]
        self.slots = [""] * len(self.current_word.word)
        self.state = State.ACTIVE
        self.message = ""
        logger.debug("New round: %s", self.current_word.word)
        return self.current_word

    def submit_letter(self, letter: str) -> Outcome:
        if self.state is State.EMPTY:
            self.message = MSG_NO_WORDS
            return Outcome.IGNORED
        if self.state is not State.ACTIVE or "" not in self.slots:
            return Outcome.IGNORED

        index = self.slots.index("")
        self.slots[index] = letter.upper()
        if "" in self.slots:
            return Outcome.FILLED

        self.state = State.RESOLVED
        if self.guess == self.current_word.word:
            self.message = MSG_CORRECT
            self.scheduler.schedule(self.success_delay, functools.partial(self._next_round, self.round))
            return Outcome.CORRECT

        self.message = MSG_TRY_AGAIN
        self.scheduler.schedule(self.failure_delay, functools.partial(self._clear_slots, self.round))
        return Outcome.WRONG

    def _still_resolved(self, round_: int) -> bool:
        # a filter change or delete may have started another round meanwhile
        return self.round == round_ and self.state is State.RESOLVED

    def _next_round(self, round_: int) -> None:
        if self._store is not None and self._still_resolved(round_):
            self.start(self._store)

    def _clear_slots(self, round_: int) -> None:
        if not self._still_resolved(round_):
            return
        self.slots = [""] * len(self.slots)
        self.state = State.ACTIVE
        self.message = ""
