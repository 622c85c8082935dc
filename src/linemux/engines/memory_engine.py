# linemux/engines/memory_engine.py
from __future__ import annotations
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional, Union

from ..completion import word_start
from ..models import CompletionResult
from .. import config as CFG
from .api import CompleteHook, HistoryState, LineEngine, WordBreakHook, truncate_history_file

# an input item is a line, None (end-of-input) or a callable producing either;
# callables run while the engine is reading, i.e. under the context lock
Scripted = Union[str, None, Callable[[], Optional[str]]]


class MemoryEngine(LineEngine):
    """In-memory engine with scripted input (useful for tests or embedding)."""

    def __init__(self, lines: Iterable[Scripted] = ()) -> None:
        self._input: Deque[Scripted] = deque(lines)
        self._history: List[str] = []
        self._limit = 0
        self._complete_hook: Optional[CompleteHook] = None
        self._word_break_hook: Optional[WordBreakHook] = None
        self.init_count = 0
        self.prompts: List[str] = []

    # lifecycle
    def initialize(self, complete_hook: CompleteHook, word_break_hook: WordBreakHook) -> None:
        self._complete_hook = complete_hook
        self._word_break_hook = word_break_hook
        self.init_count += 1

    # input
    def feed(self, *lines: Scripted) -> None:
        self._input.extend(lines)

    def read_line(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if not self._input:
            return None
        item = self._input.popleft()
        return item() if callable(item) else item

    def complete(self, line: str, cursor: Optional[int] = None) -> Optional[CompletionResult]:
        """Simulate a TAB press with the cursor at ``cursor`` (default: end)."""
        if self._complete_hook is None:
            return None
        if cursor is None:
            cursor = len(line)
        breaks = self._word_break_hook(line, cursor) if self._word_break_hook else CFG.WORD_BREAK_CHARS
        return self._complete_hook(line, word_start(line, cursor, breaks), cursor)

    # live history
    def add_history(self, line: str) -> None:
        self._history.append(line)
        self._stifle()

    def get_history_state(self) -> HistoryState:
        return tuple(self._history)

    def set_history_state(self, state: HistoryState) -> None:
        self._history = list(state)
        self._stifle()

    def set_history_limit(self, limit: int) -> None:
        self._limit = max(0, int(limit))
        self._stifle()

    def _stifle(self) -> None:
        if self._limit and len(self._history) > self._limit:
            del self._history[:len(self._history) - self._limit]

    # history files
    def read_history_file(self, path: str) -> None:
        with open(path, "r", encoding=CFG.HISTORY_ENCODING, errors="replace") as f:
            for ln in f.read().splitlines():
                self._history.append(ln)
        self._stifle()

    def write_history_file(self, path: str) -> None:
        with open(path, "w", encoding=CFG.HISTORY_ENCODING) as f:
            f.writelines(ln + "\n" for ln in self._history)

    def append_history_file(self, count: int, path: str) -> None:
        # like readline: the file must already exist
        with open(path, "r+", encoding=CFG.HISTORY_ENCODING) as f:
            f.seek(0, 2)
            if count > 0:
                f.writelines(ln + "\n" for ln in self._history[-count:])

    def truncate_history_file(self, path: str, limit: int) -> None:
        truncate_history_file(path, limit)
