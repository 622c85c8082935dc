# linemux/engines/readline_engine.py
from __future__ import annotations
import logging
from typing import List, Optional

import readline

from .api import CompleteHook, HistoryState, LineEngine, WordBreakHook, truncate_history_file

log = logging.getLogger(__name__)


class ReadlineEngine(LineEngine):
    """
    Adapter over the process-wide ``readline`` module.

    readline keeps exactly one history list and one completer; the session
    layer swaps their contents in and out, this class only translates calls.
    """

    def __init__(self) -> None:
        self._complete_hook: Optional[CompleteHook] = None
        self._word_break_hook: Optional[WordBreakHook] = None
        self._matches: Optional[List[str]] = None
        self._limit = 0

    # ------------- lifecycle -------------

    def initialize(self, complete_hook: CompleteHook, word_break_hook: WordBreakHook) -> None:
        self._complete_hook = complete_hook
        self._word_break_hook = word_break_hook
        # input() would add every line itself; sessions record through their filter
        readline.set_auto_history(False)
        readline.set_completer(self._completer)
        if "libedit" in (readline.__doc__ or ""):
            readline.parse_and_bind("bind ^I rl_complete")
        else:
            readline.parse_and_bind("tab: complete")
        log.info("readline initialized")

    # ------------- input -------------

    def read_line(self, prompt: str) -> Optional[str]:
        self._apply_word_breaks(readline.get_line_buffer(), 0)
        try:
            return input(prompt)
        except EOFError:
            return None

    def _apply_word_breaks(self, line: str, cursor: int) -> None:
        # readline has no per-request hook; refresh the delimiters instead
        if self._word_break_hook is not None:
            readline.set_completer_delims(self._word_break_hook(line, cursor))

    def _completer(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            line = readline.get_line_buffer()
            result = None
            if self._complete_hook is not None:
                result = self._complete_hook(line, readline.get_begidx(), readline.get_endidx())
            # readline computes the shared prefix itself from the candidates
            if result is None:
                self._matches = None
            elif result.empty:
                # the word itself; no matches would make readline complete file names
                self._matches = [text]
            else:
                self._matches = list(result.candidates)
            self._apply_word_breaks(line, readline.get_endidx())
        if not self._matches or state >= len(self._matches):
            return None
        return self._matches[state]

    # ------------- live history -------------

    def add_history(self, line: str) -> None:
        readline.add_history(line)
        self._stifle()

    def get_history_state(self) -> HistoryState:
        n = readline.get_current_history_length()
        return tuple(readline.get_history_item(i) or "" for i in range(1, n + 1))

    def set_history_state(self, state: HistoryState) -> None:
        readline.clear_history()
        for ln in state:
            readline.add_history(ln)
        self._stifle()

    def set_history_limit(self, limit: int) -> None:
        self._limit = max(0, int(limit))
        readline.set_history_length(self._limit or -1)
        self._stifle()

    def _stifle(self) -> None:
        while self._limit and readline.get_current_history_length() > self._limit:
            readline.remove_history_item(0)

    # ------------- history files -------------

    def read_history_file(self, path: str) -> None:
        readline.read_history_file(path)
        self._stifle()

    def write_history_file(self, path: str) -> None:
        readline.write_history_file(path)

    def append_history_file(self, count: int, path: str) -> None:
        readline.append_history_file(count, path)

    def truncate_history_file(self, path: str, limit: int) -> None:
        truncate_history_file(path, limit)
