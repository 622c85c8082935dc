# linemux/engines/api.py
from __future__ import annotations
import logging
import os
from typing import Callable, Optional, Protocol, Tuple

from ..models import CompletionResult
from .. import config as CFG

log = logging.getLogger(__name__)

# opaque snapshot of the engine's history list
HistoryState = Tuple[str, ...]

CompleteHook = Callable[[str, int, int], Optional[CompletionResult]]
WordBreakHook = Callable[[str, int], str]


class LineEngine(Protocol):
    # lifecycle
    def initialize(self, complete_hook: CompleteHook, word_break_hook: WordBreakHook) -> None: ...
    # input
    def read_line(self, prompt: str) -> Optional[str]: ...
    # live history
    def add_history(self, line: str) -> None: ...
    def get_history_state(self) -> HistoryState: ...
    def set_history_state(self, state: HistoryState) -> None: ...
    def set_history_limit(self, limit: int) -> None: ...
    # history files
    def read_history_file(self, path: str) -> None: ...
    def write_history_file(self, path: str) -> None: ...
    def append_history_file(self, count: int, path: str) -> None: ...
    def truncate_history_file(self, path: str, limit: int) -> None: ...


def truncate_history_file(path: str, limit: int) -> None:
    """Keep only the last ``limit`` lines of a newline-delimited history file."""
    if limit <= 0:
        return
    with open(path, "r", encoding=CFG.HISTORY_ENCODING, errors="replace") as f:
        lines = f.read().splitlines()
    if len(lines) <= limit:
        return
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding=CFG.HISTORY_ENCODING) as f:
        f.write("\n".join(lines[-limit:]) + "\n")
    os.replace(tmp, path)


def make_engine(dsn: Optional[str] = None) -> LineEngine:
    """
    Factory:
      - readline:// -> ReadlineEngine (the process' readline library)
      - memory://   -> MemoryEngine (scripted input, for tests and embedding)
    """
    dsn = dsn or CFG.ENGINE_DSN
    if dsn.startswith("readline://"):
        # Lazy import: readline is missing on some platforms
        from .readline_engine import ReadlineEngine
        return ReadlineEngine()

    if dsn.startswith("memory://"):
        from .memory_engine import MemoryEngine
        return MemoryEngine()

    raise ValueError(f"Unsupported engine DSN: {dsn}")
