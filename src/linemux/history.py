"""Per-session history: snapshot while detached, file persistence on close."""
from __future__ import annotations
import logging
import os
from typing import List, Optional

from .engines.api import HistoryState, LineEngine
from . import config as CFG

log = logging.getLogger(__name__)


def app_history_path(app_name: str) -> str:
    return os.path.expanduser(CFG.HISTORY_FILE_TEMPLATE.format(app=app_name))


class HistoryStore:
    """
    History owned by one session.

    While the session is detached its entries live in ``state``; while it is
    attached the engine holds them and ``state`` is stale until save().
    All methods taking an engine must run under the context lock.
    """

    def __init__(self, path: Optional[str] = None, limit: int = 0) -> None:
        self.path = path
        self.limit = limit
        self.state: Optional[HistoryState] = None
        self.appended = 0
        self.need_load = bool(path)
        self.last_line: Optional[str] = None

    def set_file(self, path: Optional[str]) -> None:
        self.path = path
        self.need_load = bool(path)

    @property
    def loaded(self) -> bool:
        return bool(self.path) and not self.need_load

    # ------------- engine side (locked) -------------

    def save(self, engine: LineEngine) -> None:
        self.state = engine.get_history_state()

    def restore(self, engine: LineEngine) -> None:
        engine.set_history_limit(self.limit)
        engine.set_history_state(self.state or ())
        self.load(engine)

    def load(self, engine: LineEngine) -> None:
        if not self.need_load:
            return
        self.need_load = False
        try:
            engine.read_history_file(self.path)
            log.debug("history loaded from %s", self.path)
        except FileNotFoundError:
            log.debug("no history file at %s", self.path)
        except OSError as exc:
            log.warning("cannot read history %s: %s", self.path, exc)

    def record(self, engine: LineEngine, line: str) -> None:
        engine.add_history(line)
        self.appended += 1
        self.last_line = line

    def persist(self, engine: LineEngine) -> None:
        """Append lines recorded since the last load/persist, then bound the file."""
        if not self.path:
            return
        try:
            try:
                engine.append_history_file(self.appended, self.path)
            except OSError:
                # nothing to append to yet: write the whole list
                engine.write_history_file(self.path)
            if self.limit:
                engine.truncate_history_file(self.path, self.limit)
            log.info("history saved to %s (%d new)", self.path, self.appended)
            self.appended = 0
        except OSError as exc:
            log.warning("cannot save history %s: %s", self.path, exc)

    # ------------- snapshot side -------------

    def lines(self) -> List[str]:
        return list(self.state or ())

    def release(self) -> None:
        self.state = None
