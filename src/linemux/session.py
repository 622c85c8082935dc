# linemux/session.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from . import config as CFG
from .completion import build_result, compile_rules, dispatch
from .engines.api import LineEngine, make_engine
from .history import HistoryStore, app_history_path
from .models import CompletionResult, CompletionRule, SessionConfig, Submit

log = logging.getLogger(__name__)

T = TypeVar("T")


# ------------- default hooks -------------

def accept_new_line(session: "Session", line: str) -> bool:
    """Store non-empty lines that differ from the previous accepted one."""
    return bool(line) and line != session.history.last_line


def keep_line(line: str) -> str:
    return line


def complete_from_rules(session: "Session", line: str, start: int, end: int, submit: Submit) -> bool:
    return dispatch(session.completion_rules, line, start, end, submit)


def keep_proposals(line: str, start: int, end: int, proposals: List[str]) -> None:
    pass


def config_word_breaks(session: "Session", line: str, cursor: int) -> str:
    return session.config.word_break_chars


def save_history(session: "Session", engine: LineEngine) -> None:
    session.history.save(engine)


def restore_history(session: "Session", engine: LineEngine) -> None:
    session.history.restore(engine)


@dataclass(frozen=True)
class SessionHooks:
    """
    Customization points of a session. Replace any field, e.g.
    ``SessionHooks(postprocess=str.strip)``.

    filter_history(session, line) -> bool     store the line in history?
    postprocess(line) -> str                  rewrite the line returned by read()
    on_complete(session, line, start, end, submit) -> bool
                                              produce proposals; False = not handled
    edit_proposals(line, start, end, list)    edit the proposal list in place
    word_break(session, line, cursor) -> str  word delimiters for completion
    save_state / restore_state(session, engine)
                                              move engine state out of / into the session;
                                              extend these if you keep more global state
    """
    filter_history: Callable[["Session", str], bool] = accept_new_line
    postprocess: Callable[[str], str] = keep_line
    on_complete: Callable[["Session", str, int, int, Submit], bool] = complete_from_rules
    edit_proposals: Callable[[str, int, int, List[str]], None] = keep_proposals
    word_break: Callable[["Session", str, int], str] = config_word_breaks
    save_state: Callable[["Session", LineEngine], None] = save_history
    restore_state: Callable[["Session", LineEngine], None] = restore_history


# ------------- global context -------------

class EngineContext:
    """
    The single live engine and who owns it.

    ``current`` is the attached session; its data is in the engine, every
    other session's data is in its own snapshot. ``lock`` is reentrant so a
    session may be closed from code already running under the lock on the
    same thread.
    """

    def __init__(self, engine: LineEngine) -> None:
        self.engine = engine
        self.lock = threading.RLock()
        self.current: Optional[Session] = None
        self._initialized = False

    def ensure_initialized(self) -> None:
        if self._initialized:
            return
        with self.lock:
            if not self._initialized:
                self.engine.initialize(self._complete, self._word_breaks)
                self._initialized = True

    # /* ~~~ global entry points called back by the engine ~~~ */
    def _complete(self, line: str, start: int, end: int) -> Optional[CompletionResult]:
        session = self.current
        if session is None:
            return None
        return session._complete_locked(line, start, end)

    def _word_breaks(self, line: str, cursor: int) -> str:
        session = self.current
        if session is None:
            return CFG.WORD_BREAK_CHARS
        return session.hooks.word_break(session, line, cursor)


_default_context: Optional[EngineContext] = None
_default_guard = threading.Lock()


def default_context() -> EngineContext:
    """Process-wide context over the engine named by config.ENGINE_DSN."""
    global _default_context
    with _default_guard:
        if _default_context is None:
            _default_context = EngineContext(make_engine(CFG.ENGINE_DSN))
        return _default_context


# ------------- session -------------

class Session:
    """
    One logical line-editing context: prompt, completion rules and history.

    Any number of sessions may exist; the one being used is attached to the
    engine on demand and the previously attached one is saved away. All
    engine work goes through run_locked().

    Note: read() holds the context lock while waiting for input, so another
    thread that needs the engine (including close() of another session)
    blocks until the read returns. There is no timeout.

    The word_break hook is asked per TAB by engines that support it (the
    memory engine). The readline engine has no such hook: it asks once when
    a read starts and again after each completion request, with the line
    buffer as it was then (cursor 0 at read start). The delimiters in effect
    for a TAB are therefore the ones chosen at the previous call.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        *,
        hooks: Optional[SessionHooks] = None,
        context: Optional[EngineContext] = None,
        app_name: Optional[str] = None,
        completion: Optional[Iterable] = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.hooks = hooks or SessionHooks()
        self._context = context or default_context()
        self._context.ensure_initialized()
        self.history = HistoryStore(limit=self.config.history_limit)
        self.completion_rules: List[CompletionRule] = []
        self._dirty = False
        self._closed = False
        if app_name:
            self.set_app_name(app_name)
        if completion is not None:
            self.set_completion_list(completion)

    def __copy__(self):
        raise TypeError("Session cannot be copied; use move() to transfer it")

    def __deepcopy__(self, memo):
        raise TypeError("Session cannot be copied; use move() to transfer it")

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def context(self) -> EngineContext:
        return self._context

    @property
    def attached(self) -> bool:
        return self._context.current is self

    # ------------- attach / detach -------------

    def run_locked(self, fn: Callable[[], T]) -> T:
        """Run ``fn`` with this session attached and the context lock held."""
        ctx = self._context
        with ctx.lock:
            self._attach()
            return fn()

    def _attach(self) -> None:
        ctx = self._context
        if ctx.current is self:
            return
        prev = ctx.current
        if prev is not None:
            prev._save_state()
            log.debug("detached %r", prev)
        ctx.current = self
        self._dirty = True
        self.hooks.restore_state(self, ctx.engine)
        log.debug("attached %r", self)

    def _save_state(self) -> None:
        self.hooks.save_state(self, self._context.engine)
        self._dirty = False

    def detach(self) -> None:
        """Move this session's state out of the engine (no lock if idle)."""
        if not self._dirty:
            return
        ctx = self._context
        with ctx.lock:
            if ctx.current is self:
                self._save_state()
                ctx.current = None

    # ------------- configuration -------------

    def set_prompt(self, prompt: str) -> None:
        self.config = replace(self.config, prompt=prompt)

    def set_config(self, config: SessionConfig) -> None:
        self.detach()
        self.config = config
        self.history.limit = config.history_limit

    def set_completion_list(self, rules: Iterable) -> None:
        """
        Install completion rules: CompletionRule objects or (pattern, generator)
        pairs, where generator may also be a list of words. An invalid pattern
        raises ValueError here, before anything is installed.
        """
        self.completion_rules = compile_rules(rules)

    def set_app_name(self, app_name: str) -> None:
        self.set_history_file(app_history_path(app_name))

    def set_history_file(self, path: str) -> None:
        # loaded lazily on the next attach
        self.detach()
        self.history.set_file(path)

    @property
    def history_file(self) -> Optional[str]:
        return self.history.path

    # ------------- reading -------------

    def read(self) -> Optional[str]:
        """Read one line; None on end-of-input."""
        self._check_open()

        def _read() -> Optional[str]:
            line = self._context.engine.read_line(self.config.prompt)
            if line is not None:
                # code run during the read may have attached another session
                self._attach()
                self._record_locked(line)
            return line

        line = self.run_locked(_read)
        if line is None:
            return None
        return self.hooks.postprocess(line)

    def record(self, line: str) -> bool:
        """Add ``line`` to history if the history filter accepts it."""
        self._check_open()
        return self.run_locked(lambda: self._record_locked(line))

    def _record_locked(self, line: str) -> bool:
        if not self.hooks.filter_history(self, line):
            return False
        self.history.record(self._context.engine, line)
        return True

    # ------------- completion -------------

    def complete(self, line: str, start: int, end: int) -> Optional[CompletionResult]:
        """
        Completion for the word ``line[start:end]``.
        None = not handled (engine default); empty result = no suggestions.
        """
        self._check_open()
        return self.run_locked(lambda: self._complete_locked(line, start, end))

    def _complete_locked(self, line: str, start: int, end: int) -> Optional[CompletionResult]:
        proposals: List[str] = []
        if not self.hooks.on_complete(self, line, start, end, proposals.append):
            return None
        self.hooks.edit_proposals(line, start, end, proposals)
        return build_result(proposals)

    # ------------- history -------------

    def load_history(self) -> None:
        """Load the history file now instead of on first use (idempotent)."""
        self._check_open()
        self.run_locked(lambda: self.history.load(self._context.engine))

    def get_history(self) -> List[str]:
        """History oldest to newest (detaches)."""
        self.detach()
        return self.history.lines()

    def clear_history(self) -> None:
        self.detach()
        self.history.release()

    # ------------- ownership -------------

    def move(self) -> "Session":
        """
        Transfer this session into a new object. The source is detached and
        keeps an empty history; the returned session owns the snapshot.
        """
        self._check_open()
        self.detach()
        target = Session(self.config, hooks=self.hooks, context=self._context)
        target.completion_rules = self.completion_rules
        target.history = self.history
        self.history = HistoryStore(limit=self.config.history_limit)
        self.completion_rules = []
        return target

    # ------------- teardown -------------

    def close(self) -> None:
        """Persist new history lines, detach and release the snapshot."""
        if self._closed:
            return
        if self.history.loaded:
            self.run_locked(lambda: self.history.persist(self._context.engine))
        self.detach()
        self.clear_history()
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Session is closed")

    def __repr__(self) -> str:
        return f"<Session prompt={self.config.prompt!r} history={self.history.path!r}>"
