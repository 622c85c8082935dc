# linemux/models.py
"""
Data models for the line-editing multiplexer.

- SessionConfig: per-session settings (prompt, history bound, word breaks).
- CompletionRule: an immutable (pattern, generator) pair.
- CompletionResult: what a handled completion request hands back to the engine.

These classes carry no engine interaction; the session and completion modules
operate on them.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Union

from . import config as CFG

Submit = Callable[[str], None]
Generator = Callable[[str, int, "re.Match[str]", Submit], None]


@dataclass(slots=True)
class SessionConfig:
    """
    Attributes
    ----------
    prompt : str
        Prompt shown by read(); may be changed at any time.
    history_limit : int
        Maximum number of history entries, 0 = unbounded.
    word_break_chars : str
        Characters that delimit the word being completed.
    """
    prompt: str = CFG.PROMPT
    history_limit: int = CFG.HISTORY_LIMIT
    word_break_chars: str = CFG.WORD_BREAK_CHARS


@dataclass(frozen=True, slots=True)
class CompletionRule:
    """
    A compiled line-prefix pattern and the generator that fires when it matches.

    The pattern is full-matched against the part of the line before the word
    being completed, so "" matches only the first word of a line.
    """
    pattern: "re.Pattern[str]"
    generator: Generator

    @classmethod
    def of(cls, pattern: Union[str, "re.Pattern[str]"],
           generator: Union[Generator, Iterable[str]]) -> "CompletionRule":
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid completion pattern {pattern!r}: {exc}") from exc
        if not callable(generator):
            from .generators import WordList
            generator = WordList(generator)
        return cls(pattern=pattern, generator=generator)


@dataclass(frozen=True, slots=True)
class CompletionResult:
    """
    Structured completion answer.

    common_prefix is set only when there are two or more candidates; it is the
    longest leading substring shared by all of them. An empty candidate list
    means "handled, no suggestions".
    """
    candidates: List[str] = field(default_factory=list)
    common_prefix: Optional[str] = None

    @property
    def empty(self) -> bool:
        return not self.candidates

    def matches(self) -> List[str]:
        """Engine-style list: common prefix first when ambiguous."""
        if self.common_prefix is None:
            return list(self.candidates)
        return [self.common_prefix, *self.candidates]
