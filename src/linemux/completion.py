from __future__ import annotations
from typing import Iterable, List, Optional, Sequence

from .models import CompletionResult, CompletionRule, Submit
from . import config as CFG


def compile_rules(rules: Iterable) -> List[CompletionRule]:
    """
    Accepts CompletionRule objects or (pattern, generator) pairs.
    Patterns are compiled here so a bad one fails when the list is installed.
    """
    out: List[CompletionRule] = []
    for rule in rules:
        if isinstance(rule, CompletionRule):
            out.append(rule)
        else:
            pattern, generator = rule
            out.append(CompletionRule.of(pattern, generator))
    return out


def dispatch(rules: Sequence[CompletionRule], line: str, start: int, end: int, submit: Submit) -> bool:
    """
    Run every rule whose pattern full-matches line[:start].
    Returns False only when there are no rules at all (engine falls back).
    """
    if not rules:
        return False
    word = line[start:end]
    for rule in rules:
        m = rule.pattern.fullmatch(line, 0, start)
        if m is not None:
            rule.generator(word, len(word), m, submit)
    return True


def common_prefix(candidates: Sequence[str]) -> str:
    if not candidates:
        return ""
    first = candidates[0]
    n = len(first)
    for other in candidates[1:]:
        i = 0
        limit = min(n, len(other))
        while i < limit and other[i] == first[i]:
            i += 1
        n = i
        if n == 0:
            break
    return first[:n]


def build_result(candidates: List[str]) -> CompletionResult:
    # /* ~~~ 0 → no suggestions, 1 → unambiguous, 2+ → shared prefix first ~~~ */
    if len(candidates) < 2:
        return CompletionResult(candidates=list(candidates))
    return CompletionResult(candidates=list(candidates), common_prefix=common_prefix(candidates))


def word_start(line: str, cursor: Optional[int] = None, breaks: str = CFG.WORD_BREAK_CHARS) -> int:
    """Offset where the word under the cursor begins."""
    if cursor is None:
        cursor = len(line)
    i = cursor
    while i > 0 and line[i - 1] not in breaks:
        i -= 1
    return i
