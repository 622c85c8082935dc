"""
Proposal generators.

A generator is any callable ``(word, word_size, match, submit)``: it receives
the fragment being completed, its length, the match object of the rule that
fired (captured groups) and a ``submit`` callback it calls once per candidate.

Two built-ins are provided:
    WordList(options)                 fixed words filtered by prefix
    file_lookup(root, pattern, path)  directory entries, with path navigation
"""
from __future__ import annotations
import logging
import os
import re
from typing import Iterable, List, Optional, Tuple

from .models import Submit

log = logging.getLogger(__name__)

SEP = "/"


class WordList:
    """Emits every option starting with the fragment, keeping list order."""

    def __init__(self, options: Iterable[str]) -> None:
        self.options: Tuple[str, ...] = tuple(options)

    def __call__(self, word: str, word_size: int, match, submit: Submit) -> None:
        prefix = word[:word_size]
        for opt in self.options:
            if opt[:word_size] == prefix:
                submit(opt)

    def __repr__(self) -> str:
        return f"WordList({list(self.options)!r})"


class FileLookup:
    """
    Completes directory entries under ``root``.

    With ``pathname`` enabled the fragment may contain ``/``: the typed
    directory part moves the search root and is kept in front of every
    candidate, a leading ``/`` searches from the filesystem root, and
    directories get a trailing ``/``. When the only candidate is a directory
    the lookup descends into it and returns its listing instead.
    """

    def __init__(self, root: str, pattern: str = "", pathname: bool = True) -> None:
        self.root = root
        self.pathname = pathname
        self._match_all = not pattern
        try:
            self._pattern: Optional[re.Pattern[str]] = None if self._match_all else re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid file filter {pattern!r}: {exc}") from exc

    def __call__(self, word: str, word_size: int, match, submit: Submit) -> None:
        for cand in self.lookup(word[:word_size]):
            submit(cand)

    def lookup(self, word: str) -> List[str]:
        root, entry = self._split(word)
        found: List[Tuple[str, bool]] = []
        for name, isdir in self._scan(root or "."):
            cand = entry + name
            if self.pathname and isdir:
                cand += SEP
            if not self._match_all and not self._pattern.fullmatch(cand):
                continue
            if cand.startswith(word):
                found.append((cand, isdir))

        # auto-descend: the only candidate is a directory
        if len(found) == 1 and found[0][1] and self.pathname:
            inner = self.lookup(found[0][0])
            if inner:
                return inner
        return [cand for cand, _ in found]

    def _split(self, word: str) -> Tuple[str, str]:
        """Return (directory to scan, prefix re-attached to candidates)."""
        root = self.root
        entry = ""
        if not self.pathname or SEP not in word:
            return root, entry
        w = word
        if w.startswith(SEP):
            root = SEP
            entry = SEP
            w = w[1:]
        elif root and not root.endswith(SEP):
            root += SEP
        sep = w.rfind(SEP)
        if sep != -1:
            root += w[:sep + 1]
            entry += w[:sep + 1]
        return root, entry

    def _scan(self, path: str) -> Iterable[Tuple[str, bool]]:
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as exc:
            log.debug("file lookup: cannot list %s: %s", path, exc)
            return []
        out = []
        for e in sorted(entries, key=lambda d: d.name):
            try:
                # symlinks are resolved only when directory-ness is shown
                isdir = e.is_dir(follow_symlinks=self.pathname)
            except OSError:
                isdir = False
            out.append((e.name, isdir))
        return out


def file_lookup(root: str, pattern: str = "", pathname: bool = True) -> FileLookup:
    """Build a filesystem generator; an invalid ``pattern`` raises ValueError now."""
    return FileLookup(root, pattern, pathname)
