"""Completion rules of the demo REPL and web API."""
from __future__ import annotations
import os

from .generators import file_lookup


def extract_file(root: str):
    """Generator proposing the lines (leading blanks removed) of the file named by group 1."""
    def gen(word: str, word_size: int, m, submit) -> None:
        path = os.path.join(root, m.group(1))
        try:
            with open(path, "r", encoding="utf-8", errors="ignore") as f:
                for ln in f:
                    ln = ln.lstrip(" \t").rstrip("\r\n")
                    if ln and ln[:word_size] == word[:word_size]:
                        submit(ln)
        except OSError:
            return
    return gen


def demo_rules(root: str = "."):
    return [
        ("", ["hello", "hi", "file", "csource"]),
        ("hello ", ["world!", "universe!", "people!"]),
        ("hi ", ["ondra", "franta"]),
        ("file ", file_lookup(root)),
        ("csource ", file_lookup(root, r".*\.c|.*\.cpp|.*\.h|.*\/")),
        ("csource ([^ ]+) ", extract_file(root)),
    ]
