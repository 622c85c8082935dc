"""
linemux: several independent line-editing sessions over one readline.

readline keeps a single global history and a single completer. linemux gives
each Session its own prompt, completion rules and history file, and swaps
them in and out of the engine whenever a different session is used.

Example Usage:
    from linemux import Session, SessionConfig, file_lookup

    with Session(SessionConfig(prompt="> "), app_name="demo") as rl:
        rl.set_completion_list([
            ("", ["hello", "file"]),
            ("hello ", ["world!", "universe!"]),
            ("file ", file_lookup(".")),
        ])
        while (line := rl.read()) is not None:
            print(line)
"""

from .models import CompletionResult, CompletionRule, SessionConfig
from .generators import FileLookup, WordList, file_lookup
from .session import EngineContext, Session, SessionHooks, default_context
from .engines.api import LineEngine, make_engine

__version__ = "1.0.0"
__all__ = [
    "CompletionResult", "CompletionRule", "SessionConfig",
    "FileLookup", "WordList", "file_lookup",
    "EngineContext", "Session", "SessionHooks", "default_context",
    "LineEngine", "make_engine",
]
