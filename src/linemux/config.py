import os

PROMPT: str = "> "

# characters that break words for completion (readline's own default set)
WORD_BREAK_CHARS: str = " \t\n\"\\'`@$><=;|&{("

# 0 = unbounded
HISTORY_LIMIT: int = 0

# /* ~~~ history file per application: ~/.{app}_history ~~~ */
HISTORY_FILE_TEMPLATE: str = "~/.{app}_history"
HISTORY_ENCODING: str = "utf-8"

# Engine selection: "readline://" (terminal) or "memory://" (scripted, tests)
ENGINE_DSN: str = os.environ.get("LINEMUX_ENGINE", "readline://")

# INFO logging in the demo REPL and web server (same as --verbose)
VERBOSE: bool = os.environ.get("LINEMUX_VERBOSE") == "1"
