from __future__ import annotations
import argparse
import logging
import os
import sys

from . import config as CFG
from .demo import demo_rules
from .models import SessionConfig
from .session import Session


def _supports_color() -> bool:
    return sys.stdout.isatty() and os.environ.get("NO_COLOR", "") == ""

CSI = "\033["
def _c(text: str, code: str) -> str:
    if not _supports_color(): return text
    return f"{CSI}{code}m{text}{CSI}0m"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="linemux demo REPL (press TAB twice, Ctrl+D to exit)")
    parser.add_argument("--app-name", default="rldemo", help="History file becomes ~/.<app-name>_history")
    parser.add_argument("--root", default=".", help="Directory used by the file completions")
    parser.add_argument("--history-limit", type=int, default=0)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.verbose or CFG.VERBOSE:
        logging.basicConfig(level=logging.INFO)

    main_rl = Session(SessionConfig(prompt=">", history_limit=args.history_limit),
                      app_name=args.app_name, completion=demo_rules(args.root))
    scratch = Session(SessionConfig(prompt="scratch>", history_limit=args.history_limit),
                      app_name=f"{args.app_name}_scratch", completion=[("", ["note", "todo"])])

    print("linemux demo. Try press TAB twice. To exit press Ctrl+D")
    print(_c("Commands: :switch, :history", "2;37"))
    active = main_rl
    try:
        while True:
            line = active.read()
            if line is None:
                print(); break
            cmd = line.strip()
            if cmd == ":switch":
                active = scratch if active is main_rl else main_rl
                print(_c(f"(now {active.config.prompt!r})", "2;36")); continue
            if cmd == ":history":
                for i, h in enumerate(active.get_history(), start=1):
                    print(f"{i:4d}  {h}")
                continue
            print(line)
    finally:
        scratch.close()
        main_rl.close()
    return 0

if __name__ == "__main__":
    sys.exit(main())
