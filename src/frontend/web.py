from __future__ import annotations
import argparse
import logging
from flask import Flask, request, jsonify

from linemux import config as CFG
from linemux.completion import word_start
from linemux.engines.api import make_engine
from linemux.models import SessionConfig
from linemux.session import EngineContext, Session
from linemux.demo import demo_rules

app = Flask(__name__)
_session: Session | None = None

# ---------- API ----------
@app.get("/api/complete")
def api_complete():
    line = request.args.get("line", "", type=str)
    cursor = request.args.get("cursor", len(line), type=int)
    cursor = max(0, min(cursor, len(line)))
    breaks = _session.hooks.word_break(_session, line, cursor)  # type: ignore
    start = word_start(line, cursor, breaks)
    res = _session.complete(line, start, cursor)  # type: ignore
    if res is None:
        return jsonify({"handled": False, "start": start, "common_prefix": None, "candidates": []})
    return jsonify({
        "handled": True,
        "start": start,
        "common_prefix": res.common_prefix,
        "candidates": res.candidates,
    })

@app.get("/api/history")
def api_history():
    return jsonify(_session.get_history())  # type: ignore

@app.get("/health")
def health():
    return jsonify({"ok": _session is not None,
                    "attached": bool(_session and _session.attached)})

# ---------- entry ----------
def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="linemux completion API (Flask)")
    ap.add_argument("--app-name", default=None, help="Serve the history of ~/.<app-name>_history")
    ap.add_argument("--root", default=".", help="Directory used by the file completions")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose or CFG.VERBOSE:
        logging.basicConfig(level=logging.INFO)

    global _session
    # the server never reads from a terminal: keep readline out of it
    ctx = EngineContext(make_engine("memory://"))
    _session = Session(SessionConfig(), context=ctx, app_name=args.app_name,
                       completion=demo_rules(args.root))
    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _session.close()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
