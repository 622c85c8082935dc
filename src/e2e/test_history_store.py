from pathlib import Path
import pytest
from linemux.engines.memory_engine import MemoryEngine
from linemux.models import SessionConfig
from linemux.session import EngineContext, Session

def _session(ctx: EngineContext, path: Path | None = None, limit: int = 0) -> Session:
    s = Session(SessionConfig(history_limit=limit), context=ctx)
    if path is not None:
        s.set_history_file(str(path))
    return s

@pytest.mark.e2e
def test_only_consecutive_duplicates_are_dropped():
    ctx = EngineContext(MemoryEngine())
    s = _session(ctx)
    assert s.record("a") and s.record("b") and s.record("a")
    assert s.get_history() == ["a", "b", "a"]

    t = _session(ctx)
    assert t.record("a") is True
    assert t.record("a") is False
    assert t.record("") is False
    assert t.get_history() == ["a"]

@pytest.mark.e2e
def test_persist_and_reload_round_trip(tmp_path: Path):
    hist = tmp_path / ".app_history"
    ctx = EngineContext(MemoryEngine())
    with _session(ctx, hist) as s:
        for ln in ("x", "y", "z"):
            s.record(ln)

    s2 = _session(ctx, hist)
    s2.load_history()
    assert s2.get_history() == ["x", "y", "z"]
    s2.record("w")
    s2.close()
    # append-only: earlier lines are not written twice
    assert hist.read_text(encoding="utf-8").splitlines() == ["x", "y", "z", "w"]

@pytest.mark.e2e
def test_history_bound_survives_persist_and_reload(tmp_path: Path):
    hist = tmp_path / ".bounded_history"
    ctx = EngineContext(MemoryEngine())
    s = _session(ctx, hist, limit=2)
    for ln in ("one", "two", "three"):
        s.record(ln)
    assert s.get_history() == ["two", "three"]
    s.close()
    assert hist.read_text(encoding="utf-8").splitlines() == ["two", "three"]

    s2 = _session(ctx, hist, limit=2)
    s2.load_history()
    assert s2.get_history() == ["two", "three"]

@pytest.mark.e2e
def test_file_is_truncated_after_append(tmp_path: Path):
    hist = tmp_path / ".h"
    hist.write_text("old1\nold2\nold3\n", encoding="utf-8")
    ctx = EngineContext(MemoryEngine())
    s = _session(ctx, hist, limit=3)
    s.record("new")
    s.close()
    assert hist.read_text(encoding="utf-8").splitlines() == ["old2", "old3", "new"]

@pytest.mark.e2e
def test_missing_history_file_loads_nothing(tmp_path: Path):
    ctx = EngineContext(MemoryEngine())
    s = _session(ctx, tmp_path / "absent")
    s.load_history()
    s.load_history()
    assert s.get_history() == []

@pytest.mark.e2e
def test_unwritable_history_file_is_not_fatal(tmp_path: Path):
    ctx = EngineContext(MemoryEngine())
    s = _session(ctx, tmp_path / "no-such-dir" / "history")
    s.record("line")
    s.close()
    assert not (tmp_path / "no-such-dir").exists()

@pytest.mark.e2e
def test_session_that_never_attached_writes_nothing(tmp_path: Path):
    hist = tmp_path / ".idle"
    ctx = EngineContext(MemoryEngine())
    _session(ctx, hist).close()
    assert not hist.exists()
    assert ctx.current is None

@pytest.mark.e2e
def test_clear_history_releases_entries():
    ctx = EngineContext(MemoryEngine())
    s = _session(ctx)
    s.record("a")
    s.clear_history()
    assert s.get_history() == []
    s.record("b")
    assert s.get_history() == ["b"]

@pytest.mark.e2e
def test_app_name_sets_history_path(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    s = Session(context=EngineContext(MemoryEngine()), app_name="demo")
    assert s.history_file == str(tmp_path / ".demo_history")
