import pytest
from linemux.completion import build_result, common_prefix, word_start
from linemux.engines.memory_engine import MemoryEngine
from linemux.models import SessionConfig
from linemux.session import EngineContext, Session, SessionHooks

def _session(rules=None, **kw) -> Session:
    return Session(context=EngineContext(MemoryEngine()), completion=rules, **kw)

def _spy(name, calls, emit=()):
    def gen(word, size, m, submit):
        calls.append((name, word, size))
        for e in emit:
            submit(e)
    return gen

@pytest.mark.e2e
def test_no_rules_means_not_handled():
    assert _session().complete("anything", 0, 8) is None

@pytest.mark.e2e
def test_handled_without_candidates_is_empty_result():
    res = _session([("never", ["x"])]).complete("abc", 0, 3)
    assert res is not None and res.empty
    assert res.common_prefix is None

@pytest.mark.e2e
def test_empty_pattern_only_fires_for_first_word():
    calls = []
    s = _session([("", _spy("first", calls)), ("hello ", _spy("second", calls))])
    s.complete("hello ", 6, 6)
    assert calls == [("second", "", 0)]
    calls.clear()
    s.complete("hel", 0, 3)
    assert calls == [("first", "hel", 3)]

@pytest.mark.e2e
def test_ambiguous_result_starts_with_common_prefix():
    s = _session([("", ["alpha", "album", "beta"])])
    res = s.complete("al", 0, 2)
    assert res.common_prefix == "al"
    assert res.candidates == ["alpha", "album"]
    assert res.matches() == ["al", "alpha", "album"]

@pytest.mark.e2e
def test_single_candidate_has_no_separate_prefix():
    res = _session([("", ["alpha", "beta"])]).complete("b", 0, 1)
    assert res.common_prefix is None
    assert res.matches() == ["beta"]

@pytest.mark.e2e
def test_all_matching_rules_fire_in_order_without_dedup():
    s = _session([(".*", ["ab"]), ("", ["ab", "ac"])])
    res = s.complete("a", 0, 1)
    assert res.candidates == ["ab", "ab", "ac"]
    assert res.common_prefix == "a"

@pytest.mark.e2e
def test_captured_groups_reach_the_generator():
    def gen(word, size, m, submit):
        submit(m.group(1) + "!")
    s = _session([(r"open (\w+) ", gen)])
    assert s.complete("open foo ", 9, 9).candidates == ["foo!"]

@pytest.mark.e2e
def test_invalid_pattern_fails_at_install_time():
    s = _session([("", ["keep"])])
    with pytest.raises(ValueError):
        s.set_completion_list([("ok", ["x"]), ("(", ["y"])])
    assert s.complete("k", 0, 1).candidates == ["keep"]

@pytest.mark.e2e
def test_engine_completion_uses_session_word_breaks():
    calls = []
    s = _session([("cmd ", _spy("path", calls))],
                 config=SessionConfig(word_break_chars=" "))
    ctx = s.context
    s.record("cmd")  # attach
    ctx.engine.complete("cmd a/b")
    s.set_config(SessionConfig(word_break_chars=" /"))
    s.record("again")
    ctx.engine.complete("cmd a/b")
    assert calls == [("path", "a/b", 3)]

@pytest.mark.e2e
def test_engine_completion_through_attached_session():
    s = _session([("", ["hello"]), ("hello ", ["world!", "universe!", "people!"])])
    s.record("attach")
    res = s.context.engine.complete("hello un")
    assert res.candidates == ["universe!"]

@pytest.mark.e2e
def test_edit_and_on_complete_hooks():
    hooks = SessionHooks(edit_proposals=lambda line, start, end, lst: lst.reverse())
    s = _session([("", ["ab", "ac"])], hooks=hooks)
    assert s.complete("a", 0, 1).candidates == ["ac", "ab"]

    quiet = _session([("", ["ab"])], hooks=SessionHooks(on_complete=lambda *a: False))
    assert quiet.complete("a", 0, 1) is None

@pytest.mark.e2e
def test_common_prefix_and_word_start_helpers():
    assert common_prefix(["abc", "abd", "ab"]) == "ab"
    assert common_prefix(["x", "y"]) == ""
    assert build_result([]).empty
    assert word_start("hello wor") == 6
    assert word_start("a/b", breaks=" /") == 2
    assert word_start("hello wor", cursor=5) == 0
