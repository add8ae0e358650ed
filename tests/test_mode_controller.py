import pytest

from app.calculation import StatsCalculator
from app.errors import InvalidInput, StorageError
from app.state import CharStatus
from core.chrono import TimerPhase
from services.mode_controller import ModeController
from services.text_provider import TargetTextProvider
from services.typing_engine import Backspace, CharTyped, TimerTick
from utils.db_helper import PersonalBestsStore

TEXT = "the quick brown fox jumps over the lazy dog"


def test_initial_state(make_controller):
    ctl = make_controller()
    assert ctl.mode == 30
    assert ctl.remaining == 30
    assert ctl.phase is TimerPhase.IDLE
    assert ctl.target_text == "abc"
    assert not ctl.is_complete
    assert ctl.result is None
    assert ctl.personal_bests() == {30: None, 60: None, 120: None}


def test_unsupported_initial_mode(make_controller):
    with pytest.raises(InvalidInput):
        make_controller(mode=90)


def test_abc_scenario(make_controller, store):
    ctl = make_controller(corpus=["abc"], mode=30)

    ctl.handle_typed_char("a")
    snap = ctl.snapshot()
    assert snap.entries[0].status is CharStatus.CORRECT
    assert snap.cursor == 1
    assert ctl.phase is TimerPhase.RUNNING

    ctl.handle_typed_char("x")
    snap = ctl.snapshot()
    assert snap.entries[1].status is CharStatus.INCORRECT
    assert snap.cursor == 2
    assert ctl.live_stats().errors == 1

    ctl.handle_backspace()
    snap = ctl.snapshot()
    assert snap.cursor == 1
    assert snap.entries[1].status is CharStatus.PENDING
    assert ctl.live_stats().errors == 1

    ctl.handle_typed_char("b")
    ctl.handle_typed_char("c")
    assert ctl.is_complete
    result = ctl.result
    assert result.total_chars == 3
    assert result.errors == 1
    assert result.accuracy == 67
    # finished before the first tick
    assert result.wpm == 0
    assert ctl.phase is TimerPhase.EXPIRED
    assert ctl.remaining == 30


def test_clean_completion(make_controller):
    ctl = make_controller(corpus=[TEXT])
    for ch in TEXT[:10]:
        ctl.handle_typed_char(ch)
    for _ in range(4):
        ctl.handle_event(TimerTick())
    for ch in TEXT[10:]:
        ctl.handle_typed_char(ch)
    result = ctl.result
    assert result.errors == 0
    assert result.accuracy == 100
    assert result.elapsed_seconds == 4
    assert ctl.remaining == 26
    assert result.wpm == round((len(TEXT) / 5) / (4 / 60))


def test_timer_expiry_completes_session(make_controller, store):
    ctl = make_controller(corpus=[TEXT], mode=30)
    finished = []
    ctl.finished.connect(lambda r, best: finished.append((r, best)))
    for ch in "the qu":
        ctl.handle_typed_char(ch)
    for _ in range(30):
        assert ctl.handle_event(TimerTick()) is True
    assert ctl.is_complete
    result = ctl.result
    assert result.elapsed_seconds == 30
    assert result.total_chars == 6
    assert result.wpm == round((6 / 5) / 0.5)
    assert len(finished) == 1
    assert ctl.handle_event(TimerTick()) is False
    assert ctl.handle_typed_char("i") is False
    assert ctl.handle_event(Backspace()) is False
    assert ctl.snapshot().cursor == 6


def test_ticks_ignored_before_first_keystroke(make_controller):
    ctl = make_controller(corpus=[TEXT])
    assert ctl.handle_event(TimerTick()) is False
    assert ctl.remaining == 30


def test_live_wpm_and_history(make_controller):
    ctl = make_controller(corpus=["hello world"])
    for ch in "hello":
        ctl.handle_event(CharTyped(ch))
    for _ in range(6):
        ctl.handle_event(TimerTick())
    assert ctl.live_stats().wpm == 10
    assert ctl.wpm_history[-1] == (6, 10)
    assert len(ctl.wpm_history) == 6


def test_completion_records_personal_best(make_controller, store, result_count):
    ctl = make_controller(corpus=[TEXT], mode=60)
    bests = []
    ctl.bestsChanged.connect(bests.append)
    ctl.handle_typed_char("t")
    for _ in range(60):
        ctl.handle_event(TimerTick())
    assert ctl.new_best is True
    assert store.get(60) == ctl.result.wpm
    assert ctl.personal_bests()[60] == ctl.result.wpm
    assert bests == [ctl.personal_bests()]
    assert result_count(60) == 1


def test_worse_result_keeps_best(make_controller, store):
    store.record_if_better(30, 999)
    ctl = make_controller(corpus=["abc"])
    assert ctl.personal_bests()[30] == 999
    for ch in "abc":
        ctl.handle_typed_char(ch)
    assert ctl.new_best is False
    assert store.get(30) == 999


def test_select_mode_resets_partial_session(make_controller, store, result_count):
    ctl = make_controller(corpus=[TEXT])
    for ch in "the":
        ctl.handle_typed_char(ch)
    ctl.handle_event(TimerTick())
    old_timer = ctl.timer

    ctl.select_mode(60)

    assert not old_timer._tick.isActive()
    assert ctl.mode == 60
    assert ctl.snapshot().cursor == 0
    assert ctl.remaining == 60
    assert ctl.phase is TimerPhase.IDLE
    assert ctl.live_stats().errors == 0
    assert ctl.result is None
    assert store.load() == {30: None, 60: None, 120: None}
    assert result_count() == 0


def test_select_mode_resets_time_display(make_controller):
    ctl = make_controller(corpus=[TEXT])
    shown = []
    ctl.remainingChanged.connect(shown.append)
    ctl.handle_typed_char("t")
    ctl.handle_event(TimerTick())
    ctl.select_mode(120)
    assert shown == [29, 120]
    assert ctl.remaining == 120


def test_unsupported_mode_leaves_session_alone(make_controller):
    ctl = make_controller(corpus=[TEXT])
    ctl.handle_typed_char("t")
    with pytest.raises(InvalidInput):
        ctl.select_mode(15)
    assert ctl.mode == 30
    assert ctl.snapshot().cursor == 1
    assert ctl.phase is TimerPhase.RUNNING


def test_restart_keeps_text_and_mode(make_controller):
    ctl = make_controller(corpus=[TEXT, "other passage"], mode=60)
    text = ctl.target_text
    ctl.handle_typed_char("x")
    ctl.restart()
    assert ctl.target_text == text
    assert ctl.mode == 60
    assert ctl.remaining == 60
    assert ctl.snapshot().cursor == 0


def test_restart_is_idempotent(make_controller):
    ctl = make_controller(corpus=[TEXT])
    ctl.handle_typed_char("t")
    ctl.restart()
    once = (ctl.snapshot(), ctl.remaining, ctl.phase, ctl.live_stats())
    ctl.restart()
    twice = (ctl.snapshot(), ctl.remaining, ctl.phase, ctl.live_stats())
    assert once == twice


def test_restart_after_completion_clears_result(make_controller):
    ctl = make_controller(corpus=["ab"])
    ctl.handle_typed_char("a")
    ctl.handle_typed_char("b")
    assert ctl.is_complete
    ctl.restart()
    assert not ctl.is_complete
    assert ctl.handle_typed_char("a") is True


def test_load_new_text_changes_passage(make_controller):
    ctl = make_controller(corpus=["first text", "second text"])
    before = ctl.target_text
    ctl.handle_typed_char("f")
    ctl.load_new_text()
    assert ctl.target_text != before
    assert ctl.snapshot().cursor == 0
    assert ctl.snapshot().target_text == ctl.target_text
    assert ctl.phase is TimerPhase.IDLE


def test_errors_never_decrease(make_controller):
    ctl = make_controller(corpus=[TEXT])
    last = 0
    for key in ["x", "Backspace", "t", "y", "Backspace", "Backspace", "z", "q"]:
        ctl.handle_key(key)
        errors = ctl.live_stats().errors
        assert errors >= last
        last = errors
    assert last == 4


def test_visible_error_policy(make_controller):
    ctl = make_controller(corpus=["abc"], calculator=StatsCalculator(count_corrected_errors=False))
    for key in ["a", "x", "Backspace", "b", "c"]:
        ctl.handle_key(key)
    assert ctl.result.errors == 0
    assert ctl.result.accuracy == 100


def test_history_failure_still_records_best(make_controller, store, monkeypatch):
    def boom(*args, **kwargs):
        raise StorageError("disk full")

    monkeypatch.setattr(store, "insert_result", boom)
    ctl = make_controller(corpus=["ab"])
    finished = []
    ctl.finished.connect(lambda r, best: finished.append(best))
    ctl.handle_typed_char("a")
    ctl.handle_typed_char("b")
    assert ctl.is_complete
    assert ctl.new_best is True
    assert store.get(30) == ctl.result.wpm
    assert finished == [True]


def test_unusable_store_does_not_break_session(tmp_path):
    (tmp_path / "data").write_text("not a directory", encoding="utf-8")
    store = PersonalBestsStore(str(tmp_path / "data" / "typing.db"))
    ctl = ModeController(TargetTextProvider(["ab"]), store)
    assert ctl.personal_bests() == {30: None, 60: None, 120: None}
    finished = []
    ctl.finished.connect(lambda r, best: finished.append((r, best)))
    ctl.handle_typed_char("a")
    ctl.handle_typed_char("b")
    assert ctl.is_complete
    assert finished == [(ctl.result, False)]
