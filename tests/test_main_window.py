import pytest
from PySide6.QtCore import Qt

from ui.main_window import MainWindow

TEXT = "pack my box with five dozen liquor jugs"


@pytest.fixture
def window(qtbot, make_controller):
    win = MainWindow(make_controller(corpus=[TEXT, "sphinx of black quartz judge my vow"]))
    qtbot.addWidget(win)
    return win


def test_initial_layout(window):
    assert window.windowTitle() == "Typing Speed Test"
    assert [b.text() for b in window.mode_buttons.values()] == ["30s", "60s", "120s"]
    checked = [m for m, b in window.mode_buttons.items() if b.isChecked()]
    assert checked == [30]
    assert window.mode_buttons[30].accessibleDescription() == "pressed"
    assert window.btn_restart.text() == "restart"
    assert window.btn_new_text.text() == "new text"


def test_initial_stats(window):
    view = window.view
    assert view.lblWPM.text() == "0"
    assert view.lblAcc.text() == "100%"
    assert view.lblTimer.text() == "30"
    assert view.lblErrors.text() == "0"


def test_results_hidden_and_bests_empty(window):
    assert window.summary.isHidden()
    assert [lab.text() for lab in window.best_labels.values()] == ["–", "–", "–"]


def test_text_display_has_one_span_per_char(window):
    html = window.view.lblLine.text()
    assert html.count('class="char"') == len(window.controller.target_text)


def test_typing_updates_track_and_stats(qtbot, window):
    ctl = window.controller
    first = ctl.target_text[0]
    qtbot.keyClicks(window.view, first + "#")
    assert ctl.snapshot().cursor == 2
    assert window.view.lblErrors.text() == "1"
    assert window.view.lblAcc.text() == "50%"
    qtbot.keyClick(window.view, Qt.Key_Backspace)
    assert ctl.snapshot().cursor == 1
    assert window.view.lblErrors.text() == "1"


def test_modifier_keys_are_ignored(qtbot, window):
    qtbot.keyClick(window.view, Qt.Key_Shift)
    qtbot.keyClick(window.view, "a", Qt.ControlModifier)
    assert window.controller.snapshot().cursor == 0


def test_mode_button_switches_mode(qtbot, window):
    qtbot.keyClicks(window.view, "pa")
    window.mode_buttons[120].click()
    assert window.controller.mode == 120
    assert window.view.lblTimer.text() == "120"
    assert window.controller.snapshot().cursor == 0
    assert [m for m, b in window.mode_buttons.items() if b.isChecked()] == [120]


def test_finishing_shows_results_and_best(qtbot, make_controller):
    win = MainWindow(make_controller(corpus=["ok"]))
    qtbot.addWidget(win)
    qtbot.keyClicks(win.view, "ok")
    assert not win.summary.isHidden()
    assert win.summary.lblAcc.text() == "100%"
    assert win.summary.lblChars.text() == "2"
    assert win.best_labels[30].text() == "0 wpm"
    win.btn_restart.click()
    assert win.summary.isHidden()
    assert win.windowTitle() == "Typing Speed Test"
