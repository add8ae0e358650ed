import os
import random

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from services.mode_controller import ModeController
from services.text_provider import TargetTextProvider
from utils.db_helper import PersonalBestsStore, get_conn


@pytest.fixture(autouse=True)
def _qt_app(qapp):
    """Every test gets a QApplication; timers and signals need one."""
    yield qapp


@pytest.fixture
def store(tmp_path):
    return PersonalBestsStore(str(tmp_path / "data" / "typing.db"))


@pytest.fixture
def make_controller(store):
    created = []

    def factory(corpus=("abc",), mode=30, **kwargs):
        provider = TargetTextProvider(list(corpus), rng=random.Random(7))
        ctl = ModeController(provider, store, mode=mode, **kwargs)
        created.append(ctl)
        return ctl

    yield factory
    for ctl in created:
        ctl.timer.stop()


@pytest.fixture
def result_count(store):
    """Rows in the results history table, optionally for one mode."""
    def count(mode=None):
        conn = get_conn(store.path)
        try:
            if mode is None:
                return conn.execute("SELECT COUNT(*) FROM results").fetchone()[0]
            return conn.execute("SELECT COUNT(*) FROM results WHERE mode=?", (mode,)).fetchone()[0]
        finally:
            conn.close()

    return count
