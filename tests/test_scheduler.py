"""
Testy dla harmonogramu kontynuacji (wirtualny zegar).
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lighthouse.systems.scheduler import Scheduler


def test_advance_runs_due_continuations():
    scheduler = Scheduler()
    ran = []
    scheduler.schedule(2500, "start_day", lambda: ran.append("start_day"))

    assert scheduler.advance(2499) == 0
    assert ran == []
    assert scheduler.advance(1) == 1
    assert ran == ["start_day"]
    assert scheduler.now == 2500


def test_same_due_runs_in_insertion_order():
    scheduler = Scheduler()
    ran = []
    scheduler.schedule(100, "a", lambda: ran.append("a"))
    scheduler.schedule(100, "b", lambda: ran.append("b"))
    scheduler.schedule(50, "c", lambda: ran.append("c"))

    scheduler.advance(100)

    assert ran == ["c", "a", "b"]


def test_chained_continuation_inside_window():
    scheduler = Scheduler()
    ran = []
    scheduler.schedule(
        100, "first",
        lambda: scheduler.schedule(100, "second", lambda: ran.append("second")),
    )

    assert scheduler.advance(150) == 1
    assert scheduler.has_pending("second")
    assert scheduler.advance(50) == 1
    assert ran == ["second"]


def test_run_pending_drains_queue():
    scheduler = Scheduler()
    scheduler.schedule(1000, "dusk", lambda: scheduler.schedule(2500, "dusk_choice", lambda: None))

    assert scheduler.run_pending() == 2
    assert scheduler.pending == []
    assert scheduler.now == 3500


def test_negative_delay_treated_as_zero():
    scheduler = Scheduler()
    scheduler.advance(10)
    continuation = scheduler.schedule(-5, "now", lambda: None)
    assert continuation.due == 10


def test_clear():
    scheduler = Scheduler()
    scheduler.schedule(10, "x", lambda: None)
    scheduler.clear()
    assert not scheduler.has_pending("x")
    assert scheduler.advance(100) == 0
