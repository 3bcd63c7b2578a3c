"""Tests for the delayed-action scheduler."""
import pytest

from tweenchain.animation.scheduler import Scheduler


def test_runs_due_actions_in_insertion_order():
    """Test due actions run in insertion order."""
    scheduler = Scheduler()
    order = []
    scheduler.add(2, lambda: order.append("late"))
    scheduler.add(1, lambda: order.append("first"))
    scheduler.add(1, lambda: order.append("second"))

    assert scheduler.tick(1) == 2
    assert order == ["first", "second"]
    assert len(scheduler) == 1

    assert scheduler.tick(1) == 1
    assert order == ["first", "second", "late"]
    assert len(scheduler) == 0


def test_zero_delay_runs_on_next_tick():
    """Test a zero delay runs on the next tick."""
    scheduler = Scheduler()
    fired = []
    scheduler.add(0, lambda: fired.append(True))
    assert fired == []
    scheduler.tick(0)
    assert fired == [True]


def test_actions_added_during_tick_wait_for_next_tick():
    """Test actions added mid-tick wait for the next tick."""
    scheduler = Scheduler()
    fired = []

    def chain():
        fired.append("outer")
        scheduler.add(0, lambda: fired.append("inner"))

    scheduler.add(0, chain)
    scheduler.tick(1)
    assert fired == ["outer"]
    scheduler.tick(1)
    assert fired == ["outer", "inner"]


def test_failing_action_does_not_stop_others(caplog):
    """Test a failing action does not stop the others."""
    scheduler = Scheduler()
    fired = []

    def boom():
        raise RuntimeError("scheduled boom")

    scheduler.add(1, boom)
    scheduler.add(1, lambda: fired.append(True))
    assert scheduler.tick(1) == 2
    assert fired == [True]
    assert any("scheduled boom" in r.getMessage() for r in caplog.records)


def test_rejects_non_callables():
    """Test non-callable actions are rejected."""
    with pytest.raises(ValueError):
        Scheduler().add(1, "not callable")


def test_clear():
    """Test clear()."""
    scheduler = Scheduler()
    scheduler.add(5, lambda: None)
    scheduler.clear()
    assert len(scheduler) == 0
    assert scheduler.tick(10) == 0
