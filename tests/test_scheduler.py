"""Tests for the deferred fire scheduler."""

from noteinvaders.scheduler import FireScheduler


def test_runs_only_due_events_in_time_order():
    sched = FireScheduler()
    ran = []
    sched.schedule(0.3, lambda: ran.append("c"))
    sched.schedule(0.1, lambda: ran.append("a"))
    sched.schedule(0.2, lambda: ran.append("b"))
    assert sched.run_due(0.25) == 2
    assert ran == ["a", "b"]
    assert len(sched) == 1


def test_same_due_time_keeps_schedule_order():
    sched = FireScheduler()
    ran = []
    for name in "xyz":
        sched.schedule(1.0, lambda name=name: ran.append(name))
    sched.run_due(1.0)
    assert ran == ["x", "y", "z"]


def test_cancel_by_tag():
    sched = FireScheduler()
    ran = []
    sched.schedule(0.1, lambda: ran.append("single"), tag="single")
    sched.schedule(0.1, lambda: ran.append("charge"), tag="charge")
    assert sched.pending("charge") == 1
    assert sched.cancel("charge") == 1
    sched.run_due(1.0)
    assert ran == ["single"]


def test_cancel_all():
    sched = FireScheduler()
    ran = []
    sched.schedule(0.1, lambda: ran.append(1))
    sched.schedule(0.2, lambda: ran.append(2), tag="charge")
    assert sched.cancel() == 2
    assert sched.run_due(10.0) == 0
    assert ran == []
