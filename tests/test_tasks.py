import pytest

from motorboard.tasks import TaskScheduler


def test_task_runs_when_due():
    calls = []
    sched = TaskScheduler()
    sched.add(lambda: calls.append("a"), 1000)
    assert sched.run(999) == 0
    assert sched.run(1000) == 1
    assert calls == ["a"]


def test_last_run_updated():
    sched = TaskScheduler()
    task = sched.add(lambda: None, 10)
    sched.run(10)
    assert task.last_run == 10
    assert sched.run(15) == 0


def test_tasks_run_in_order():
    calls = []
    sched = TaskScheduler()
    sched.add(lambda: calls.append("first"), 1)
    sched.add(lambda: calls.append("second"), 1)
    sched.run(1)
    assert calls == ["first", "second"]


def test_tick_wraparound():
    sched = TaskScheduler()
    task = sched.add(lambda: None, 10)
    task.last_run = 2**32 - 5
    assert sched.run(4) == 0
    assert sched.run(5) == 1


@pytest.mark.parametrize("period", [-1, 0x10000])
def test_bad_period(period):
    with pytest.raises(ValueError):
        TaskScheduler().add(lambda: None, period)