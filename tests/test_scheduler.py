"""
Tests for the logical clock / event queue.
"""

from amr_simulation import EventQueue


def test_events_fire_in_due_order():
    q = EventQueue()
    fired = []
    q.schedule(300, lambda: fired.append("c"))
    q.schedule(100, lambda: fired.append("a"))
    q.schedule(200, lambda: fired.append("b"))
    assert q.advance(250) == 2
    assert fired == ["a", "b"]
    assert q.now_ms == 250
    q.advance(50)
    assert fired == ["a", "b", "c"]


def test_same_due_time_keeps_schedule_order():
    q = EventQueue()
    fired = []
    for name in "xyz":
        q.schedule(100, lambda n=name: fired.append(n))
    q.advance(100)
    assert fired == ["x", "y", "z"]


def test_clock_reads_due_time_inside_callback():
    q = EventQueue()
    seen = []
    q.schedule(120, lambda: seen.append(q.now_ms))
    q.advance(500)
    assert seen == [120]
    assert q.now_ms == 500


def test_chained_events_inside_window_fire():
    q = EventQueue()
    fired = []

    def first():
        fired.append("first")
        q.schedule(100, lambda: fired.append("second"))
        q.schedule(1000, lambda: fired.append("late"))

    q.schedule(100, first)
    q.advance(250)
    assert fired == ["first", "second"]
    assert len(q) == 1


def test_cancel_single_event():
    q = EventQueue()
    fired = []
    ev = q.schedule(10, lambda: fired.append(1))
    assert q.cancel(ev)
    assert not q.cancel(ev)
    q.advance(100)
    assert fired == []
    assert len(q) == 0


def test_cancel_for_robot_and_task():
    q = EventQueue()
    fired = []
    q.schedule(10, lambda: fired.append("r1"), robot_id="AMR-1", task_id="t1")
    q.schedule(10, lambda: fired.append("r2"), robot_id="AMR-2", task_id="t2")
    q.schedule(10, lambda: fired.append("t2b"), robot_id="AMR-1", task_id="t2")
    assert q.cancel_for_robot("AMR-1") == 2
    assert [e.robot_id for e in q.pending()] == ["AMR-2"]
    assert q.cancel_for_task("t2") == 1
    q.advance(100)
    assert fired == []


def test_pending_filters_and_sorts():
    q = EventQueue()
    q.schedule(50, lambda: None, label="b", robot_id="AMR-1")
    q.schedule(10, lambda: None, label="a", robot_id="AMR-1")
    q.schedule(5, lambda: None, label="other", robot_id="AMR-2")
    assert [e.label for e in q.pending(robot_id="AMR-1")] == ["a", "b"]
    assert len(q.pending()) == 3


def test_cancel_all_and_negative_delay():
    q = EventQueue()
    fired = []
    q.schedule(-50, lambda: fired.append("now"))
    q.advance(0)
    assert fired == ["now"]
    q.schedule(10, lambda: fired.append("x"))
    q.schedule(20, lambda: fired.append("y"))
    assert q.cancel_all() == 2
    q.advance(100)
    assert fired == ["now"]
