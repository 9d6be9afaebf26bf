import threading
import time

import pytest

from astrakit.runtime import EventSystem, MemoryManager, Runtime, TaskScheduler, Timer


@pytest.fixture
def runtime():
    with Runtime() as rt:
        yield rt


def test_task_scheduler_runs_task(runtime):
    done = threading.Event()
    runtime.scheduler.enqueue(done.set)
    assert done.wait(1.0)


def test_single_worker_runs_tasks_in_order():
    results = []
    with TaskScheduler(1) as scheduler:
        for n in range(10):
            scheduler.enqueue(lambda n=n: results.append(n))
    assert results == list(range(10))


def test_shutdown_drains_queue_and_rejects_new_tasks():
    scheduler = TaskScheduler(2)
    counter = []
    lock = threading.Lock()

    def task():
        time.sleep(0.01)
        with lock:
            counter.append(1)

    for _ in range(8):
        scheduler.enqueue(task)
    scheduler.shutdown()
    assert len(counter) == 8
    with pytest.raises(RuntimeError):
        scheduler.enqueue(task)


def test_failing_task_does_not_stop_worker():
    results = []
    with TaskScheduler(1) as scheduler:
        scheduler.enqueue(lambda: 1 / 0)
        scheduler.enqueue(lambda: results.append("ok"))
    assert results == ["ok"]


def test_scheduler_rejects_zero_threads():
    with pytest.raises(ValueError):
        TaskScheduler(0)


def test_enqueue_rejects_non_callable():
    with TaskScheduler(1) as scheduler:
        with pytest.raises(TypeError):
            scheduler.enqueue(42)


def test_memory_manager(runtime):
    manager = runtime.memory_manager
    block = manager.allocate(1024)
    assert len(block) == 1024
    assert manager.total_allocated() >= 1024
    manager.deallocate(block)
    assert manager.total_allocated() == 0


def test_memory_manager_tracks_peak():
    manager = MemoryManager()
    first = manager.allocate(100)
    second = manager.allocate(50)
    manager.deallocate(first)
    assert manager.total_allocated() == 50
    assert manager.max_allocated() == 150
    manager.deallocate(second)
    assert manager.max_allocated() == 150


def test_memory_manager_rejects_foreign_and_double_free():
    manager = MemoryManager()
    with pytest.raises(ValueError):
        manager.deallocate(bytearray(4))
    block = manager.allocate(4)
    manager.deallocate(block)
    with pytest.raises(ValueError):
        manager.deallocate(block)


def test_memory_manager_rejects_negative_size():
    with pytest.raises(ValueError):
        MemoryManager().allocate(-1)


def test_timer(runtime):
    runtime.timer.start()
    time.sleep(0.1)
    runtime.timer.stop()
    assert runtime.timer.elapsed_milliseconds() >= 100


def test_stopped_timer_is_frozen():
    timer = Timer()
    timer.start()
    timer.stop()
    first = timer.elapsed_milliseconds()
    time.sleep(0.02)
    assert timer.elapsed_milliseconds() == first
    assert timer.elapsed_seconds() == pytest.approx(first / 1000.0)


def test_unstarted_timer_reports_zero():
    assert Timer().elapsed_milliseconds() == 0.0


def test_runtime_timer_runs_from_construction(runtime):
    assert runtime.timer.running is True
    first = runtime.timer.elapsed_milliseconds()
    time.sleep(0.01)
    assert runtime.timer.elapsed_milliseconds() > first


def test_event_system(runtime):
    received = []
    runtime.event_system.add_event_listener("test", received.append)
    runtime.event_system.dispatch_event("test", 42)
    assert received == [42]


def test_event_handlers_called_in_order_and_removed():
    events = EventSystem()
    calls = []
    events.add_event_listener("tick", lambda d: calls.append(("a", d)))
    events.add_event_listener("tick", lambda d: calls.append(("b", d)))
    events.dispatch_event("tick", 1)
    events.dispatch_event("other", 2)
    events.remove_event_listener("tick")
    events.dispatch_event("tick", 3)
    assert calls == [("a", 1), ("b", 1)]


def test_runtime_close_stops_scheduler():
    rt = Runtime(num_threads=1)
    rt.close()
    with pytest.raises(RuntimeError):
        rt.scheduler.enqueue(lambda: None)