"""Runtime services: a worker-thread task scheduler, allocation accounting,
a stopwatch timer and a named-event dispatcher."""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

_log = logging.getLogger(__name__)

_STOP = object()

Task = Callable[[], Any]
EventHandler = Callable[[Any], Any]


class TaskScheduler:
    """Runs queued callables on a fixed pool of worker threads.

    Shutting down lets the workers finish every task already queued before
    they exit.
    """

    def __init__(self, num_threads: Optional[int] = None) -> None:
        if num_threads is None:
            num_threads = os.cpu_count() or 1
        if num_threads < 1:
            raise ValueError("a scheduler needs at least one worker thread")
        self._tasks: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()
        self._stopped = False
        self._workers = [
            threading.Thread(target=self._work, name=f"astrakit-worker-{n}", daemon=True)
            for n in range(num_threads)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            task = self._tasks.get()
            if task is _STOP:
                return
            try:
                task()
            except Exception:
                _log.exception("scheduled task failed")

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    def enqueue(self, task: Task) -> None:
        """Queue a callable taking no arguments."""
        if not callable(task):
            raise TypeError("task must be callable")
        with self._lock:
            if self._stopped:
                raise RuntimeError("scheduler has been shut down")
            self._tasks.put(task)

    def shutdown(self) -> None:
        """Stop accepting tasks, run the queued ones and join the workers."""
        with self._lock:
            if not self._stopped:
                self._stopped = True
                for _ in self._workers:
                    self._tasks.put(_STOP)
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def __enter__(self) -> "TaskScheduler":
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()


class MemoryManager:
    """Hands out byte buffers and keeps count of the bytes outstanding."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._blocks: Dict[int, Tuple[bytearray, int]] = {}
        self._total = 0
        self._max = 0

    def allocate(self, size: int) -> bytearray:
        """Return a zeroed buffer of ``size`` bytes and record it."""
        if size < 0:
            raise ValueError("size must not be negative")
        block = bytearray(size)
        with self._lock:
            self._blocks[id(block)] = (block, size)
            self._total += size
            self._max = max(self._max, self._total)
        return block

    def deallocate(self, block: bytearray) -> None:
        """Release a buffer obtained from :meth:`allocate`."""
        with self._lock:
            entry = self._blocks.get(id(block))
            if entry is None or entry[0] is not block:
                raise ValueError("block was not allocated by this manager")
            del self._blocks[id(block)]
            self._total -= entry[1]

    def total_allocated(self) -> int:
        with self._lock:
            return self._total

    def max_allocated(self) -> int:
        with self._lock:
            return self._max


class Timer:
    """A stopwatch; while running, elapsed time is measured up to now."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._start = time.perf_counter()
        self._running = True

    def stop(self) -> None:
        self._end = time.perf_counter()
        self._running = False

    def elapsed_milliseconds(self) -> float:
        if self._start is None:
            return 0.0
        end = time.perf_counter() if self._running or self._end is None else self._end
        return (end - self._start) * 1000.0

    def elapsed_seconds(self) -> float:
        return self.elapsed_milliseconds() / 1000.0


class EventSystem:
    """Maps event names to handlers called in registration order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: Dict[str, List[EventHandler]] = {}

    def add_event_listener(self, event: str, handler: EventHandler) -> None:
        with self._lock:
            self._handlers.setdefault(event, []).append(handler)

    def remove_event_listener(self, event: str) -> None:
        """Drop every handler registered for ``event``."""
        with self._lock:
            self._handlers.pop(event, None)

    def dispatch_event(self, event: str, data: Any) -> None:
        with self._lock:
            handlers = list(self._handlers.get(event, ()))
        for handler in handlers:
            handler(data)


class Runtime:
    """Bundles the runtime services; the timer starts on construction."""

    def __init__(self, num_threads: Optional[int] = None) -> None:
        self.scheduler = TaskScheduler(num_threads)
        self.memory_manager = MemoryManager()
        self.event_system = EventSystem()
        self.timer = Timer()
        self.timer.start()

    def close(self) -> None:
        self.scheduler.shutdown()

    def __enter__(self) -> "Runtime":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()