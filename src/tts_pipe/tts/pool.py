"""
Fixed-Size Worker Pool.

A set of worker threads pulling tasks from one FIFO queue and delivering
outcomes through concurrent.futures.Future objects.

How It Works:
    1. execute(task) queues the task with a fresh Future and a copy of the
       caller's contextvars (the job id used by logging)
    2. An idle worker pops the oldest task and runs ``handler(task)``
    3. The handler's return value or exception is set on the Future
    4. The worker goes back to the queue

    Tasks start in submission order; they may finish in any order.

Termination:
    terminate() fails every queued and in-flight Future with
    PoolTerminatedError and stops the workers. An in-flight handler keeps
    running to completion in its thread, but its outcome is discarded.
    execute() after terminate() raises PoolTerminatedError at once.

Usage:
    with WorkerPool(4, handler) as pool:
        futures = [pool.execute(task) for task in tasks]
        results = [f.result() for f in futures]
"""
from __future__ import annotations

import contextvars
import threading
from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List

from tts_pipe.core.errors import PoolTerminatedError
from tts_pipe.core.logging import debug, get_logger
from tts_pipe.core.metrics import metrics

_LOG = get_logger("tts-pipe.pool")


@dataclass
class _QueuedTask:
    task: Any
    future: Future
    context: contextvars.Context


@dataclass
class PoolStats:
    """Snapshot of pool occupancy."""
    total_workers: int
    idle_workers: int
    busy_workers: int
    queued_tasks: int


class WorkerPool:
    """
    Bounded pool of worker threads.

    Thread Safety:
        Queue, in-flight map and the terminated flag are guarded by one
        Condition. Futures are completed while holding it, after checking
        that termination has not already failed them.

    Args:
        size: Number of worker threads (>= 1).
        handler: Callable run for each task; its return value becomes the
            Future's result, an exception it raises becomes the Future's
            exception.
        name: Thread name prefix.
    """

    def __init__(self, size: int, handler: Callable[[Any], Any], name: str = "tts-pipe-worker"):
        if size < 1:
            raise ValueError(f"size must be >= 1, got {size}")
        self.size = size
        self._handler = handler
        self._cond = threading.Condition()
        self._queue: Deque[_QueuedTask] = deque()
        self._active: Dict[int, _QueuedTask] = {}
        self._terminated = False

        self._threads: List[threading.Thread] = []
        for i in range(size):
            t = threading.Thread(target=self._worker_loop, args=(i,), name=f"{name}-{i}", daemon=True)
            self._threads.append(t)
            t.start()
        debug(_LOG, "pool_started", workers=size)

    @property
    def terminated(self) -> bool:
        with self._cond:
            return self._terminated

    def execute(self, task: Any) -> Future:
        """
        Queue a task.

        Returns:
            Future resolved with the handler's result or exception.

        Raises:
            PoolTerminatedError: If the pool has been terminated.
        """
        item = _QueuedTask(task=task, future=Future(), context=contextvars.copy_context())
        with self._cond:
            if self._terminated:
                raise PoolTerminatedError("Worker pool has been terminated")
            self._queue.append(item)
            self._cond.notify()
        return item.future

    def _worker_loop(self, worker_id: int) -> None:
        while True:
            with self._cond:
                while not self._queue and not self._terminated:
                    self._cond.wait()
                if self._terminated:
                    return
                item = self._queue.popleft()
                # False means the caller cancelled the future while queued
                if not item.future.set_running_or_notify_cancel():
                    continue
                self._active[worker_id] = item

            metrics.worker_busy()
            try:
                result = item.context.run(self._handler, item.task)
            except BaseException as e:
                # SystemExit and friends also resolve the future; the worker keeps serving
                error, result = e, None
            else:
                error = None
            finally:
                metrics.worker_idle()

            with self._cond:
                if self._active.get(worker_id) is not item:
                    # Terminated while running; the future already failed
                    debug(_LOG, "result_discarded", worker=worker_id)
                    continue
                del self._active[worker_id]
                if not item.future.done():
                    if error is not None:
                        item.future.set_exception(error)
                    else:
                        item.future.set_result(result)

    def terminate(self) -> None:
        """Fail all queued and in-flight tasks and stop the workers. Idempotent."""
        with self._cond:
            if self._terminated:
                return
            self._terminated = True

            queued = len(self._queue)
            for item in self._queue:
                if item.future.set_running_or_notify_cancel():
                    item.future.set_exception(PoolTerminatedError())
            self._queue.clear()

            in_flight = len(self._active)
            for item in self._active.values():
                if not item.future.done():
                    item.future.set_exception(PoolTerminatedError())
            self._active.clear()

            self._cond.notify_all()
        debug(_LOG, "pool_terminated", queued=queued, in_flight=in_flight)

    def stats(self) -> PoolStats:
        with self._cond:
            total = 0 if self._terminated else self.size
            busy = len(self._active)
            return PoolStats(
                total_workers=total,
                idle_workers=max(0, total - busy),
                busy_workers=busy,
                queued_tasks=len(self._queue),
            )

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.terminate()
