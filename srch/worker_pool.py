import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, List

DEFAULT_POOL_SIZE = 10


class WorkerPool:
    """
    Runs tasks with at most `size` in flight.

    `submit` takes a slot before launching and blocks while every slot is
    busy; the slot goes back in the task's `finally`, so each completion
    admits exactly one more task. `join` is the barrier at the end.
    """

    def __init__(self, size: int = DEFAULT_POOL_SIZE):
        if size < 1:
            raise ValueError(f"Pool size must be at least 1, got {size}")
        self.size = size
        self._slots = threading.BoundedSemaphore(size)
        self._executor = ThreadPoolExecutor(max_workers=size, thread_name_prefix="srch-worker")
        self._futures: List[Future] = []

    def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        finally:
            self._slots.release()

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        self._slots.acquire()
        try:
            future = self._executor.submit(self._run, fn, *args)
        except BaseException:
            self._slots.release()
            raise
        self._futures.append(future)
        return future

    def join(self) -> List[Any]:
        """
        Waits for every submitted task and shuts the pool down.

        Returns:
            Task results in submission order. The first task exception, if
            any, is re-raised here.
        """
        wait(self._futures)
        self._executor.shutdown(wait=True)
        return [future.result() for future in self._futures]

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb):
        self._executor.shutdown(wait=True)
        return False
