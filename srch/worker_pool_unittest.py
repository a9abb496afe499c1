import threading
import time
import unittest

from srch import worker_pool


class TestWorkerPool(unittest.TestCase):
    def test_never_exceeds_bound(self):
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def task(n):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.01)
            with lock:
                state["active"] -= 1
            return n

        with worker_pool.WorkerPool(size=10) as pool:
            for n in range(25):
                pool.submit(task, n)
            results = pool.join()

        self.assertEqual(results, list(range(25)))
        self.assertLessEqual(state["peak"], 10)
        self.assertEqual(state["active"], 0)

    def test_submit_blocks_when_full(self):
        release = threading.Event()
        started = threading.Event()
        pool = worker_pool.WorkerPool(size=1)
        pool.submit(lambda: (started.set(), release.wait()))
        started.wait()

        submitted = threading.Event()

        def submit_second():
            pool.submit(lambda: None)
            submitted.set()

        thread = threading.Thread(target=submit_second)
        thread.start()
        self.assertFalse(submitted.wait(0.1))
        release.set()
        self.assertTrue(submitted.wait(5))
        thread.join()
        pool.join()

    def test_task_error_propagates_from_join(self):
        def fail():
            raise RuntimeError("boom")

        pool = worker_pool.WorkerPool(size=2)
        pool.submit(fail)
        pool.submit(lambda: 1)
        with self.assertRaises(RuntimeError):
            pool.join()

    def test_slot_released_after_error(self):
        pool = worker_pool.WorkerPool(size=1)
        pool.submit(lambda: 1 / 0)
        future = pool.submit(lambda: "ok")
        self.assertEqual(future.result(timeout=5), "ok")
        with self.assertRaises(ZeroDivisionError):
            pool.join()

    def test_invalid_size(self):
        with self.assertRaises(ValueError):
            worker_pool.WorkerPool(size=0)


if __name__ == '__main__':
    unittest.main()
