"""
Single-threaded scheduling for the dashboard client.

Every callback runs on one loop thread, so the client state is only touched
from one place. Blocking network calls go to a small worker pool and their
results are posted back onto the loop. Every scheduled callback returns a
Handle that the owner cancels on stop/teardown.
"""

from concurrent.futures import ThreadPoolExecutor
import heapq
import itertools
import logging
import threading
import time

logger = logging.getLogger(__name__)


class Handle:
    """Cancellable reference to a scheduled (possibly repeating) callback."""

    def __init__(self, when, callback, args=(), interval=None):
        self.when = when
        self.callback = callback
        self.args = args
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    @property
    def active(self):
        return not self.cancelled

    def __repr__(self):
        state = 'cancelled' if self.cancelled else 'pending'
        return f"<Handle {getattr(self.callback, '__name__', self.callback)} at {self.when:.3f} {state}>"


class BaseLoop:
    """Timer queue shared by the threaded loop and deterministic test loops."""

    def __init__(self):
        self._queue = []
        self._seq = itertools.count()

    def clock(self):
        raise NotImplementedError

    def _push(self, handle):
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def call_later(self, delay, callback, *args):
        return self._push(Handle(self.clock() + delay, callback, args))

    def call_soon(self, callback, *args):
        return self.call_later(0, callback, *args)

    def call_every(self, interval, callback, *args):
        """Run ``callback`` every ``interval`` seconds, first run after one interval."""
        return self._push(Handle(self.clock() + interval, callback, args, interval=interval))

    def _pop_due(self, now):
        """Next due, non-cancelled handle or None."""
        while self._queue and self._queue[0][0] <= now:
            _, _, handle = heapq.heappop(self._queue)
            if not handle.cancelled:
                return handle
        return None

    def _run_handle(self, handle):
        try:
            handle.callback(*handle.args)
        except Exception:
            logger.exception("Scheduled callback %r failed", handle)
        if handle.interval is not None and not handle.cancelled:
            handle.when += handle.interval
            self._push(handle)

    def pending(self):
        return [h for _, _, h in self._queue if not h.cancelled]


class EventLoop(BaseLoop):
    """Loop thread plus worker pool for the live client."""

    def __init__(self, max_workers=3):
        super().__init__()
        self._cond = threading.Condition()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="network")
        self._thread = None
        self._running = False

    def clock(self):
        return time.monotonic()

    def _push(self, handle):
        with self._cond:
            super()._push(handle)
            self._cond.notify()
        return handle

    def submit(self, func, on_done, *args):
        """Run blocking ``func`` on the worker pool, then ``on_done(result)`` on the loop."""
        future = self._executor.submit(func, *args)

        def _done(f):
            try:
                result = f.result()
            except Exception:
                logger.exception("Background task %s failed", getattr(func, '__name__', func))
                return
            self.call_soon(on_done, result)

        future.add_done_callback(_done)
        return future

    def start(self):
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(target=self._run_loop, name="dashboard-loop", daemon=True)
        self._thread.start()

    def stop(self, wait=True):
        with self._cond:
            self._running = False
            self._cond.notify()
        if self._thread is not None and wait and threading.current_thread() is not self._thread:
            self._thread.join()
        self._executor.shutdown(wait=False)

    def _run_loop(self):
        while True:
            with self._cond:
                if not self._running:
                    return
                handle = self._pop_due(self.clock())
                if handle is None:
                    timeout = self._queue[0][0] - self.clock() if self._queue else None
                    self._cond.wait(timeout)
                    continue
            self._run_handle(handle)
