# -*- coding: utf-8 -*-
"""Schedulers run callbacks later, in the order they were submitted.

A DeferredValue never calls its computation directly: it submits it to a
scheduler, who runs it on a later turn. Two implementations are available:

- ``AsyncioScheduler`` uses the asyncio event loop. It's the default.
- ``QueueScheduler`` keeps the callbacks in a queue until ``run()`` is
  called. It's fully deterministic, and mostly useful for tests or programs
  without an event loop.
"""

import asyncio
from collections import deque
import logging
from threading import Condition

_logger = logging.getLogger(__name__)


class Scheduler(object):
    """Interface of the schedulers."""

    def schedule(self, callback, *args):
        """Run `callback(*args)` on a later turn.

        Callbacks must be executed in submission order.
        """
        raise NotImplementedError()

    def bound(self):
        """Returns a scheduler usable from other threads.

        It must be called from the scheduling thread. The returned scheduler
        will run its callbacks on this same thread.
        """
        return self


class AsyncioScheduler(Scheduler):
    """Schedule the callbacks in an asyncio event loop.

    If no loop is given, the running loop is used at each call.
    """

    def __init__(self, loop=None):
        self._loop = loop

    def _get_loop(self):
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError('AsyncioScheduler needs a running event loop. '
                               'Use a QueueScheduler outside of asyncio.')

    def schedule(self, callback, *args):
        # call_soon_threadsafe keeps the same FIFO order as call_soon.
        self._get_loop().call_soon_threadsafe(callback, *args)

    def bound(self):
        if self._loop is not None:
            return self
        return AsyncioScheduler(self._get_loop())


class QueueScheduler(Scheduler):
    """Queue of callbacks, executed only when asked.

    `schedule()` can be called from any thread; `run()`, `run_once()` and
    `run_until()` execute the callbacks in the calling thread.
    """

    def __init__(self):
        self._queue = deque()
        self._condition = Condition()

    def __len__(self):
        with self._condition:
            return len(self._queue)

    def schedule(self, callback, *args):
        with self._condition:
            self._queue.append((callback, args))
            self._condition.notify()

    def run_once(self):
        """Execute the oldest callback in queue.

        Returns:
            boolean: True if a callback has been executed; False if the queue
                was empty.
        """
        with self._condition:
            if not self._queue:
                return False
            callback, args = self._queue.popleft()
        callback(*args)
        return True

    def run(self):
        """Execute the callbacks until the queue is empty.

        Callbacks scheduled during the run are executed too.

        Returns:
            int: number of callbacks executed.
        """
        count = 0
        while self.run_once():
            count += 1
        _logger.log(5, 'QueueScheduler: %s callbacks executed', count)
        return count

    def run_until(self, predicate):
        """Execute the callbacks until `predicate()` returns True.

        When the queue is empty, it waits for callbacks scheduled by other
        threads. It will block forever if nothing is ever scheduled.

        Args:
            predicate (callable): checked before each callback.
        Returns:
            int: number of callbacks executed.
        """
        count = 0
        while not predicate():
            with self._condition:
                while not self._queue:
                    self._condition.wait()
                callback, args = self._queue.popleft()
            callback(*args)
            count += 1
        return count


_default_scheduler = AsyncioScheduler()


def get_default_scheduler():
    """Scheduler used by the DeferredValues created without one."""
    return _default_scheduler


def set_default_scheduler(scheduler):
    """Replace the default scheduler.

    Args:
        scheduler (Scheduler): new default scheduler.
    Returns:
        Scheduler: the previous default scheduler.
    """
    global _default_scheduler
    previous, _default_scheduler = _default_scheduler, scheduler
    return previous
