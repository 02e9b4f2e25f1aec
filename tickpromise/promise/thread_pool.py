# -*- coding: utf-8 -*-

from concurrent.futures import ThreadPoolExecutor as Executor
import logging
from .deferred_value import DeferredValue
from .scheduler import get_default_scheduler

_logger = logging.getLogger(__name__)


class ThreadPoolExecutor(object):
    """Execute blocking callables in other threads, on demand.

    The callable runs in a worker thread, but the resulting DeferredValue is
    always settled in the thread of the scheduler.
    """

    def __init__(self, max_workers, scheduler=None):
        """Initialize the thread pool

        Args:
            max_workers: The maximum number of threads that can be used to
                execute the given calls.
            scheduler (Scheduler, optional): scheduler used by the
                DeferredValues. Default to the default scheduler.
        """
        self._executor = Executor(max_workers)
        self._scheduler = scheduler

    def submit(self, callback, *args, **kwargs):
        """Schedule the callable to be executed and return a DeferredValue.

        The callable is submitted to the pool by the computation of the
        DeferredValue, on the next turn of the scheduler.

        Args:
            callback (callable): callback who will run in another thread.
            *args: argument passed to callback.
            **kwargs: keywords arguments passed to callback.
        Returns:
            DeferredValue: fulfilled with the value returned by the callback.
                If the callback raise an exception, it's rejected with this
                exception.
        """
        scheduler = self._scheduler
        if scheduler is None:
            scheduler = get_default_scheduler()

        def computation(fulfill, reject):
            origin = scheduler.bound()

            def settle(f):
                error = f.exception()
                if error is not None:
                    reject(error)
                else:
                    fulfill(f.result())

            def on_future_done(f):
                origin.schedule(settle, f)

            _logger.debug('Submit %s to the thread pool',
                          getattr(callback, '__name__', callback))
            f = self._executor.submit(callback, *args, **kwargs)
            f.add_done_callback(on_future_done)

        computation.__name__ = getattr(callback, '__name__', '???')
        return DeferredValue(computation, scheduler=scheduler)

    def shutdown(self, wait=True):
        """Release the worker threads."""
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, _type, _value, _tb):
        self.shutdown()
