# -*- coding: utf-8 -*-

from .decorators import wrap_deferred
from .deferred_value import DeferredValue
from .errors import PendingError, PromiseError, RejectedError
from .reduce_coroutine import reduce_coroutine
from .scheduler import (AsyncioScheduler, QueueScheduler, Scheduler,
                        get_default_scheduler, set_default_scheduler)
from .thread_pool import ThreadPoolExecutor
from .util import is_thenable

__all__ = ['is_thenable', 'AsyncioScheduler', 'DeferredValue', 'PendingError',
           'PromiseError', 'QueueScheduler', 'RejectedError', 'Scheduler',
           'ThreadPoolExecutor', 'get_default_scheduler', 'reduce_coroutine',
           'set_default_scheduler', 'wrap_deferred']
