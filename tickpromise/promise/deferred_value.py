# -*- coding: utf-8 -*-

import asyncio
import logging
import threading
from .errors import PendingError, RejectedError
from .scheduler import get_default_scheduler
from .util import is_thenable

_logger = logging.getLogger(__name__)


class DeferredValue(object):
    """A value produced later by a single asynchronous computation.

    The DeferredValue is settled exactly once: either fulfilled with a value,
    or rejected with a reason. Reactions registered with `then()`, `catch()`
    and `finally_()` are themselves DeferredValues, settled from the outcome
    of their parent. The parent keeps its children in two queues until it's
    settled; a child never knows its parent.

    A DeferredValue has one of three kinds:
    - 'plain': a root value, settled by its computation or by an explicit call
        to `fulfill()` / `reject()`.
    - 'reaction': created by `then()`. Its outcome is derived from the
        `on_fulfilled` or `on_rejected` callback.
    - 'finalizer': created by `finally_()`. Its `on_settled` callback is
        called, then it mirrors the outcome of its parent.

    There is no lock: all methods are expected to be called from the thread
    running the scheduler.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    PLAIN = 'plain'
    REACTION = 'reaction'
    FINALIZER = 'finalizer'

    def __init__(self, computation=None, scheduler=None, name=None):
        """Constructor of the DeferredValue.

        The computation is never called by the constructor itself. It's
        submitted to the scheduler, and will be executed on a later turn.
        If the computation raises an exception, it's caught and the
        DeferredValue is rejected with this exception.

        Args:
            computation (callable, optional): Takes 2 callable arguments:
                `fulfill(value)` and `reject(reason)`. If not set, the
                DeferredValue stays pending until `fulfill()` or `reject()`
                is called.
            scheduler (Scheduler, optional): scheduler used to run the
                computation. Default to the process-wide default scheduler.
            name (str, optional): if set, name used when converted to text.
        """
        self._state = self.PENDING
        self._payload = None
        self._name = name or getattr(computation, '__name__', '???')

        self._kind = self.PLAIN
        self._on_fulfilled = None
        self._on_rejected = None
        self._on_settled = None

        self._reactions = []
        self._finalizers = []

        if computation is not None:
            if scheduler is None:
                scheduler = get_default_scheduler()
            scheduler.schedule(self._run_computation, computation)

    @classmethod
    def _reaction(cls, on_fulfilled, on_rejected):
        if not on_rejected:
            name = getattr(on_fulfilled, '__name__', '???')
        elif not on_fulfilled:
            name = '<None, %s>' % getattr(on_rejected, '__name__', '???')
        else:
            name = '<%s, %s>' % (getattr(on_fulfilled, '__name__', '???'),
                                 getattr(on_rejected, '__name__', '???'))
        node = cls(name=name)
        node._kind = cls.REACTION
        node._on_fulfilled = on_fulfilled
        node._on_rejected = on_rejected
        return node

    @classmethod
    def _finalizer(cls, on_settled):
        node = cls(name='FINALLY %s' % getattr(on_settled, '__name__', '???'))
        node._kind = cls.FINALIZER
        node._on_settled = on_settled
        return node

    def _run_computation(self, computation):
        try:
            computation(self.fulfill, self.reject)
        except Exception as error:
            self.reject(error)

    @property
    def state(self):
        return self._state

    @property
    def payload(self):
        """Value or reason of the settlement. None while pending."""
        return self._payload

    def is_pending(self):
        return self._state == self.PENDING

    def is_fulfilled(self):
        return self._state == self.FULFILLED

    def is_rejected(self):
        return self._state == self.REJECTED

    def is_settled(self):
        return self._state != self.PENDING

    def result(self):
        """Returns the value of a fulfilled DeferredValue.

        Returns:
            *: value encapsulated, defined by the computation.
        Raises:
            PendingError: if the DeferredValue is not settled yet.
            *: If the DeferredValue is rejected, the rejection reason is
                raised. If the reason is not an exception, it's wrapped into
                a `RejectedError`.
        """
        if self._state == self.PENDING:
            raise PendingError('%r is not settled' % self)
        elif self._state == self.REJECTED:
            raise as_exception(self._payload)
        return self._payload

    def exception(self):
        """Returns the rejection reason.

        Returns:
            *: the reason of the rejection, or None if fulfilled.
        Raises:
            PendingError: if the DeferredValue is not settled yet.
        """
        if self._state == self.PENDING:
            raise PendingError('%r is not settled' % self)
        elif self._state == self.REJECTED:
            return self._payload
        return None

    def fulfill(self, value=None):
        """Settle the DeferredValue with a value.

        Only the first settlement is stored. A late call still fans out with
        its own argument, over queues emptied by the first settlement.
        """
        if self._state != self.PENDING:
            _logger.warning('Try to fulfill %r already settled. New value '
                            'will be ignored: %r', self, value)
        else:
            self._payload = value
            self._state = self.FULFILLED
        self._drain_reaction_queue(value)

    def reject(self, reason=None):
        """Settle the DeferredValue with a failure reason.

        Only the first settlement is stored, like `fulfill()`.
        """
        if self._state != self.PENDING:
            _logger.warning('Try to reject %r already settled. New reason '
                            'will be ignored: %r', self, reason)
        else:
            self._payload = reason
            self._state = self.REJECTED
        self._drain_reaction_queue(reason)

    def _drain_reaction_queue(self, payload):
        if self._state == self.PENDING:
            return

        # Detach the queues first: a callback may register new reactions on
        # this same instance, which are run at registration.
        reactions, self._reactions = self._reactions, []
        finalizers, self._finalizers = self._finalizers, []

        _propagate([(node, self._state, payload)
                    for node in reactions + finalizers])

    def _run(self, state, payload):
        """Settle this child node from the outcome of its parent."""
        if self._kind == self.REACTION:
            if state == self.FULFILLED:
                self._run_on_fulfilled(payload)
            else:
                self._run_on_rejected(payload)
        elif self._kind == self.FINALIZER:
            self._on_settled()
            if state == self.FULFILLED:
                self.fulfill(payload)
            else:
                self.reject(payload)
        else:
            raise ValueError('%r is not a child node' % self)

    def _run_on_fulfilled(self, value):
        if not callable(self._on_fulfilled):
            return self.fulfill()

        try:
            new_value = self._on_fulfilled(value)
        except Exception as error:
            return self._run_on_rejected(error)
        self._adopt(new_value)

    def _run_on_rejected(self, reason):
        if not callable(self._on_rejected):
            return self.reject(reason)

        # Errors raised by the rejection handler are not caught: they
        # propagate to the caller of the fan-out.
        new_value = self._on_rejected(reason)
        self._adopt(new_value)

    def _adopt(self, value):
        """Fulfill with value, or follow its outcome if it's a thenable."""
        if is_thenable(value):
            value.then(self._adopt, self.reject)
        else:
            self.fulfill(value)

    def then(self, on_fulfilled=None, on_rejected=None):
        """Create a new DeferredValue from callbacks called at settlement.

        If self is fulfilled, the `on_fulfilled` callback will be called.
        Otherwise, the `on_rejected` callback is called. The returned value
        defines the outcome of the new DeferredValue:
        - A value: the new DeferredValue is fulfilled with it.
        - A DeferredValue, or any object with a `then` method: its outcome is
            transferred to the new DeferredValue when it settles.

        If `on_fulfilled` raises an exception, the new DeferredValue goes
        through its own rejection path with it: `on_rejected` is called if
        set, else the DeferredValue is rejected.
        An exception raised by `on_rejected` is not caught.

        Without `on_fulfilled`, a fulfillment gives a new DeferredValue
        fulfilled with None. Without `on_rejected`, a rejection is passed
        as-is to the new DeferredValue.

        If self is already settled, the callback is called before this method
        returns. When `then()` is itself called from a callback, the new one
        runs as soon as the running callback returns, in the same turn.

        Args:
            on_fulfilled (callable, optional): receives the value of self.
            on_rejected (callable, optional): receives the reason of the
                rejection of self.
        Returns:
            DeferredValue: new DeferredValue depending of self.
        """
        node = self._reaction(on_fulfilled, on_rejected)
        self._reactions.append(node)

        if self._state != self.PENDING:
            self._drain_reaction_queue(self._payload)
        return node

    def catch(self, on_rejected):
        """Create a new DeferredValue with a callback called on rejection.

        Alias of `self.then(None, on_rejected)`.
        """
        return self.then(None, on_rejected)

    def finally_(self, on_settled):
        """Register a callback called once self is settled, whatever the result.

        On a pending DeferredValue, returns a new DeferredValue who calls
        `on_settled()` then takes the exact outcome (value or reason) of
        self.

        On an already settled DeferredValue, `on_settled()` is called
        immediately and nothing is returned: there is no node to chain.

        Args:
            on_settled (callable): called without argument.
        Returns:
            DeferredValue: the new node, or None if self is already settled.
        """
        if self._state != self.PENDING:
            self._drain_reaction_queue(self._payload)
            on_settled()
            return None

        node = self._finalizer(on_settled)
        self._finalizers.append(node)
        return node

    def safeguard(self):
        """Log the rejection of this DeferredValue, if it happens.

        Rejections without handler are silently kept. Calling `safeguard()`
        at the end of a chain logs them as ERROR, with the traceback when
        the reason is an exception.
        """
        def guard(reason):
            if isinstance(reason, BaseException):
                _logger.error('[SAFEGUARD] %r', self, exc_info=(
                    type(reason), reason, reason.__traceback__))
            else:
                _logger.error('[SAFEGUARD] %r rejected with %r', self,
                              reason)

        self.catch(guard)

    def __await__(self):
        """Wait the settlement from an asyncio coroutine.

        The DeferredValue is bridged to an asyncio Future of the running
        loop: `await d` returns the value, or raises the rejection reason.
        """
        future = asyncio.get_running_loop().create_future()

        def on_fulfilled(value):
            if not future.done():
                future.set_result(value)

        def on_rejected(reason):
            if not future.done():
                future.set_exception(as_exception(reason))

        self.then(on_fulfilled, on_rejected)
        return future.__await__()

    def __repr__(self):
        if self._state == self.REJECTED:
            state = 'R'
        elif self._state == self.FULFILLED:
            state = 'F'
        else:
            state = 'P'
        return 'DeferredValue(%s %s)' % (self._name, state)

    @classmethod
    def resolved(cls, value):
        """Create a DeferredValue already fulfilled with the value.

        Args:
            value: result of the DeferredValue. If it's a thenable, it's
                returned as is.
        Returns:
            DeferredValue
        """
        if is_thenable(value):
            return value
        d = cls(name='RESOLVED')
        d.fulfill(value)
        return d

    @classmethod
    def rejected(cls, reason):
        """Create a DeferredValue already rejected for the reason specified.
        """
        d = cls(name='REJECTED')
        d.reject(reason)
        return d


# ``finally`` is a reserved keyword; `getattr(d, 'finally')` still works.
setattr(DeferredValue, 'finally', DeferredValue.finally_)


_propagation = threading.local()


def _propagate(entries):
    """Settle the child nodes, depth-first, without recursion.

    Only the outermost call runs the loop. A settlement happening inside
    the loop (a child settled, or a reaction registered on a settled value)
    pushes its own children on top of the stack, so they are run before the
    siblings of their parent, in registration order.

    If a child raises (a failing `on_rejected`), the remaining entries are
    dropped and the error propagates to the outermost caller.

    Args:
        entries (list): tuples (node, state, payload) of the parent.
    """
    stack = getattr(_propagation, 'stack', None)
    if stack is not None:
        stack.extend(reversed(entries))
        return

    stack = _propagation.stack = list(reversed(entries))
    try:
        while stack:
            node, state, payload = stack.pop()
            node._run(state, payload)
    finally:
        _propagation.stack = None


def as_exception(reason):
    """Returns the reason as an exception instance, ready to be raised."""
    if isinstance(reason, BaseException):
        return reason
    return RejectedError(reason)
