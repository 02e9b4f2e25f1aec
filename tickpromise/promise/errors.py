# -*- coding: utf-8 -*-


class PromiseError(Exception):
    """Base class of the errors raised by the promise module."""
    pass


class PendingError(PromiseError):
    """The outcome of a DeferredValue has been requested before settlement.
    """
    pass


class RejectedError(PromiseError):
    """A DeferredValue has been rejected with a non-exception reason.

    Attributes:
        reason: the original rejection reason.
    """

    def __init__(self, reason):
        PromiseError.__init__(self, 'Rejected with %r' % (reason,))
        self.reason = reason
