# -*- coding: utf-8 -*-

from .deferred_value import DeferredValue


def wrap_deferred(f):
    """Decorator who converts the result in a DeferredValue object.

    If the function decorated returns a thenable, it's transmitted as is.
    Else, a new DeferredValue is created with the returned value as result.
    An exception raised by the function gives a rejected DeferredValue.
    """
    def wrapper(*args, **kwargs):
        try:
            return DeferredValue.resolved(f(*args, **kwargs))
        except Exception as error:
            return DeferredValue.rejected(error)

    wrapper.__name__ = getattr(f, '__name__', wrapper.__name__)
    wrapper.__doc__ = getattr(f, '__doc__', None)
    return wrapper
