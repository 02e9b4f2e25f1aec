# -*- coding: utf-8 -*-

from .deferred_value import DeferredValue, as_exception
from .util import is_thenable


def reduce_coroutine(safeguard=False):
    """Decorator who converts a coroutine of DeferredValues into a single one.

    The greatest interest is the ability to write a function in an
    synchronous-like style, using many asynchronous DeferredValues:

        >>> @reduce_coroutine()
        ... def read_both(a, b):
        ...     data_a = yield read_file(a)
        ...     data_b = yield read_file(b)
        ...     yield data_a + data_b

    Each `yield` of a thenable suspends the generator until it's settled: the
    value is sent back, or the reason is thrown inside the generator.
    The first non-thenable value yielded settles the resulting DeferredValue.
    If the generator ends instead, the value returned by the generator is
    used, or the last value sent to it.

    Args:
        safeguard (boolean): if true, use `DeferredValue.safeguard()` on the
            resulting DeferredValue.
    """

    def decorator(func):
        def wrapper(*args, **kwargs):
            """
            Args:
                *args
                **kwargs
            Returns:
                DeferredValue<*>
            """
            result = DeferredValue(name='COROUTINE %s' % func.__name__)
            if safeguard:
                result.safeguard()

            try:
                # Create generator; Initialization phase
                gen = func(*args, **kwargs)
            except Exception as error:
                result.reject(error)
                return result

            def _call_next_or_set_result(value):
                if is_thenable(value):
                    value.then(iter_next, iter_error)
                else:
                    gen.close()
                    result.fulfill(value)

            def iter_next(yielded_value):
                try:
                    next_value = gen.send(yielded_value)
                except StopIteration as stop:
                    if stop.value is not None:
                        return result.fulfill(stop.value)
                    return result.fulfill(yielded_value)
                except Exception as error:
                    return result.reject(error)
                _call_next_or_set_result(next_value)

            def iter_error(reason):
                try:
                    next_value = gen.throw(as_exception(reason))
                except StopIteration:
                    return result.reject(reason)
                except Exception as error:
                    return result.reject(error)
                _call_next_or_set_result(next_value)

            # Start and resolve loop.
            try:
                first = next(gen)
            except StopIteration:
                result.fulfill(None)
                return result
            except Exception as error:
                result.reject(error)
                return result
            _call_next_or_set_result(first)

            return result

        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        return wrapper
    return decorator
