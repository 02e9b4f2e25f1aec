# -*- coding: utf-8 -*-

import pytest

from tickpromise.promise import DeferredValue, wrap_deferred


class TestDecorator(object):

    def test_wrap_sync_function(self):
        @wrap_deferred
        def f(x):
            return x * 3

        d = f(30)
        assert isinstance(d, DeferredValue)
        assert d.result() == 90

    def test_wrap_function_returning_deferred(self):
        inner = DeferredValue()

        @wrap_deferred
        def f(x):
            return inner

        assert f(30) is inner

    def test_wrap_function_with_exception(self):
        class MyException(Exception):
            pass

        @wrap_deferred
        def f(x):
            raise MyException()

        d = f(30)
        assert isinstance(d, DeferredValue)
        with pytest.raises(MyException):
            d.result()

    def test_wrapper_keeps_name(self):
        @wrap_deferred
        def compute():
            """Doc."""

        assert compute.__name__ == 'compute'
        assert compute.__doc__ == 'Doc.'
