# -*- coding: utf-8 -*-

import asyncio
import pytest
from threading import Thread

from tickpromise.promise import (AsyncioScheduler, QueueScheduler,
                                 get_default_scheduler, set_default_scheduler)


class TestQueueScheduler(object):

    def test_callbacks_wait_for_run(self):
        scheduler = QueueScheduler()
        calls = []
        scheduler.schedule(calls.append, 1)
        assert calls == []
        assert len(scheduler) == 1

        assert scheduler.run() == 1
        assert calls == [1]
        assert len(scheduler) == 0

    def test_fifo_order(self):
        scheduler = QueueScheduler()
        calls = []
        for i in range(10):
            scheduler.schedule(calls.append, i)
        scheduler.run()
        assert calls == list(range(10))

    def test_callbacks_scheduled_during_run(self):
        scheduler = QueueScheduler()
        calls = []

        def first():
            calls.append('first')
            scheduler.schedule(calls.append, 'third')

        scheduler.schedule(first)
        scheduler.schedule(calls.append, 'second')
        assert scheduler.run() == 3
        assert calls == ['first', 'second', 'third']

    def test_run_once(self):
        scheduler = QueueScheduler()
        calls = []
        scheduler.schedule(calls.append, 1)
        scheduler.schedule(calls.append, 2)

        assert scheduler.run_once() is True
        assert calls == [1]
        assert scheduler.run_once() is True
        assert scheduler.run_once() is False
        assert calls == [1, 2]

    def test_run_until_waits_other_threads(self):
        scheduler = QueueScheduler()
        calls = []

        thread = Thread(target=scheduler.schedule, args=(calls.append, 'X'))
        thread.start()
        scheduler.run_until(lambda: calls)
        thread.join()
        assert calls == ['X']

    def test_bound_returns_itself(self):
        scheduler = QueueScheduler()
        assert scheduler.bound() is scheduler


class TestAsyncioScheduler(object):

    def test_schedule_without_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler().schedule(lambda: None)

    def test_fifo_order_in_loop(self):
        async def scenario():
            scheduler = AsyncioScheduler()
            calls = []
            for i in range(5):
                scheduler.schedule(calls.append, i)
            assert calls == []
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            return calls

        assert asyncio.run(scenario()) == [0, 1, 2, 3, 4]

    def test_bound_scheduler_from_other_thread(self):
        async def scenario():
            loop = asyncio.get_running_loop()
            bound = AsyncioScheduler().bound()
            future = loop.create_future()

            thread = Thread(target=bound.schedule,
                            args=(future.set_result, 'FROM THREAD'))
            thread.start()
            result = await future
            thread.join()
            return result

        assert asyncio.run(scenario()) == 'FROM THREAD'


class TestDefaultScheduler(object):

    def test_set_default_scheduler(self):
        scheduler = QueueScheduler()
        previous = set_default_scheduler(scheduler)
        try:
            assert get_default_scheduler() is scheduler
        finally:
            assert set_default_scheduler(previous) is scheduler

    def test_default_is_asyncio(self):
        assert isinstance(get_default_scheduler(), AsyncioScheduler)
