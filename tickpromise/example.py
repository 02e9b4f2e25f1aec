# -*- coding: utf-8 -*-
"""Read a file asynchronously, through a DeferredValue.

The blocking read is done in a worker thread; the DeferredValue is consumed
either by an asyncio coroutine (``await``), or by a generator decorated by
``reduce_coroutine`` when the 'queue' scheduler is configured.
"""

import argparse
import asyncio
import logging

from .common import config
from .common import log
from .promise import (QueueScheduler, ThreadPoolExecutor, reduce_coroutine,
                      set_default_scheduler)

_logger = logging.getLogger(__name__)

_default_executor = None

MESSAGE = ("Successfully asynchronously read file '%s' thanks to "
           "'DeferredValue' class, data from file: %s")


def _read_text(path, encoding):
    with open(path, encoding=encoding) as text_file:
        return text_file.read()


def _get_default_executor():
    global _default_executor
    if _default_executor is None:
        _default_executor = ThreadPoolExecutor(config.get('max_workers'))
    return _default_executor


def read_file(path, encoding='utf-8', executor=None):
    """Read the whole content of a text file.

    Args:
        path (str): path of the file to read.
        encoding (str, optional): encoding of the file.
        executor (ThreadPoolExecutor, optional): pool doing the blocking
            read. By default, a pool shared by the module is used; its size
            is the 'max_workers' config entry.
    Returns:
        DeferredValue<str>: fulfilled with the file content, or rejected with
            the OSError raised by the read.
    """
    if executor is None:
        executor = _get_default_executor()
    return executor.submit(_read_text, path, encoding)


async def _print_file_async(path, executor):
    data = await read_file(path, executor=executor)
    print(MESSAGE % (path, data))


@reduce_coroutine()
def _print_file(path, executor):
    data = yield read_file(path, executor=executor)
    print(MESSAGE % (path, data))
    yield None


def _run_with_queue(path, executor):
    scheduler = QueueScheduler()
    previous = set_default_scheduler(scheduler)
    try:
        done = _print_file(path, executor)
        scheduler.run_until(done.is_settled)
        done.result()
    finally:
        set_default_scheduler(previous)


def main(argv=None):
    """Entry point of the `tickpromise-read` command."""
    parser = argparse.ArgumentParser(
        description='Read a text file using DeferredValue.')
    parser.add_argument('path', nargs='?', default='example.txt',
                        help='file to read (default: example.txt)')
    args = parser.parse_args(argv)

    with log.Context():
        config.load()
        log.set_debug_mode(config.get('debug_mode'))
        log.set_logs_level(config.get('log_levels'))

        scheduler_name = config.get('scheduler')
        _logger.debug('Read "%s" using the %s scheduler', args.path,
                      scheduler_name)

        with ThreadPoolExecutor(config.get('max_workers')) as executor:
            try:
                if scheduler_name == 'queue':
                    _run_with_queue(args.path, executor)
                else:
                    asyncio.run(_print_file_async(args.path, executor))
            except (OSError, IOError):
                _logger.error('Unable to read the file "%s"', args.path,
                              exc_info=True)
                return 1
    return 0
