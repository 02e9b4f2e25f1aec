# -*- coding: utf-8 -*-

"""Configuration module of the logs.

This module configure the python ``logging`` module, for the command line
tools of tickpromise. The library itself only emits log records, using one
logger per module.

Log entries are written in a file, rotated every day, and displayed to the
output console. On console output, if the system supports it, logs entries
will be colorized.
"""

import logging
import logging.handlers
import os.path
import sys

from . import path as tickpromise_path

# Level used for very verbose messages, like the scheduler internals.
HIDEBUG = 5


def _support_color_output():
    """Try to guess if the standard output supports color term code.

    Returns:
        boolean: True if we are sure the output supports color; False otherwise
    """
    if hasattr(sys.stdout, 'isatty') and sys.stdout.isatty():
        if not sys.platform.startswith('win'):
            return True
    return False


def _get_file_handler(filename, nb_max_files=7):
    """Open a new file for using as a log output.

    The handler rotates the log file at midnight, and keeps at most
    `nb_max_files` old files.

    Args:
        filename (str): name of the log file. Ex: 'tickpromise.log'
    Returns:
        FileHandler: a valid fileHandler using the log file, or None if the
            file creation has failed.
    """
    try:
        log_path = os.path.join(tickpromise_path.get_log_dir(), filename)
        return logging.handlers.TimedRotatingFileHandler(
            log_path, when='midnight', backupCount=nb_max_files)
    except (OSError, IOError):
        logging.getLogger(__name__).warning('Unable to create the log file',
                                            exc_info=True)
        return None


class ColoredFormatter(logging.Formatter):
    """Formatter who display colored messages using ANSI escape codes."""

    _colors = {
        'RESET': '\033[0m',
        'HIDEBUG': '\033[34m',
        'DEBUG': '\033[34m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[31m',
        'NAME': '\033[36m',
        'DATE': '\033[30;1m',
        'EXCEPTION_NAME': '\033[31;1m',
        'EXCEPTION_STR': '\033[37;1m'
    }

    def _colorize(self, msg, color):
        return self._colors.get(color, '') + msg + self._colors.get('RESET')

    def formatTime(self, record, datefmt=None):
        result = logging.Formatter.formatTime(self, record, datefmt)
        return self._colorize(result, 'DATE')

    def formatException(self, ei):
        msg = logging.Formatter.formatException(self, ei)
        msg_lines = msg.split('\n')
        last_line = msg_lines[-1]
        result = '\n'.join(msg_lines[:-1]) + '\n'
        result += self._colorize(last_line.split(':')[0], 'EXCEPTION_NAME')
        result += ':' + self._colorize(':'.join(last_line.split(':')[1:]),
                                       'EXCEPTION_STR')
        return result

    def format(self, record):
        # The record is shared between handlers: work on a copy.
        record = logging.makeLogRecord(record.__dict__)
        record.name = self._colorize(record.name, 'NAME')
        record.levelname = self._colorize(record.levelname, record.levelname)
        return logging.Formatter.format(self, record)


class Context(object):
    """Context class used to open and close log handlers."""

    def __init__(self, filename='tickpromise.log'):
        """Prepare a new log context.

        Args:
            filename (str): name of the log file. If None, no log file is
                used.
        """
        self._filename = filename
        self._handlers = []

    def __enter__(self):
        """Open the log file and prepare the logging module."""

        logging.captureWarnings(True)
        logging.addLevelName(HIDEBUG, 'HIDEBUG')

        root_logger = logging.getLogger()

        date_format = '%Y-%m-%d %H:%M:%S'
        string_format = '%(asctime)s %(levelname)-7s %(name)s - %(message)s'
        formatter = logging.Formatter(fmt=string_format, datefmt=date_format)

        stdout_handler = logging.StreamHandler()
        if _support_color_output():
            stdout_handler.setFormatter(
                ColoredFormatter(fmt=string_format, datefmt=date_format))
        else:
            stdout_handler.setFormatter(formatter)
        self._handlers.append(stdout_handler)

        if self._filename:
            file_handler = _get_file_handler(self._filename)
            if file_handler:
                file_handler.setFormatter(formatter)
                self._handlers.append(file_handler)

        for handler in self._handlers:
            root_logger.addHandler(handler)

        # Before any configuration, all messages should be displayed.
        set_debug_mode(True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Release resources (log files, ...)"""
        logging.getLogger(__name__).debug('Stop logger ...')
        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []


def set_logs_level(levels):
    """Configure a fine-grained log levels for the different modules.

    Args:
        levels (dict): A dict associating a module name and a log level. A
            log level can be a number or a str representing one of the
            logging levels (DEBUG, WARNING, ...). The level name will be
            converted to uppercase.
            Invalids values will be ignored.

    Example:

        >>> # Accept DEBUG logs only for the scheduler.
        >>> set_logs_level({'tickpromise': 'info',
        ...                 'tickpromise.promise.scheduler': 'debug'})
    """
    for (module, level) in levels.items():
        try:
            if isinstance(level, str):
                level = int(level) if level.isdigit() else level.upper()
            logging.getLogger(module).setLevel(level)
        except ValueError:
            logger = logging.getLogger(__name__)
            logger.warning('Invalid log level "%s" for logger "%s". '
                           'Will be ignored.',
                           level, module)


def set_debug_mode(debug):
    """Set, or unset the debug log level.

    Note: modules others than tickpromise.* are never set to DEBUG. If
    needed, use ``set_logs_level()``.

    Args:
        debug (boolean): if True, the tickpromise log level will be set to
            DEBUG. If False, it will be set to INFO.
    """
    if debug:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger('tickpromise').setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger('tickpromise').setLevel(logging.INFO)
