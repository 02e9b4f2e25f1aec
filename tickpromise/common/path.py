# -*- coding: utf-8 -*-
"""Per-user folders of tickpromise (config file, log files)."""

import logging
import os
import appdirs

_logger = logging.getLogger(__name__)

_user_dirs = appdirs.AppDirs(appname='tickpromise', appauthor=False)


def _make_dir(dir_path):
    """Create the folder and its parents when missing.

    A failure is logged as a warning; the path is returned anyway.
    """
    if not os.path.isdir(dir_path):
        try:
            os.makedirs(dir_path, exist_ok=True)
        except OSError:
            _logger.warning('Unable to create the missing folder "%s"',
                            dir_path, exc_info=True)
        else:
            _logger.debug('Created missing folder "%s"', dir_path)
    return dir_path


def get_log_dir():
    """Folder of the rotating log files."""
    return _make_dir(_user_dirs.user_log_dir)


def get_config_dir():
    """Folder of the ``tickpromise.ini`` file."""
    return _make_dir(_user_dirs.user_config_dir)
