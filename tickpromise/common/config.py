# -*- coding: utf-8 -*-

"""Settings of tickpromise, stored in the ini file ``tickpromise.ini``.

All entries live in the ``[config]`` section. Each known entry has a type and
a default value; a missing or malformed entry falls back to its default.
``load()`` must be called once before reading the settings from the file.
"""

import configparser
import logging
import os.path
from . import path as tickpromise_path

_logger = logging.getLogger(__name__)

_SECTION = 'config'


def _parse_levels(text):
    """Parse a 'module=level;module2=level2' string into a dict."""
    levels = {}
    for pair in text.split(';'):
        if not pair.strip():
            continue
        name, sep, level = pair.partition('=')
        if not sep or '=' in level:
            _logger.warning('Unable to parse pair key=value: "%s"', pair)
            continue
        levels[name.strip()] = level.strip()
    return levels


def _format_levels(levels):
    return ';'.join('%s=%s' % item for item in sorted(levels.items()))


# Known entries: key -> (default value, reader).
# A reader takes the parser, the section and the key.
_default_config = {
    'debug_mode': (False, configparser.ConfigParser.getboolean),
    'log_levels': (
        {}, lambda parser, *args: _parse_levels(parser.get(*args))),
    'scheduler': ('asyncio', configparser.ConfigParser.get),
    'max_workers': (2, configparser.ConfigParser.getint),
}

_config_parser = configparser.ConfigParser()
_config_parser.add_section(_SECTION)


def _get_config_file_path():
    return os.path.join(tickpromise_path.get_config_dir(), 'tickpromise.ini')


def load():
    """Read the config file, if any, from the user config folder."""
    file_path = _get_config_file_path()
    if not _config_parser.read(file_path):
        _logger.warning('Unable to load config file: %s', file_path)


def get(key):
    """Returns the typed value of a configuration entry.

    Raises:
        KeyError: if `key` is not a known entry.
    """
    default, reader = _default_config[key]
    if not _config_parser.has_option(_SECTION, key):
        return default
    try:
        return reader(_config_parser, _SECTION, key)
    except ValueError:
        _logger.warning('Invalid value for config entry "%s". Default value '
                        'will be used.', key)
        return default


def set(key, value):
    """Change a configuration entry, and save the config file.

    Dict values are stored as 'key=value;key2=value2'. A failure to write the
    file is logged; the new value stays in memory.

    Raises:
        KeyError: if `key` is not a known entry.
    """
    if key not in _default_config:
        raise KeyError(key)
    text = _format_levels(value) if isinstance(value, dict) else str(value)
    _config_parser.set(_SECTION, key, text)

    file_path = _get_config_file_path()
    try:
        with open(file_path, 'w') as config_file:
            _config_parser.write(config_file)
    except OSError:
        _logger.warning('Unable to write the config file %s', file_path,
                        exc_info=True)
    else:
        _logger.debug('Config file %s saved.', file_path)
