#!/usr/bin/env python
# -*- coding: utf-8 -*-

import logging
import os
import pytest

from tickpromise.common.config import _get_config_file_path, load, set, get, \
    _config_parser

"""### TEST CASES ###
    ## load
    config file exist
    config file does not exist

    ##get
    key does not exist
    get a bool value
    get a bool with invalid value
    get an int value
    get an int with invalid value
    get a dict
    get a dict with invalid pair
    get a not typed value
    get a default value

    ##set
    set a not existing key
    set a dict value
    set then load from file
"""


@pytest.fixture(autouse=True)
def empty_config(user_dirs):
    _config_parser.remove_section('config')
    _config_parser.add_section('config')
    return user_dirs


def _write_config(content):
    with open(_get_config_file_path(), 'w') as config_file:
        config_file.write('[config]\n' + content)


class TestConfigLoad(object):

    def test_load_without_existing_file(self, caplog):
        with caplog.at_level(logging.WARNING):
            load()
        assert 'Unable to load config file' in caplog.text

    def test_load_with_existing_file(self, caplog):
        _write_config('scheduler = queue\n')

        with caplog.at_level(logging.WARNING):
            load()
        assert caplog.records == []
        assert get('scheduler') == 'queue'

    def test_config_file_in_config_dir(self, empty_config):
        config_dir, _ = empty_config
        assert _get_config_file_path() == os.path.join(config_dir,
                                                       'tickpromise.ini')


class TestConfigGet(object):

    def test_get_unknown_key(self):
        with pytest.raises(KeyError):
            get('foo')

    def test_get_default_values(self):
        assert get('debug_mode') is False
        assert get('log_levels') == {}
        assert get('scheduler') == 'asyncio'
        assert get('max_workers') == 2

    def test_get_bool(self):
        _write_config('debug_mode = yes\n')
        load()
        assert get('debug_mode') is True

    def test_get_invalid_bool(self):
        _write_config('debug_mode = maybe\n')
        load()
        assert get('debug_mode') is False

    def test_get_int(self):
        _write_config('max_workers = 8\n')
        load()
        assert get('max_workers') == 8

    def test_get_invalid_int(self):
        _write_config('max_workers = many\n')
        load()
        assert get('max_workers') == 2

    def test_get_dict(self):
        _write_config('log_levels = tickpromise=debug;asyncio=warning\n')
        load()
        assert get('log_levels') == {'tickpromise': 'debug',
                                     'asyncio': 'warning'}

    def test_get_dict_with_invalid_pair(self, caplog):
        _write_config('log_levels = tickpromise=debug;oops\n')
        load()
        with caplog.at_level(logging.WARNING):
            assert get('log_levels') == {'tickpromise': 'debug'}
        assert 'oops' in caplog.text


class TestConfigSet(object):

    def test_set_unknown_key(self):
        with pytest.raises(KeyError):
            set('foo', 'bar')

    def test_set_writes_file(self):
        set('scheduler', 'queue')
        assert os.path.exists(_get_config_file_path())

        _config_parser.remove_section('config')
        _config_parser.add_section('config')
        assert get('scheduler') == 'asyncio'

        load()
        assert get('scheduler') == 'queue'

    def test_set_not_string_value(self):
        set('max_workers', 4)
        assert get('max_workers') == 4
        set('debug_mode', True)
        assert get('debug_mode') is True

    def test_set_dict(self):
        set('log_levels', {'tickpromise': 'info'})
        assert get('log_levels') == {'tickpromise': 'info'}
