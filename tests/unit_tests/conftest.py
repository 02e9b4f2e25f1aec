# -*- coding: utf-8 -*-

import pytest

from tickpromise.common import path as tickpromise_path
from tickpromise.promise import QueueScheduler, set_default_scheduler


@pytest.fixture
def scheduler(request):
    """Deterministic scheduler, also installed as the default scheduler.

    The previous default scheduler is restored at the end of the test.

    Returns:
        QueueScheduler: callbacks are executed only by ``run()``.
    """
    queue_scheduler = QueueScheduler()
    previous = set_default_scheduler(queue_scheduler)
    request.addfinalizer(lambda: set_default_scheduler(previous))
    return queue_scheduler


@pytest.fixture
def user_dirs(tmpdir, monkeypatch):
    """Redirect the config and log folders into a temporary folder.

    Returns:
        tuple: (config_dir, log_dir)
    """
    config_dir = str(tmpdir.mkdir('config'))
    log_dir = str(tmpdir.mkdir('log'))
    monkeypatch.setattr(tickpromise_path, 'get_config_dir',
                        lambda: config_dir)
    monkeypatch.setattr(tickpromise_path, 'get_log_dir', lambda: log_dir)
    return config_dir, log_dir
