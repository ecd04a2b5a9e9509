# coding=utf-8
#

# pylint: skip-file

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import pytest

from depsmith import log, error

_MONITORED_ENV_VARS = (
    'DEPSMITH_TIMEOUT', 'DEPSMITH_CONF_DIR', 'DEPSMITH_ON_TTY', 'NOCOLOR',
)

@pytest.hookimpl(hookwrapper = True, tryfirst = True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    rep = outcome.get_result()
    setattr(item, "rep_" + rep.when, rep)

@pytest.fixture(autouse = True)
def restoreLogSettings():
    verbose = log.verbose()
    colorsUse = log.colorSettings['USE']
    errVerbose = error.verbose
    yield
    log.setVerbose(verbose)
    log.colorSettings['USE'] = colorsUse
    error.verbose = errVerbose

@pytest.fixture
def unsetEnviron(monkeypatch):
    for v in _MONITORED_ENV_VARS:
        monkeypatch.delenv(v, raising = False)

@pytest.fixture
def libsroot(tmpdir):
    return str(tmpdir.realpath())

@pytest.fixture
def noColors():
    log.colorSettings['USE'] = 0
