# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys
import logging
from depsmith.constants import APPNAME, PLATFORM
from depsmith.utils import envValToBool

_COLORS_LST = {
    'USE' : 1,
    'BOLD'  : '\x1b[01;1m',
    'RED'   : '\x1b[01;31m',
    'GREEN' : '\x1b[32m',
    'YELLOW': '\x1b[33m',
    'PINK'  : '\x1b[35m',
    'BLUE'  : '\x1b[01;34m',
    'CYAN'  : '\x1b[36m',
    'GREY'  : '\x1b[37m',
    'NORMAL': '\x1b[0m',
}

colorSettings = _COLORS_LST

class _Colors(object):
    """
    Access to terminal colors: colors.RED or colors('RED').
    Returns empty strings while colors are disabled.
    """

    def __call__(self, name):
        if not colorSettings['USE']:
            return ''
        return colorSettings.get(name, '')

    def __getattr__(self, name):
        return self(name)

colors = _Colors()

class _Formatter(logging.Formatter):
    """ Formatter with colors from the record fields 'c1' and 'c2' """

    def format(self, record):

        msg = record.getMessage()

        c1 = getattr(record, 'c1', None)
        if c1 is None:
            if record.levelno >= logging.ERROR:
                c1 = colors.RED
            elif record.levelno >= logging.WARNING:
                c1 = colors.YELLOW
            elif record.levelno >= logging.INFO:
                c1 = ''
            else:
                c1 = colors.GREY
        c2 = getattr(record, 'c2', colors.NORMAL if c1 else '')

        if record.levelno < logging.INFO and _verbose > 1:
            msg = '%s: %s' % (record.name, msg)

        return '%s%s%s' % (c1, msg, c2)

class _StreamHandler(logging.StreamHandler):
    """ Sends warnings and errors into stderr and anything else into stdout """

    def emit(self, record):
        self.stream = sys.stderr if record.levelno >= logging.WARNING else sys.stdout
        super().emit(record)

_verbose = 0
_logger = logging.getLogger(APPNAME)

def _initLog():
    handler = _StreamHandler()
    handler.setFormatter(_Formatter())
    _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)
    _logger.propagate = False

if not _logger.handlers:
    _initLog() # pragma: no cover

def debug(*args, **kwargs):
    """ Log debug message, it's shown only with verbose mode """
    _logger.debug(*args, **kwargs)

def info(*args, **kwargs):
    """ Log info message """
    _logger.info(*args, **kwargs)

def warn(*args, **kwargs):
    """ Log warning message """
    _logger.warning(*args, **kwargs)

def error(*args, **kwargs):
    """ Log error message """
    _logger.error(*args, **kwargs)

def pprint(color, msg, **kwargs):
    """ Print message with selected color """
    extra = kwargs.pop('extra', {})
    extra['c1'] = colors(color)
    _logger.info(msg, extra = extra, **kwargs)

def enableColorsByCli(colorArg):
    """
    Set up log colors by arg from CLI
    """

    setting = {'yes' : 2, 'auto' : 1, 'no' : 0}[colorArg]
    if setting == 1:
        onTTY = os.environ.get('DEPSMITH_ON_TTY')
        if onTTY:
            onTTY = envValToBool(onTTY)
        else:
            onTTY = sys.stderr.isatty() or sys.stdout.isatty()
        if not onTTY:
            setting = 0

    if setting == 1:
        defaultTerm = 'dumb'
        if PLATFORM == 'windows':
            defaultTerm = ''
        if os.environ.get('TERM', defaultTerm) in ('dumb', 'emacs'):
            setting = 0

    colorSettings['USE'] = setting

def colorsEnabled():
    """ Return True if color output is enabled """
    return bool(colorSettings['USE'])

def verbose():
    """ Get current verbosity level """
    return _verbose

def setVerbose(value):
    """ Set verbosity level, debug messages are shown with level >= 1 """

    global _verbose # pylint: disable = global-statement
    _verbose = value
    _logger.setLevel(logging.DEBUG if value > 0 else logging.INFO)

def printStep(*args, **kwargs):
    """
    Log some step in a depsmith command
    """

    extra = kwargs.get('extra', {})
    if 'c1' not in extra:
        extra.update({ 'c1': colors.CYAN })
        kwargs.update({'extra' : extra})
    info(*args, **kwargs)
