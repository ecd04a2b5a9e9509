# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import sys
import traceback

verbose = 2

class DepSmithError(Exception):
    """Base class for all DepSmith errors"""

    def __init__(self, msg = None, ex = None):
        if msg is None:
            msg = ''
        super(DepSmithError, self).__init__()

        self.msg = msg
        self.stack = []
        if ex:
            if not msg:
                self.msg = str(ex)
            if isinstance(ex, DepSmithError):
                self.stack = list(ex.stack)
            else:
                self.stack = traceback.extract_tb(sys.exc_info()[2])

        if verbose > 1:
            self.stack += traceback.extract_stack()[:-1]

        self.fullmsg = ''.join(traceback.format_list(self.stack))
        if self.fullmsg:
            self.fullmsg += self.msg
        else:
            self.fullmsg = self.msg

    def __str__(self):
        return str(self.msg)

class DepSmithLogicError(DepSmithError):
    """Some logic/programming error"""

class DepSmithConfError(DepSmithError):
    """Invalid depsconf file error"""

    def __init__(self, msg = None, ex = None, confpath = None):
        if msg is None:
            msg = ''
        if ex and not msg:
            msg = str(ex)
        if confpath and msg:
            _msg = "Error in the file %r:" % confpath
            for line in msg.splitlines():
                _msg += "\n  %s" % line
            msg = _msg
        self.confpath = confpath

        super(DepSmithConfError, self).__init__(msg, ex)

class DepSmithConfTypeError(DepSmithConfError):
    """Invalid depsconf param type error"""

class DepSmithConfValueError(DepSmithConfError):
    """Invalid depsconf param value error"""

class UnknownDependencyError(DepSmithError):
    """ Library depends on a name that is not declared """

    def __init__(self, name, missing, msg = None):
        self.name = name
        self.missing = missing
        if not msg:
            msg = "Library %r depends on unknown library %r." % (name, missing)
        super(UnknownDependencyError, self).__init__(msg)

class UnknownLibraryError(DepSmithError):
    """ Requested library is not declared """

    def __init__(self, name, msg = None):
        self.name = name
        if not msg:
            msg = "Library %r is not declared." % name
        super(UnknownLibraryError, self).__init__(msg)

class CyclicDependencyError(DepSmithError):
    """ Dependencies of libraries form a cycle """

    def __init__(self, cycle, msg = None):
        self.cycle = list(cycle)
        if not msg:
            msg = "Dependency cycle was found: %s" % ' -> '.join(self.cycle)
        super(CyclicDependencyError, self).__init__(msg)

class UnresolvedPlaceholderError(DepSmithError):
    """ Placeholder has no value in the current scope """

    def __init__(self, name, template, msg = None):
        self.name = name
        self.template = template
        if not msg:
            msg = "Placeholder ${%s} in %r can not be resolved." % (name, template)
        super(UnresolvedPlaceholderError, self).__init__(msg)

class StepExecutionError(DepSmithError):
    """ Step of a phase failed: non-zero exit code, spawn error or timeout """

    def __init__(self, library, phase, cmd, exitcode = None, msg = None, ex = None):
        self.library = library
        self.phase = phase
        self.cmd = cmd
        self.exitcode = exitcode
        if not msg:
            if exitcode is not None:
                msg = "Library %r, phase %r: command %r failed with exit code %d." \
                        % (library, phase, cmd, exitcode)
            else:
                reason = str(ex) if ex else 'unknown reason'
                msg = "Library %r, phase %r: command %r failed: %s" \
                        % (library, phase, cmd, reason)
        super(StepExecutionError, self).__init__(msg, ex)

class DepSmithProcessTimeoutExpired(DepSmithError):
    """ Raised when a timeout expires while waiting for a process """

    def __init__(self, cmd, timeout, output = None, msg = None):
        self.cmd = cmd
        self.timeout = timeout
        self.output = output

        if not msg:
            msg = "Timeout (%s sec.) for command expired." % timeout
            msg += "\nCommand: %r" % cmd
            if output:
                msg += '\nCaptured output:\n'
                msg += output
        super(DepSmithProcessTimeoutExpired, self).__init__(msg)
