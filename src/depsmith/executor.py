# coding=utf-8
#

"""
 Copyright (c) 2020, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys

from depsmith import log, utils
from depsmith.constants import SCOPE_PWD, SCOPE_OUTPUT, SCOPE_DEP_OUTPUT_SUFFIX
from depsmith.error import DepSmithError, StepExecutionError
from depsmith.subst import substVars
from depsmith.buildconf.types import ShellCommand, EnvSetter

def resolveOutput(name, declarations):
    """
    Return resolved absolute output path of the library. Only ${pwd} can be
    used in the output template, relative result is relative to ${pwd}.
    """

    decl = declarations[name]
    pwd = declarations.abspath(name)
    output = substVars(decl.output, { SCOPE_PWD : pwd })
    return os.path.normpath(os.path.join(pwd, output))

def _relativeLocation(dep, name, declarations):
    # location of dependency from the parent directory of the library
    start = os.path.dirname(declarations.abspath(name))
    try:
        return os.path.relpath(declarations.abspath(dep), start)
    except ValueError:
        # different drives on windows
        return declarations.abspath(dep)

def makeScope(name, declarations, isAvailable):
    """
    Make placeholder scope for the library: 'pwd', 'output' and two
    entries for each dependency for which isAvailable(depname) returns True:
    ${depname} is the relative location of the dependency directory, so
    '${pwd}/../${depname}' is the dependency directory, and
    ${depname.output} is the resolved output of the dependency.
    """

    decl = declarations[name]
    scope = {}
    for dep in decl.depends:
        if isAvailable(dep):
            scope[dep] = _relativeLocation(dep, name, declarations)
            scope[dep + SCOPE_DEP_OUTPUT_SUFFIX] = resolveOutput(dep, declarations)

    scope[SCOPE_PWD] = declarations.abspath(name)
    scope[SCOPE_OUTPUT] = resolveOutput(name, declarations)
    return scope

def printLine(line, err):
    """ Default output callback for subprocess lines """
    line = '  %s' % line
    stream = sys.stderr if err else sys.stdout
    stream.write(line)
    stream.flush()

class PhaseExecutor(object):
    """
    Runs steps of one phase of a library.
    """

    def __init__(self, timeout = None, outCallback = printLine, baseEnv = None):
        self.timeout = timeout
        self.outCallback = outCallback
        if baseEnv is None:
            baseEnv = os.environ
        # snapshot, the parent environment is never changed
        self.baseEnv = dict(baseEnv)

    def _runCommand(self, decl, phase, cmd, cwd, env):

        log.info('  [%s] %s', decl.name, cmd, extra = { 'c1': log.colors.GREEN })
        try:
            result = utils.runCmd(cmd, cwd = cwd, env = env, shell = True,
                                  timeout = self.timeout,
                                  outCallback = self.outCallback)
        except DepSmithError as ex:
            raise StepExecutionError(decl.name, phase, cmd, ex = ex) from ex

        if result.exitcode != 0:
            raise StepExecutionError(decl.name, phase, cmd, result.exitcode)

    def run(self, decl, phase, scope):
        """
        Run all steps of the phase in order and stop on the first failed one.
        Raises UnresolvedPlaceholderError or StepExecutionError.
        """

        cwd = scope[SCOPE_PWD]
        if not os.path.isdir(cwd):
            msg = "Library %r: directory %r doesn't exist." % (decl.name, cwd)
            raise StepExecutionError(decl.name, phase, None, msg = msg)

        overlay = dict(self.baseEnv)
        for step in decl.steps(phase):
            if isinstance(step, EnvSetter):
                value = substVars(step.value, scope)
                log.debug('[%s] set env %s=%r', decl.name, step.name, value)
                overlay[step.name] = value
            elif isinstance(step, ShellCommand):
                cmd = substVars(step.cmd, scope)
                self._runCommand(decl, phase, cmd, cwd, overlay)
            else:
                raise TypeError("Unknown step type: %r" % step)
