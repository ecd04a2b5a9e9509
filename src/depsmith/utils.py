# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys
import signal
import re
import subprocess

try:
    import threading
except ImportError as _pex:
    raise ImportError('Python must have threading support') from _pex

from depsmith.pyutils import stringtype, struct
from depsmith.error import DepSmithError, DepSmithProcessTimeoutExpired

_RE_PLATFORM_VERSION = re.compile(r'\d+$')

def platform():
    """
    Return current system platform without version suffix.
    It is always 'windows' for MS Windows.
    """

    result = _RE_PLATFORM_VERSION.sub('', sys.platform)
    if result.startswith('win'):
        result = 'windows' # pragma: no cover
    return result

PLATFORM = platform()

def envValToBool(rawVal):
    """
    Return env val as native bool value.
    Returns False if not recognized.
    """

    result = False
    if rawVal:
        try:
            # value from os.environ is a string but it may be a digit
            result = bool(int(rawVal))
        except ValueError:
            result = rawVal in ('true', 'True', 'yes')

    return result

def envValToFloat(rawVal):
    """
    Return env val as float or None if it's empty or not a number.
    """

    if not rawVal:
        return None
    try:
        return float(rawVal)
    except ValueError:
        return None

ProcCmdResult = struct('ProcCmdResult', 'exitcode, stdout, stderr')

class ProcCmd(object):
    """
    Class to run external command in a subprocess
    """

    def __init__(self, cmdLine, shell = False, captureOutput = False,
                                        stdErrToOut = True, outCallback = None):

        """
        Parameter outCallback can be used to handle stdout/stderr line by line
        without waiting for a process to exit. Also if outCallback is not None
        then it means that captureOutput is True. If stdErrToOut is True it means
        that captureOutput is True as well.
        """

        self._origCmdLine = cmdLine

        if shell and not isinstance(cmdLine, stringtype):
            cmdLine = ' '.join(cmdLine)

        self._cmdLine = cmdLine
        self._outCallback = outCallback
        self._proc = None
        self._timeoutExpired = False
        self._popenArgs = {
            'shell' : shell,
            'stdout' : None,
            'stderr' : None,
            'universal_newlines' : True,
        }

        if captureOutput or outCallback is not None:
            self._popenArgs['stdout'] = subprocess.PIPE
            self._popenArgs['stderr'] = subprocess.PIPE

        if stdErrToOut:
            self._popenArgs['stdout'] = subprocess.PIPE
            self._popenArgs['stderr'] = subprocess.STDOUT

        # Use 'start_new_session' to change the process(forked) group id to itself
        # so os.killpg with proc.pid can be used.
        # This parameter does nothing on Windows.
        self._popenArgs['start_new_session'] = True

    def _communicate(self):

        callback = self._outCallback
        if callback is None:
            stdout, stderr = self._proc.communicate()
            return ProcCmdResult(self._proc.returncode, stdout, stderr)

        proc = self._proc
        if proc.stderr is None:
            # stderr is merged into stdout so a simple blocking loop is enough
            for line in proc.stdout:
                callback(line, err = False)
            proc.stdout.close()
            proc.wait()
            return ProcCmdResult(proc.returncode, None, None)

        # reading of both pipes in one thread can hang on a full pipe
        def readErr():
            for line in proc.stderr:
                callback(line, err = True)

        errThread = threading.Thread(target = readErr)
        errThread.daemon = True
        errThread.start()
        for line in proc.stdout:
            callback(line, err = False)
        errThread.join()

        proc.stdout.close()
        proc.stderr.close()
        proc.wait()
        return ProcCmdResult(proc.returncode, None, None)

    def run(self, cwd = None, env = None, timeout = None):
        """
        Run command.
        Returns ProcCmdResult.
        """

        kwargs = dict(self._popenArgs)
        kwargs.update({
            'cwd' : cwd,
            'env' : env,
        })

        timer = None
        try:
            self._proc = subprocess.Popen(self._cmdLine, **kwargs)

            if timeout is not None:
                self._timeoutExpired = False

                def killProc(self):
                    proc = self._proc
                    if kwargs.get('start_new_session') and hasattr(os, 'killpg'):
                        # If 'shell' is true then killing of current process is killing of
                        # executed shell but not childs.
                        # Unix only.
                        os.killpg(proc.pid, signal.SIGKILL)
                    else:
                        proc.kill()
                    self._timeoutExpired = True

                timer = threading.Timer(timeout, killProc, args = [self])
                # allow entire program to exit on unexpected exception like KeyboardInterrupt
                timer.daemon = True
                timer.start()

            result = self._communicate()

            if self._timeoutExpired:
                raise DepSmithProcessTimeoutExpired(self._origCmdLine, timeout,
                                                    result.stdout)

        except (OSError, subprocess.SubprocessError) as ex:
            raise DepSmithError(str(ex)) from ex
        finally:
            if timer:
                timer.cancel()

            # release Popen object
            self._proc = None

        return result

def runCmd(cmdLine, cwd = None, env = None, shell = False, timeout = None,
            captureOutput = False, stdErrToOut = False, outCallback = None):
    """
    Run external command in a subprocess.
    Parameter outCallback can be used to handle stdout/stderr line by line
    without waiting for a process to exit. Also if outCallback is not None then
    it means that captureOutput is True. If stdErrToOut is True it means
    that captureOutput is True as well.
    Returns ProcCmdResult.
    """

    # pylint: disable = too-many-arguments

    procCmd = ProcCmd(cmdLine, shell, captureOutput, stdErrToOut, outCallback)
    return procCmd.run(cwd, env, timeout)
