# coding=utf-8
#

"""
 Copyright (c) 2020, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
from collections import OrderedDict

from depsmith.constants import PHASES
from depsmith.error import DepSmithLogicError
from depsmith.pyutils import struct

class AnyStrKey(object):
    """ Any amount of string keys"""
    __slots__ = ()

    def __eq__(self, other):
        if not isinstance(other, AnyStrKey):
            # don't attempt to compare against unrelated types
            return NotImplemented # pragma: no cover
        return True

    def __hash__(self):
        # necessary for instances to behave sanely in dicts and sets.
        return hash(self.__class__)

ANYSTR_KEY = AnyStrKey()

ShellCommand = struct('ShellCommand', 'cmd')
ShellCommand.__doc__ = "Shell command, it's executed verbatim after substitution"

EnvSetter = struct('EnvSetter', 'name, value')
EnvSetter.__doc__ = "Sets env var 'name' for the next steps of the same phase"

class LibraryDeclaration(object):
    """
    Build recipe of one library
    """

    __slots__ = ('name', 'path', 'output', 'depends', 'clean', 'build', 'order')

    def __init__(self, name, path, output, depends = (), clean = (),
                 build = (), order = 0):

        # pylint: disable = too-many-arguments

        self.name = name
        self.path = path
        self.output = output
        self.depends = tuple(depends)
        self.clean = tuple(clean)
        self.build = tuple(build)
        self.order = order

    def steps(self, phase):
        """ Get steps for the phase 'clean' or 'build' """

        if phase not in PHASES:
            raise DepSmithLogicError("Unknown phase %r" % phase)
        return getattr(self, phase)

    def __repr__(self):
        return 'LibraryDeclaration(name=%r, path=%r, depends=%r)' % \
                    (self.name, self.path, self.depends)

class Declarations(object):
    """
    Ordered set of library declarations with the root directory
    for relative library paths.
    """

    __slots__ = ('_libs', 'rootdir', 'confpath')

    def __init__(self, libs, rootdir, confpath = None):
        self._libs = OrderedDict((x.name, x) for x in libs)
        self.rootdir = os.path.abspath(rootdir)
        self.confpath = confpath

    def __getitem__(self, name):
        return self._libs[name]

    def __contains__(self, name):
        return name in self._libs

    def __iter__(self):
        return iter(self._libs.values())

    def __len__(self):
        return len(self._libs)

    @property
    def names(self):
        """ Names of all libraries in declaration order """
        return list(self._libs.keys())

    def abspath(self, name):
        """ Absolute path to the directory of the library """

        path = self._libs[name].path
        if not os.path.isabs(path):
            path = os.path.join(self.rootdir, path)
        return os.path.normpath(path)
