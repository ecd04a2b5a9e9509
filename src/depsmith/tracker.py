# coding=utf-8
#

"""
 Copyright (c) 2020, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import threading

from depsmith.error import DepSmithLogicError, UnknownLibraryError

PENDING = 'pending'
BUILDING = 'building'
BUILT = 'built'
FAILED = 'failed'

class RebuildTracker(object):
    """
    Tracks build states of libraries and the set of 'dirty' libraries
    that must be (re)built in the current session.
    """

    def __init__(self, graph):
        self._graph = graph
        self._lock = threading.Lock()
        self._states = dict.fromkeys(graph.nodes, PENDING)
        self._dirty = set()
        self._built = set()
        self._prebuilt = set()

    def state(self, name):
        """ Get current state of the library """
        return self._states[name]

    @property
    def dirty(self):
        """ Copy of the current set of dirty libraries """
        with self._lock:
            return set(self._dirty)

    def markDirty(self, name):
        """
        Mark library and all libraries that depend on it as dirty
        """

        names = self._graph.allDependents(name)
        names.add(name)
        with self._lock:
            self._dirty.update(names)

    def isDirty(self, name):
        """ Return True if library is in the dirty set """
        with self._lock:
            return name in self._dirty

    def shouldBuild(self, name):
        """
        Return True if library must be built: it's dirty or it has never
        been built in this session and is not prebuilt. Failed library is
        never built again.
        """

        with self._lock:
            if self._states[name] == FAILED:
                return False
            if name in self._dirty:
                return True
            return name not in self._built and name not in self._prebuilt

    def assumeBuilt(self, names):
        """
        Treat libraries as already built outside of this session:
        their outputs are available and they are not built until
        they become dirty.
        """

        for name in names:
            if name not in self._states:
                raise UnknownLibraryError(name)
        with self._lock:
            self._prebuilt.update(names)

    def isAvailable(self, name):
        """ Return True if output of the library can be used by dependents """
        with self._lock:
            return name in self._built or name in self._prebuilt

    def startBuild(self, name):
        """ Switch library into 'building' state """

        with self._lock:
            if self._states[name] == FAILED:
                raise DepSmithLogicError("Library %r has failed already" % name)
            self._states[name] = BUILDING

    def markBuilt(self, name):
        """ Library has been built successfully """

        with self._lock:
            if self._states[name] != BUILDING:
                raise DepSmithLogicError("Library %r is not being built" % name)
            self._states[name] = BUILT
            self._built.add(name)
            self._dirty.discard(name)

    def markFailed(self, name):
        """
        Mark library and all libraries that depend on it as failed.
        Returns set of marked libraries.
        """

        names = self._graph.allDependents(name)
        names.add(name)
        with self._lock:
            for _name in names:
                self._states[_name] = FAILED
        return names
