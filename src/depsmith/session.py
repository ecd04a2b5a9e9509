# coding=utf-8
#

"""
 Copyright (c) 2020, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

from depsmith import log
from depsmith.constants import PHASE_BUILD, PHASE_CLEAN
from depsmith.error import DepSmithError
from depsmith.pyutils import struct
from depsmith.graph import DependencyGraph, checkCycles, makeBuildPlan, \
                           makeCleanPlan
from depsmith.tracker import RebuildTracker, PENDING, BUILT, FAILED
from depsmith.executor import PhaseExecutor, makeScope, printLine

# states for the report only
CLEANED = 'cleaned'
UPTODATE = 'up-to-date'

ReportEntry = struct('ReportEntry', 'name, state')

class SessionReport(object):
    """
    Result of one session command: terminal state of every library
    from the plan and the error which stopped the command if any.
    """

    __slots__ = ('phase', 'entries', 'error')

    def __init__(self, phase, entries, error = None):
        self.phase = phase
        self.entries = entries
        self.error = error

    @property
    def ok(self):
        """ True if nothing has failed """
        if self.error is not None:
            return False
        return all(x.state != FAILED for x in self.entries)

    @property
    def states(self):
        """ Dict name -> state """
        return { x.name: x.state for x in self.entries }

    def namesWithState(self, state):
        """ Names of libraries with selected state in plan order """
        return [x.name for x in self.entries if x.state == state]

    def summary(self):
        """ Text with state of every library """

        lines = ['Results of %r:' % self.phase]
        width = max([len(x.name) for x in self.entries] + [1])
        for entry in self.entries:
            lines.append('  %s : %s' % (entry.name.ljust(width), entry.state))
        return '\n'.join(lines)

class Session(object):
    """
    Build session: graph, rebuild tracker and phase executor over
    a set of library declarations. State of libraries is kept between
    calls of 'build' and 'clean' until the session object is dropped.
    """

    def __init__(self, declarations, timeout = None, baseEnv = None,
                 outCallback = printLine):

        self.declarations = declarations
        self.graph = DependencyGraph.build(declarations)
        checkCycles(self.graph)

        self.tracker = RebuildTracker(self.graph)
        # failed library -> error of the step which caused the failure
        self.failures = {}
        self.executor = PhaseExecutor(timeout = timeout,
                                      outCallback = outCallback,
                                      baseEnv = baseEnv)

    def plan(self, targets = None):
        """ Get build plan for targets, all libraries by default """
        return makeBuildPlan(self.graph, targets)

    def assumeBuilt(self, names):
        """ Outputs of these libraries are used without building them """
        self.tracker.assumeBuilt(names)

    def _runPhase(self, name, phase, isAvailable):
        decl = self.declarations[name]
        scope = makeScope(name, self.declarations, isAvailable)
        self.executor.run(decl, phase, scope)

    def build(self, targets = None, force = False):
        """
        Build targets with all their dependencies in dependency order.
        Stops on the first failure. Returns SessionReport.
        """

        plan = makeBuildPlan(self.graph, targets)
        tracker = self.tracker

        if force:
            for name in (targets or plan):
                tracker.markDirty(name)

        states = {}
        error = None
        for name in plan:

            if tracker.state(name) == FAILED:
                states[name] = FAILED
                if error is None:
                    error = self.failures.get(name)
                continue

            if not tracker.shouldBuild(name):
                log.debug('Library %r is up to date: skipping', name)
                states[name] = UPTODATE
                continue

            log.printStep('Building library %r', name)
            # libraries that use this one must be rebuilt after it
            tracker.markDirty(name)
            tracker.startBuild(name)
            try:
                self._runPhase(name, PHASE_BUILD, tracker.isAvailable)
            except DepSmithError as ex:
                for failed in tracker.markFailed(name):
                    self.failures.setdefault(failed, ex)
                    if failed in plan:
                        states[failed] = FAILED
                error = ex
                break

            tracker.markBuilt(name)
            states[name] = BUILT

        entries = [ReportEntry(x, states.get(x, PENDING)) for x in plan]
        return SessionReport(PHASE_BUILD, entries, error)

    def clean(self, targets = None):
        """
        Clean selected libraries, dependents first.
        Stops on the first failure. Returns SessionReport.
        """

        plan = makeCleanPlan(self.graph, targets)
        tracker = self.tracker

        def isAvailable(_):
            # cleaning doesn't build anything so all outputs are expected
            return True

        states = {}
        error = None
        for name in plan:
            log.printStep('Cleaning library %r', name)
            tracker.markDirty(name)
            try:
                self._runPhase(name, PHASE_CLEAN, isAvailable)
            except DepSmithError as ex:
                # library and its dependents can not be built in this session
                for failed in tracker.markFailed(name):
                    self.failures.setdefault(failed, ex)
                states[name] = FAILED
                error = ex
                break
            states[name] = CLEANED

        entries = [ReportEntry(x, states.get(x, PENDING)) for x in plan]
        return SessionReport(PHASE_CLEAN, entries, error)
