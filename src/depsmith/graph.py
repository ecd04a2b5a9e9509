# coding=utf-8
#

"""
 Copyright (c) 2020, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.

 Dependency graph of libraries and ordering of libraries by it.
"""

import heapq

from depsmith.error import UnknownDependencyError, UnknownLibraryError, \
                           CyclicDependencyError

class DependencyGraph(object):
    """
    Graph where an edge A -> B means that library A depends on library B.
    """

    __slots__ = ('_nodes', '_deps', '_dependents', '_order')

    def __init__(self, deps):
        """
        Param 'deps' is an ordered mapping: name -> list of dependency names.
        Use DependencyGraph.build to make it from declarations.
        """

        self._nodes = list(deps.keys())
        self._order = { name: i for i, name in enumerate(self._nodes) }
        self._deps = { name: tuple(names) for name, names in deps.items() }
        self._dependents = { name: [] for name in self._nodes }
        for name in self._nodes:
            for dep in self._deps[name]:
                self._dependents[dep].append(name)

    @classmethod
    def build(cls, declarations):
        """
        Make graph from declarations.
        All dependency names are checked before any graph is made.
        """

        names = set(x.name for x in declarations)
        for decl in declarations:
            for dep in decl.depends:
                if dep not in names:
                    raise UnknownDependencyError(decl.name, dep)

        ordered = sorted(declarations, key = lambda x: x.order)
        return cls({ x.name: x.depends for x in ordered })

    @property
    def nodes(self):
        """ All names in declaration order """
        return list(self._nodes)

    def __contains__(self, name):
        return name in self._order

    def __len__(self):
        return len(self._nodes)

    def deps(self, name):
        """ Direct dependencies of the library """
        return self._deps[name]

    def dependents(self, name):
        """ Libraries which directly depend on the library """
        return tuple(self._dependents[name])

    def order(self, name):
        """ Index of the library in declaration order """
        return self._order[name]

    def allDependents(self, name):
        """
        Return set of libraries which depend on the library transitively
        """

        result = set()
        stack = [name]
        while stack:
            for dependent in self._dependents[stack.pop()]:
                if dependent not in result:
                    result.add(dependent)
                    stack.append(dependent)
        return result

_UNVISITED, _INPROGRESS, _DONE = range(3)

def checkCycles(graph):
    """
    Check that graph has no cycles.
    Raises CyclicDependencyError with the path of the first found cycle.
    """

    colors = dict.fromkeys(graph.nodes, _UNVISITED)

    for root in graph.nodes:
        if colors[root] != _UNVISITED:
            continue

        # iterative DFS, each stack item is (node, iterator over its deps)
        path = [root]
        colors[root] = _INPROGRESS
        stack = [(root, iter(graph.deps(root)))]
        while stack:
            node, depsIter = stack[-1]
            for dep in depsIter:
                color = colors[dep]
                if color == _INPROGRESS:
                    cycle = path[path.index(dep):] + [dep]
                    raise CyclicDependencyError(cycle)
                if color == _UNVISITED:
                    colors[dep] = _INPROGRESS
                    path.append(dep)
                    stack.append((dep, iter(graph.deps(dep))))
                    break
            else:
                colors[node] = _DONE
                path.pop()
                stack.pop()

def _checkTargets(graph, targets):
    for name in targets:
        if name not in graph:
            raise UnknownLibraryError(name)

def closure(graph, targets):
    """
    Return set with targets and all their transitive dependencies
    """

    _checkTargets(graph, targets)

    result = set()
    stack = list(targets)
    while stack:
        name = stack.pop()
        if name in result:
            continue
        result.add(name)
        stack.extend(graph.deps(name))
    return result

def makeBuildPlan(graph, targets = None):
    """
    Return tuple of library names where every dependency goes before its
    dependents. Only targets and their dependencies are included, all
    libraries if targets are not set. Libraries without ordering between
    them keep declaration order.
    """

    checkCycles(graph)

    if targets:
        names = closure(graph, targets)
    else:
        names = set(graph.nodes)

    order = graph.order
    pending = { x: sum(1 for d in graph.deps(x) if d in names) for x in names }
    ready = [(order(x), x) for x, count in pending.items() if count == 0]
    heapq.heapify(ready)

    plan = []
    while ready:
        _, name = heapq.heappop(ready)
        plan.append(name)
        for dependent in graph.dependents(name):
            if dependent not in pending:
                continue
            pending[dependent] -= 1
            if pending[dependent] == 0:
                heapq.heappush(ready, (order(dependent), dependent))

    return tuple(plan)

def makeCleanPlan(graph, targets = None):
    """
    Return tuple of library names to clean: only selected libraries
    (all if targets are not set), dependents go before their dependencies.
    """

    checkCycles(graph)

    if targets:
        _checkTargets(graph, targets)
        names = set(targets)
    else:
        names = set(graph.nodes)

    # build order over all libraries keeps the same ties as build plan
    fullPlan = makeBuildPlan(graph)
    return tuple(x for x in reversed(fullPlan) if x in names)
