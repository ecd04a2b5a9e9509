# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import sys

from depsmith.constants import EXIT_OK, EXIT_ERROR, EXIT_UNKNOWN_DEPENDENCY, \
                               EXIT_CYCLIC_DEPENDENCY, EXIT_UNRESOLVED_PLACEHOLDER, \
                               EXIT_STEP_FAILED, EXIT_INTERRUPTED
from depsmith import log, error, cli

_EXIT_CODES = (
    (error.UnknownDependencyError, EXIT_UNKNOWN_DEPENDENCY),
    (error.UnknownLibraryError, EXIT_UNKNOWN_DEPENDENCY),
    (error.CyclicDependencyError, EXIT_CYCLIC_DEPENDENCY),
    (error.UnresolvedPlaceholderError, EXIT_UNRESOLVED_PLACEHOLDER),
    (error.StepExecutionError, EXIT_STEP_FAILED),
)

def exitCodeFor(ex):
    """
    Get exit code for an exception
    """

    for errType, code in _EXIT_CODES:
        if isinstance(ex, errType):
            return code
    return EXIT_ERROR

def handleCLI(args, options = None):
    """
    Handle CLI and return command object
    """

    cmd = cli.parseAll(args, options)

    error.verbose = cmd.args.verbose
    log.setVerbose(cmd.args.verbose)
    if 'color' in cmd.args:
        log.enableColorsByCli(cmd.args.color)

    return cmd

def _logError(ex):
    if log.verbose() > 1:
        log.pprint('RED', ex.fullmsg)
    log.error(ex.msg)

def _finishReport(report):
    log.info(report.summary())
    if report.ok:
        return EXIT_OK
    _logError(report.error)
    return exitCodeFor(report.error)

def _showPlan(session, targets):
    plan = session.plan(targets)
    log.printStep('Build order:')
    for i, name in enumerate(plan, 1):
        deps = session.graph.deps(name)
        line = '  %d. %s' % (i, name)
        if deps:
            line += ' (depends on: %s)' % ', '.join(deps)
        log.info(line)
    return EXIT_OK

def runCommand(cmd, declarations):
    """
    Run command 'build', 'clean' or 'plan' over declarations.
    Returns exit code.
    """

    from depsmith.session import Session

    args = cmd.args
    targets = args.libraries or None

    session = Session(declarations, timeout = args.get('timeout'))

    if cmd.name == 'plan':
        return _showPlan(session, targets)

    prebuilt = args.get('prebuilt')
    if prebuilt:
        session.assumeBuilt(prebuilt)

    if cmd.name == 'clean' or args.get('clean'):
        code = _finishReport(session.clean(targets))
        if code != EXIT_OK or cmd.name == 'clean':
            return code

    return _finishReport(session.build(targets, force = args.get('force', False)))

def run(argv = None):
    """
    Prepare and run DepSmith. Returns exit code.
    """

    from depsmith.buildconf import loader

    if argv is None:
        argv = sys.argv

    try:
        cmd = handleCLI(argv)

        if cmd.name == 'version':
            from depsmith.version import versionText
            log.info(versionText(cmd.args.verbose))
            return EXIT_OK

        declarations = loader.load(cmd.args.get('confDir'), cmd.args.get('conf'))
        return runCommand(cmd, declarations)

    except error.DepSmithError as ex:
        _logError(ex)
        return exitCodeFor(ex)
    except KeyboardInterrupt:
        log.pprint('RED', 'Interrupted')
        return EXIT_INTERRUPTED

def main():
    """ Entry point for console script """
    sys.exit(run())
