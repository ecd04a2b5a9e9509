# coding=utf-8
#

# pylint: disable = missing-docstring, invalid-name

"""
 Copyright (c) 2020, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import pytest
import tests.common as cmn
from depsmith.constants import PHASE_BUILD, PHASE_CLEAN
from depsmith.error import UnknownLibraryError, UnknownDependencyError, \
                           CyclicDependencyError, StepExecutionError, \
                           UnresolvedPlaceholderError
from depsmith.tracker import PENDING, BUILT, FAILED
from depsmith.session import Session, SessionReport, ReportEntry, \
                             CLEANED, UPTODATE

joinpath = os.path.join

pytestmark = pytest.mark.skipif(cmn.PLATFORM == 'windows',
                                reason = 'steps are POSIX shell commands')

class Output(object):

    def __init__(self):
        self.lines = []

    def __call__(self, line, err):
        self.lines.append(line.rstrip('\n'))

def makeSession(libs, libsroot, **kwargs):
    decls = cmn.makeDeclarations(libs, libsroot)
    output = Output()
    return Session(decls, outCallback = output, **kwargs), output

def makeTracingLibs(names):
    """ Libraries which print their names on build and clean """

    libs = {}
    for name, depends in names:
        libs[name] = cmn.makeLibConf(
            depends = depends,
            build = ['echo "build %s"' % name],
            clean = ['echo "clean %s"' % name],
        )
    return libs

def testBuildSample(libsroot):

    session, _ = makeSession(cmn.sampleLibraries(), libsroot)

    report = session.build(['libpng'])
    assert report.ok
    assert report.error is None
    assert report.phase == PHASE_BUILD
    assert [x.name for x in report.entries] == ['zlib', 'libpng']
    assert report.states == { 'zlib' : BUILT, 'libpng' : BUILT }

    zlibOut = joinpath(libsroot, 'zlib-1.2.13', 'release')
    assert os.path.isfile(joinpath(zlibOut, 'zlib.txt'))
    pngOut = joinpath(libsroot, 'libpng-1.6.3', 'release')
    with open(joinpath(pngOut, 'zlibinc.txt')) as file:
        assert file.read().strip() == zlibOut + '/include'
    with open(joinpath(pngOut, 'zliblib.txt')) as file:
        zliblib = file.read().strip()
    # ${pwd}/../${zlib} is the directory of zlib
    assert zliblib == joinpath(libsroot, 'libpng-1.6.3', '..', 'zlib-1.2.13', 'release', 'lib')
    assert os.path.isdir(os.path.dirname(zliblib))

def testBuildIsNoOpSecondTime(libsroot):

    libs = makeTracingLibs([('zlib', []), ('libpng', ['zlib'])])
    session, output = makeSession(libs, libsroot)

    report = session.build()
    assert report.ok
    assert output.lines == ['build zlib', 'build libpng']

    report = session.build(['libpng'])
    assert report.ok
    assert report.states == { 'zlib' : UPTODATE, 'libpng' : UPTODATE }
    assert output.lines == ['build zlib', 'build libpng']

def testBuildOrder(libsroot):

    libs = makeTracingLibs([
        ('tiff', ['jpeg', 'zlib']),
        ('libpng', ['zlib']),
        ('jpeg', []),
        ('zlib', []),
    ])
    session, output = makeSession(libs, libsroot)

    assert session.plan() == ('jpeg', 'zlib', 'tiff', 'libpng')
    assert session.plan(['libpng']) == ('zlib', 'libpng')

    report = session.build()
    assert report.ok
    assert output.lines == [
        'build jpeg', 'build zlib', 'build tiff', 'build libpng'
    ]

def testBuildFailure(libsroot):

    libs = makeTracingLibs([
        ('zlib', []),
        ('jpeg', []),
        ('libpng', ['zlib']),
        ('tiff', ['jpeg', 'zlib']),
    ])
    libs['jpeg']['build'] = ['echo "build jpeg"', 'exit 2']
    session, output = makeSession(libs, libsroot)

    report = session.build()
    assert not report.ok
    assert isinstance(report.error, StepExecutionError)
    assert report.error.library == 'jpeg'
    assert report.error.exitcode == 2

    # fail-fast: nothing else is started after the first failure
    assert output.lines == ['build zlib', 'build jpeg']
    assert report.states == {
        'zlib' : BUILT,
        'jpeg' : FAILED,
        'libpng' : PENDING,
        'tiff' : FAILED,
    }
    assert report.namesWithState(FAILED) == ['jpeg', 'tiff']
    assert report.namesWithState(PENDING) == ['libpng']

    firstError = report.error

    # failed libraries are not tried again in the same session
    report = session.build()
    assert not report.ok
    assert report.error is firstError
    assert report.states == {
        'zlib' : UPTODATE,
        'jpeg' : FAILED,
        'libpng' : BUILT,
        'tiff' : FAILED,
    }
    assert output.lines[2:] == ['build libpng']

    report = session.build(['libpng'])
    assert report.ok
    assert report.states == { 'zlib' : UPTODATE, 'libpng' : UPTODATE }

    report = session.build(['tiff'])
    assert not report.ok
    assert report.error is firstError
    assert report.namesWithState(FAILED) == ['jpeg', 'tiff']
    assert output.lines[2:] == ['build libpng']

def testBuildUnresolvedPlaceholder(libsroot):

    libs = makeTracingLibs([('zlib', []), ('libpng', ['zlib'])])
    libs['zlib']['build'] = ['echo "${openssl}"']
    session, output = makeSession(libs, libsroot)

    report = session.build()
    assert isinstance(report.error, UnresolvedPlaceholderError)
    assert report.states == { 'zlib' : FAILED, 'libpng' : FAILED }
    assert not output.lines

def testForceBuild(libsroot):

    libs = makeTracingLibs([('zlib', []), ('libpng', ['zlib']), ('jpeg', [])])
    session, output = makeSession(libs, libsroot)

    session.build()
    del output.lines[:]

    report = session.build(['libpng'], force = True)
    assert report.states == { 'zlib' : UPTODATE, 'libpng' : BUILT }
    assert output.lines == ['build libpng']
    del output.lines[:]

    # rebuilt library makes its dependents dirty
    report = session.build(['zlib'], force = True)
    assert report.states == { 'zlib' : BUILT }
    report = session.build()
    assert report.states == { 'zlib' : UPTODATE, 'libpng' : BUILT, 'jpeg' : UPTODATE }
    assert output.lines == ['build zlib', 'build libpng']
    del output.lines[:]

    report = session.build(force = True)
    assert output.lines == ['build zlib', 'build libpng', 'build jpeg']

def testPrebuilt(libsroot):

    session, _ = makeSession(cmn.sampleLibraries(), libsroot)
    session.assumeBuilt(['zlib'])

    report = session.build(['libpng'])
    assert report.ok
    assert report.states == { 'zlib' : UPTODATE, 'libpng' : BUILT }

    zlibOut = joinpath(libsroot, 'zlib-1.2.13', 'release')
    assert not os.path.exists(zlibOut)
    pngOut = joinpath(libsroot, 'libpng-1.6.3', 'release')
    with open(joinpath(pngOut, 'zlibinc.txt')) as file:
        assert file.read().strip() == zlibOut + '/include'

    with pytest.raises(UnknownLibraryError):
        session.assumeBuilt(['openssl'])

def testClean(libsroot):

    session, _ = makeSession(cmn.sampleLibraries(), libsroot)
    zlibOut = joinpath(libsroot, 'zlib-1.2.13', 'release')
    pngOut = joinpath(libsroot, 'libpng-1.6.3', 'release')

    session.build()
    assert os.path.isdir(zlibOut)
    assert os.path.isdir(pngOut)

    # only selected libraries are cleaned
    report = session.clean(['libpng'])
    assert report.ok
    assert report.phase == PHASE_CLEAN
    assert report.states == { 'libpng' : CLEANED }
    assert not os.path.exists(pngOut)
    assert os.path.isdir(zlibOut)

    report = session.build()
    assert report.states == { 'zlib' : UPTODATE, 'libpng' : BUILT }

    report = session.clean()
    assert [x.name for x in report.entries] == ['libpng', 'zlib']
    assert report.namesWithState(CLEANED) == ['libpng', 'zlib']
    assert not os.path.exists(zlibOut)

    report = session.build()
    assert report.states == { 'zlib' : BUILT, 'libpng' : BUILT }

def testCleanFailure(libsroot):

    libs = makeTracingLibs([('zlib', []), ('libpng', ['zlib'])])
    libs['libpng']['clean'] = ['exit 1']
    session, output = makeSession(libs, libsroot)

    report = session.clean()
    assert isinstance(report.error, StepExecutionError)
    assert report.states == { 'libpng' : FAILED, 'zlib' : PENDING }
    assert not output.lines

    # library with failed clean and its dependents are not built
    cleanError = report.error
    report = session.build()
    assert not report.ok
    assert report.error is cleanError
    assert report.states == { 'zlib' : BUILT, 'libpng' : FAILED }
    assert output.lines == ['build zlib']

def testCleanWithDependencyPlaceholder(libsroot):

    libs = cmn.sampleLibraries()
    libs['libpng']['clean'] = ['echo "${zlib.output}"', 'echo "${zlib}"']
    session, output = makeSession(libs, libsroot)

    report = session.clean(['libpng'])
    assert report.ok
    assert output.lines == [joinpath(libsroot, 'zlib-1.2.13', 'release'), 'zlib-1.2.13']

def testInvalidGraph(libsroot):

    libs = makeTracingLibs([('zlib', []), ('libpng', ['openssl'])])
    with pytest.raises(UnknownDependencyError):
        makeSession(libs, libsroot)

    libs = makeTracingLibs([('zlib', ['libpng']), ('libpng', ['zlib'])])
    with pytest.raises(CyclicDependencyError):
        makeSession(libs, libsroot)

    session, _ = makeSession(makeTracingLibs([('zlib', [])]), libsroot)
    with pytest.raises(UnknownLibraryError):
        session.build(['openssl'])
    with pytest.raises(UnknownLibraryError):
        session.clean(['openssl'])

def testReportSummary():

    entries = [ReportEntry('zlib', BUILT), ReportEntry('libpng', FAILED)]
    report = SessionReport(PHASE_BUILD, entries, StepExecutionError('libpng', 'build', 'make', 2))

    assert not report.ok
    text = report.summary()
    assert "'build'" in text
    assert 'zlib   : built' in text
    assert 'libpng : failed' in text

    assert SessionReport(PHASE_CLEAN, []).ok
