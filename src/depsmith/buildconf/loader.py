# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

__all__ = [
    'findConfFile',
    'fromMapping',
    'load',
]

import os

from depsmith import log
from depsmith.constants import DEPSCONF_FILENAMES, RESERVED_SCOPE_NAMES, \
                              SCOPE_PWD, SCOPE_DEP_OUTPUT_SUFFIX
from depsmith.error import DepSmithConfError, DepSmithConfValueError, \
                          UnresolvedPlaceholderError
from depsmith.subst import findVars
from depsmith.buildconf import yaml
from depsmith.buildconf.validator import Validator
from depsmith.buildconf.types import ShellCommand, EnvSetter, \
                                     LibraryDeclaration, Declarations

isfile = os.path.isfile
joinpath = os.path.join

def findConfFile(dpath, fname = None):
    """
    Try to find depsconf file.
    Returns filename if found or None
    """
    if fname:
        if isfile(joinpath(dpath, fname)):
            return fname
        return None

    for name in DEPSCONF_FILENAMES:
        if isfile(joinpath(dpath, name)):
            return name
    return None

def _makeSteps(items):
    steps = []
    for item in items or []:
        if isinstance(item, str):
            steps.append(ShellCommand(item))
            continue
        for name, value in item['env'].items():
            steps.append(EnvSetter(name, value))
    return steps

def _checkOutput(name, output, confpath):
    try:
        outvars = findVars(output)
    except UnresolvedPlaceholderError as ex:
        raise DepSmithConfValueError(ex.msg, confpath = confpath) from ex

    for var in outvars:
        if var != SCOPE_PWD:
            msg = "Param 'output' of library %r can use only ${%s}, " \
                  "not ${%s}." % (name, SCOPE_PWD, var)
            raise DepSmithConfValueError(msg, confpath = confpath)

def _checkName(name, confpath):
    if name in RESERVED_SCOPE_NAMES or name.endswith(SCOPE_DEP_OUTPUT_SUFFIX):
        msg = "Name %r is reserved and can not be used for a library." % name
        raise DepSmithConfValueError(msg, confpath = confpath)

def fromMapping(data, rootdir, confpath = None):
    """
    Convert validated raw config data into Declarations.
    Relative 'rootdir' from data is joined with param 'rootdir'.
    """

    Validator(data, confpath).run()

    subdir = data.get('rootdir')
    if subdir:
        rootdir = joinpath(rootdir, subdir)

    libs = []
    for order, (name, params) in enumerate(data['libraries'].items()):
        _checkName(name, confpath)
        _checkOutput(name, params['output'], confpath)
        libs.append(LibraryDeclaration(
            name = name,
            path = params['path'],
            output = params['output'],
            depends = params.get('depends') or [],
            clean = _makeSteps(params.get('clean')),
            build = _makeSteps(params.get('build')),
            order = order,
        ))

    return Declarations(libs, rootdir, confpath)

def load(dirpath = None, filepath = None):
    """
    Load depsconf.
    Param 'filepath' is an explicit path to depsconf file. If it's not set
    then file is searched in the 'dirpath' directory (current one by default).
    Returns Declarations.
    """

    if filepath:
        if not isfile(filepath):
            raise DepSmithConfError("File %r doesn't exist." % filepath)
    else:
        if not dirpath:
            dirpath = os.getcwd()
        filename = findConfFile(dirpath)
        if filename is None:
            msg = "Config %s not found in the directory %r." % \
                    ('/'.join(DEPSCONF_FILENAMES), dirpath)
            raise DepSmithConfError(msg)
        filepath = joinpath(dirpath, filename)

    filepath = os.path.abspath(filepath)
    log.debug('Loading config %r', filepath)

    data = yaml.load(filepath)
    return fromMapping(data, os.path.dirname(filepath), filepath)
