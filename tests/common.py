# coding=utf-8
#

# pylint: skip-file

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import yaml
from depsmith import utils
from depsmith.buildconf import loader

joinpath = os.path.join

PLATFORM = utils.platform()
TESTS_DIR = os.path.dirname(os.path.abspath(__file__))

def makeLibConf(path = None, output = '${pwd}/release', depends = None,
                clean = None, build = None):
    conf = {
        'path' : path,
        'output' : output,
    }
    if depends is not None:
        conf['depends'] = depends
    if clean is not None:
        conf['clean'] = clean
    if build is not None:
        conf['build'] = build
    return conf

def makeDeclarations(libraries, rootdir, makeDirs = True):
    """
    Make Declarations from dict name -> lib conf.
    Param 'path' of lib conf is set to the name of the lib by default.
    """

    for name, conf in libraries.items():
        if not conf.get('path'):
            conf['path'] = name
        if makeDirs:
            dirpath = joinpath(rootdir, conf['path'])
            if not os.path.isdir(dirpath):
                os.makedirs(dirpath)

    return loader.fromMapping({ 'libraries' : libraries }, rootdir)

def sampleLibraries():
    """ zlib/libpng pair like in demos """

    return {
        'zlib' : makeLibConf(
            path = 'zlib-1.2.13',
            clean = ['rm -Rf release'],
            build = [
                'mkdir -p "${output}"',
                'echo zlib > "${output}/zlib.txt"',
            ],
        ),
        'libpng' : makeLibConf(
            path = 'libpng-1.6.3',
            depends = ['zlib'],
            clean = ['rm -Rf release'],
            build = [
                { 'env' : {
                    'ZLIBLIB' : '${pwd}/../${zlib}/release/lib',
                    'ZLIBINC' : '${zlib.output}/include',
                }},
                'mkdir -p "${output}"',
                'echo "$ZLIBINC" > "${output}/zlibinc.txt"',
                'echo "$ZLIBLIB" > "${output}/zliblib.txt"',
            ],
        ),
    }

def writeConf(dirpath, libraries, rootdir = None, filename = 'depsconf.yaml'):
    """
    Write depsconf file with libraries and return its path.
    Param 'path' of lib conf is set to the name of the lib by default.
    """

    data = {}
    if rootdir:
        data['rootdir'] = rootdir
    data['libraries'] = {}
    for name, conf in libraries.items():
        conf = { k:v for k, v in conf.items() if v is not None }
        conf.setdefault('path', name)
        data['libraries'][name] = conf

    filepath = joinpath(dirpath, filename)
    with open(filepath, 'w') as file:
        yaml.safe_dump(data, file, default_flow_style = False, sort_keys = False)
    return filepath
