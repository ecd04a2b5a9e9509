# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.

 Scheme of the depsconf file for the validator.
"""

from depsmith.buildconf.types import ANYSTR_KEY

_ENV_STEP_SCHEME = {
    'type' : 'dict',
    'vars' : {
        'env' : {
            'type' : 'dict',
            'vars' : { ANYSTR_KEY : { 'type': 'str' } },
        },
    },
    'required-keys' : ['env'],
}

STEPS_SCHEME = {
    'type' : 'list',
    'vars-type' : ('str', 'dict'),
    'dict-vars' : _ENV_STEP_SCHEME,
}

LIBRARY_SCHEME = {
    'type' : 'dict',
    'vars' : {
        'path'    : { 'type': 'str' },
        'output'  : { 'type': 'str' },
        'depends' : { 'type': 'list-of-strs', 'unique' : True },
        'clean'   : STEPS_SCHEME,
        'build'   : STEPS_SCHEME,
    },
    'required-keys' : ['path', 'output'],
}

confscheme = {
    'rootdir' : { 'type': 'str' },
    'libraries' : {
        'type' : 'dict',
        'vars' : { ANYSTR_KEY : LIBRARY_SCHEME },
    },
}

REQUIRED_TOPLEVEL_KEYS = ('libraries',)
