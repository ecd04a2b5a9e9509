# coding=utf-8
#

"""
 Copyright (c) 2019 Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
from depsmith import utils

APPNAME = 'depsmith'
CAP_APPNAME = 'DepSmith'
AUTHOR = 'Alexander Magola'

DEPSCONF_NAME = 'depsconf'
DEPSCONF_EXTS = ['.yaml', '.yml']
DEPSCONF_FILENAMES = ['%s%s' % (DEPSCONF_NAME, x) for x in DEPSCONF_EXTS]

PHASE_CLEAN = 'clean'
PHASE_BUILD = 'build'
PHASES = (PHASE_CLEAN, PHASE_BUILD)

# names that are always present in a phase scope
SCOPE_PWD = 'pwd'
SCOPE_OUTPUT = 'output'
RESERVED_SCOPE_NAMES = frozenset((SCOPE_PWD, SCOPE_OUTPUT))
# ${<dep>.output} is the resolved output of the dependency
SCOPE_DEP_OUTPUT_SUFFIX = '.output'

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNKNOWN_DEPENDENCY = 3
EXIT_CYCLIC_DEPENDENCY = 4
EXIT_UNRESOLVED_PLACEHOLDER = 5
EXIT_STEP_FAILED = 6
EXIT_INTERRUPTED = 68

CWD = os.getcwd()
PLATFORM = utils.platform()
