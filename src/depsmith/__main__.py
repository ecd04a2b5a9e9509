# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import sys
from depsmith import starter

if __name__ == '__main__':
    sys.exit(starter.run())
