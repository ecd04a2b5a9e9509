# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

from os import path

DEPSMITH_DIR = path.dirname(path.abspath(__file__))
