# coding=utf-8
#

"""
 Copyright (c) 2021, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

__all__ = [
    'load',
]

import io

import yaml as pyyaml

from depsmith.error import DepSmithConfError
from depsmith.pyutils import maptype

try:
    YamlLoader = pyyaml.CSafeLoader
except AttributeError:
    YamlLoader = pyyaml.SafeLoader

class StringIO(io.StringIO):
    """
    Customized StringIO
    """

    def __init__(self, data, name = '<file>'):
        super().__init__(data)
        # it's used in pyyaml for error reports
        self.name = name

def load(filepath):
    """
    Load YAML depsconf and return its data as a dict
    """

    # depsconf file should not be very big so it's loaded completely in memory
    with io.open(filepath, 'rt', encoding = 'utf-8') as fstream:
        stream = StringIO(fstream.read(), fstream.name)

    try:
        loader = YamlLoader(stream)
        try:
            data = loader.get_single_data()
        finally:
            loader.dispose()
    except pyyaml.YAMLError as ex:
        raise DepSmithConfError(ex = ex, confpath = filepath) from ex

    if data is None:
        raise DepSmithConfError("File %r has no config data" % filepath)

    if not isinstance(data, maptype):
        raise DepSmithConfError("File %r has invalid structure" % filepath)

    return data
