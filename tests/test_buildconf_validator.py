# coding=utf-8
#

# pylint: disable = wildcard-import, unused-wildcard-import
# pylint: disable = missing-docstring, invalid-name
# pylint: disable = no-member, attribute-defined-outside-init

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import pytest
from depsmith.error import *
from depsmith.buildconf.validator import Validator
import tests.common as cmn

def validateConfig(conf, confpath = None):
    Validator(conf, confpath).run()

class TestSuite(object):

    @pytest.fixture(autouse = True)
    def setup(self):
        libs = cmn.sampleLibraries()
        for name, lib in libs.items():
            lib['path'] = name
        self.conf = { 'libraries' : libs }
        self.zlib = libs['zlib']
        self.libpng = libs['libpng']

    def testValid(self):

        validateConfig(self.conf)

        self.conf['rootdir'] = 'libs'
        validateConfig(self.conf)

        self.conf['libraries'] = {}
        validateConfig(self.conf)

        # empty values are skipped
        self.conf['libraries'] = {
            'zlib' : { 'path' : 'zlib', 'output' : '/out', 'depends' : None,
                       'clean' : None, 'build' : [] },
        }
        validateConfig(self.conf)

    def testTopLevel(self):

        with pytest.raises(DepSmithConfTypeError):
            validateConfig([])

        with pytest.raises(DepSmithConfValueError):
            validateConfig({})

        with pytest.raises(DepSmithConfValueError):
            validateConfig({ 'rootdir' : 'libs' })

        self.conf['unknown'] = 1
        with pytest.raises(DepSmithConfError) as cm:
            validateConfig(self.conf)
        assert 'unknown' in str(cm.value)
        del self.conf['unknown']

        self.conf['rootdir'] = 12
        with pytest.raises(DepSmithConfTypeError):
            validateConfig(self.conf)
        del self.conf['rootdir']

        self.conf['libraries'] = ['zlib', 'libpng']
        with pytest.raises(DepSmithConfTypeError):
            validateConfig(self.conf)

        self.conf['libraries'] = None
        with pytest.raises(DepSmithConfTypeError) as cm:
            validateConfig(self.conf)
        assert "Param 'libraries' should be dict" in str(cm.value)
        assert 'Unknown key' not in str(cm.value)

        # known optional key with null value is not an unknown key
        self.conf['libraries'] = {}
        self.conf['rootdir'] = None
        validateConfig(self.conf)

    def testLibraryParams(self):

        for param in ('path', 'output'):
            value = self.zlib.pop(param)
            with pytest.raises(DepSmithConfValueError):
                validateConfig(self.conf)
            self.zlib[param] = None
            with pytest.raises(DepSmithConfValueError):
                validateConfig(self.conf)
            self.zlib[param] = 10
            with pytest.raises(DepSmithConfTypeError):
                validateConfig(self.conf)
            self.zlib[param] = value

        self.conf['libraries']['gtk'] = 'path'
        with pytest.raises(DepSmithConfTypeError):
            validateConfig(self.conf)
        del self.conf['libraries']['gtk']

        self.conf['libraries'][12] = cmn.makeLibConf(path = 'dir')
        with pytest.raises(DepSmithConfTypeError):
            validateConfig(self.conf)
        del self.conf['libraries'][12]

        self.zlib['install'] = ['make install']
        with pytest.raises(DepSmithConfError) as cm:
            validateConfig(self.conf)
        assert 'install' in str(cm.value)
        del self.zlib['install']

        validateConfig(self.conf)

    def testDepends(self):

        self.libpng['depends'] = 'zlib'
        with pytest.raises(DepSmithConfTypeError):
            validateConfig(self.conf)

        self.libpng['depends'] = ['zlib', 1]
        with pytest.raises(DepSmithConfTypeError):
            validateConfig(self.conf)

        self.libpng['depends'] = ['zlib', 'zlib']
        with pytest.raises(DepSmithConfValueError) as cm:
            validateConfig(self.conf)
        assert 'duplicated' in str(cm.value)

        # names are not checked here
        self.libpng['depends'] = ['openssl']
        validateConfig(self.conf)

    def testSteps(self):

        for phase in ('build', 'clean'):

            self.libpng[phase] = 'make'
            with pytest.raises(DepSmithConfTypeError):
                validateConfig(self.conf)

            self.libpng[phase] = ['make', 12]
            with pytest.raises(DepSmithConfTypeError):
                validateConfig(self.conf)

            self.libpng[phase] = [['make']]
            with pytest.raises(DepSmithConfTypeError):
                validateConfig(self.conf)

            self.libpng[phase] = [{ 'cmd' : 'make' }]
            with pytest.raises(DepSmithConfError):
                validateConfig(self.conf)

            self.libpng[phase] = [{ 'env' : { 'A' : '1' }, 'cmd' : 'make' }]
            with pytest.raises(DepSmithConfError):
                validateConfig(self.conf)

            self.libpng[phase] = [{ 'env' : 'A=1' }]
            with pytest.raises(DepSmithConfTypeError):
                validateConfig(self.conf)

            self.libpng[phase] = [{ 'env' : { 'A' : 1 } }]
            with pytest.raises(DepSmithConfTypeError):
                validateConfig(self.conf)

            self.libpng[phase] = [{ 'env' : { 1 : 'a' } }]
            with pytest.raises(DepSmithConfTypeError):
                validateConfig(self.conf)

            self.libpng[phase] = [
                { 'env' : { 'A' : '1', 'B' : '${zlib}' } },
                'make',
                { 'env' : {} },
            ]
            validateConfig(self.conf)

    def testErrorWithConfPath(self):

        self.zlib['path'] = 1
        with pytest.raises(DepSmithConfTypeError) as cm:
            validateConfig(self.conf, '/libs/depsconf.yaml')

        assert cm.value.confpath == '/libs/depsconf.yaml'
        assert str(cm.value).startswith("Error in the file '/libs/depsconf.yaml':")
        assert 'libraries.zlib.path' in str(cm.value)
