# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

from depsmith.error import DepSmithConfError, DepSmithConfTypeError, \
                           DepSmithConfValueError
from depsmith.pyutils import maptype, stringtype
from depsmith.buildconf.types import ANYSTR_KEY
from depsmith.buildconf.scheme import confscheme, REQUIRED_TOPLEVEL_KEYS

class DepSmithConfSubTypeError(DepSmithConfTypeError):
    """Invalid depsconf param type error"""

class Validator(object):
    """
    Validator for structure of depsconf.
    """

    __slots__ = ('_conf', '_confpath')

    _typeHandlerNames = {
        'str'  : '_handleStr',
        'dict' : '_handleDict',
        'list' : '_handleList',
        'complex' : '_handleComplex',
        'list-of-strs' : '_handleListOfStrs',
    }

    def __init__(self, conf, confpath = None):
        self._conf = conf
        self._confpath = confpath

    @staticmethod
    def _getHandler(typeName):
        if not isinstance(typeName, stringtype):
            typeName = 'complex' if len(typeName) > 1 else typeName[0]
        return getattr(Validator, Validator._typeHandlerNames[typeName])

    @staticmethod
    def _checkStrKey(key, fullkey):
        if not isinstance(key, stringtype):
            msg = "Type of key `%r` is invalid. In %r this key should be string." \
                % (key, fullkey)
            raise DepSmithConfTypeError(msg)

    def _handleComplex(self, node, key, schemeAttrs, fullkey):

        types = schemeAttrs['type']

        for _type in types:
            _schemeAttrs = schemeAttrs.get(_type, schemeAttrs)
            try:
                handler = Validator._getHandler(_type)
                handler(self, node, key, _schemeAttrs, fullkey)
            except DepSmithConfSubTypeError:
                # it's an error from a sub type
                raise
            except DepSmithConfTypeError:
                pass
            else:
                return

        typeswitch = {
            'str'         : 'string',
            'list-of-strs': 'list of strings',
            'dict'        : 'dict/another map type',
        }
        typeNames = [ typeswitch.get(_type, _type) for _type in types ]

        msg = "Value `%r` is invalid for the param %r." % (node[key], fullkey)
        msg += " It should be %s." % " or ".join(typeNames)
        raise DepSmithConfTypeError(msg)

    def _handleStr(self, node, key, _, fullkey):
        if not isinstance(node[key], stringtype):
            msg = "Param %r should be string" % fullkey
            raise DepSmithConfTypeError(msg)

    def _handleList(self, node, key, schemeAttrs, fullkey):

        cnode = node[key]
        if not isinstance(cnode, (list, tuple)):
            msg = "Value `%r` is invalid for the param %r." % (cnode, fullkey)
            msg += " It should be list"
            raise DepSmithConfTypeError(msg)

        varsType = schemeAttrs.get('vars-type')
        if not varsType:
            return

        handler = Validator._getHandler(varsType)
        _schemeAttrs = { 'type' : varsType }
        # sub schemes for item types like 'dict-vars'
        for name, value in schemeAttrs.items():
            if '-' in name and name.split('-')[0] in varsType:
                _schemeAttrs[name.split('-')[0]] = value

        for i in range(len(cnode)):
            try:
                handler(self, cnode, i, _schemeAttrs, '%s.[%d]' % (fullkey, i))
            except DepSmithConfTypeError as ex:
                raise DepSmithConfSubTypeError(ex = ex) from ex

    def _handleListOfStrs(self, node, key, schemeAttrs, fullkey):

        cnode = node[key]

        def raiseInvalidTypeErr(value):
            msg = "Value `%r` is invalid for the param %r." % (value, fullkey)
            msg += " It should be list of strings"
            raise DepSmithConfTypeError(msg)

        if not isinstance(cnode, (list, tuple)):
            raiseInvalidTypeErr(cnode)

        for elem in cnode:
            if not isinstance(elem, stringtype):
                raiseInvalidTypeErr(elem)

        if schemeAttrs.get('unique', False):
            seen = set()
            for elem in cnode:
                if elem in seen:
                    msg = "Value %r is duplicated in the param %r." % (elem, fullkey)
                    raise DepSmithConfValueError(msg)
                seen.add(elem)

    def _handleDict(self, node, key, schemeAttrs, fullkey):

        cnode = node[key]

        if not isinstance(cnode, maptype):
            msg = "Param %r should be dict or another map type." % fullkey
            raise DepSmithConfTypeError(msg)

        subscheme = schemeAttrs.get('vars')
        if subscheme is None:
            # don't validate keys
            return

        for reqKey in schemeAttrs.get('required-keys', []):
            if cnode.get(reqKey) is None:
                msg = "Param %r must have the key %r." % (fullkey, reqKey)
                raise DepSmithConfValueError(msg)

        try:
            self._process(cnode, subscheme, fullkey)
        except DepSmithConfTypeError as ex:
            raise DepSmithConfSubTypeError(ex = ex) from ex

    @staticmethod
    def _genFullKey(keyprefix, key):
        return '.'.join((keyprefix, str(key))) if keyprefix else str(key)

    def _process(self, node, scheme, keyprefix, allowUnknownKeys = False):

        scheme = scheme.copy()
        _anyStrScheme = scheme.pop(ANYSTR_KEY, None)

        _handledKeys = []
        for key, schemeAttrs in scheme.items():
            if node.get(key) is None:
                continue
            fullKey = Validator._genFullKey(keyprefix, key)
            Validator._getHandler(schemeAttrs['type'])(self, node, key,
                                                       schemeAttrs, fullKey)
            _handledKeys.append(key)

        for key in node:
            if key in _handledKeys or key in scheme:
                continue
            if _anyStrScheme is not None:
                Validator._checkStrKey(key, keyprefix)
                fullKey = Validator._genFullKey(keyprefix, key)
                handler = Validator._getHandler(_anyStrScheme['type'])
                handler(self, node, key, _anyStrScheme, fullKey)
            elif not allowUnknownKeys:
                msg = "Unknown key '%s' is in the param %r." % (str(key), keyprefix)
                msg += " Unknown keys aren't allowed here."
                msg += "\nValid values: %r" % sorted(scheme.keys())
                raise DepSmithConfError(msg)

    def run(self):
        """
        Entry point for validation
        """

        try:
            if not isinstance(self._conf, maptype):
                raise DepSmithConfTypeError("Config data should be a dict/map")

            for key in REQUIRED_TOPLEVEL_KEYS:
                if key not in self._conf:
                    raise DepSmithConfValueError("Param %r is required" % key)
                if self._conf[key] is None:
                    # null value is a value of wrong type
                    schemeAttrs = confscheme[key]
                    handler = Validator._getHandler(schemeAttrs['type'])
                    handler(self, self._conf, key, schemeAttrs, key)

            self._process(self._conf, confscheme, '')
        except DepSmithConfError as ex:
            if self._confpath:
                origMsg = ex.msg
                ex.msg = "Error in the file %r:" % self._confpath
                for line in origMsg.splitlines():
                    ex.msg += "\n  %s" % line
                ex.confpath = self._confpath
            raise ex
