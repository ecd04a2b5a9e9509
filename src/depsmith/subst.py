# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.

 Substitution of ${name} placeholders in step templates.
"""

import re

from depsmith.error import UnresolvedPlaceholderError

# any ${...} token is a placeholder
_RE_SUBST_VARS = re.compile(r"\$\{([^}]*)\}")
# library names like 'gtk+' or 'libjpeg-turbo' must be addressable
_RE_VAR_NAME = re.compile(r"^\s*([\w.+-]+)\s*$", re.ASCII)

def mayHaveSubstVar(strval):
    """
    Return True if string 'strval' may contain a placeholder.
    It's quick check without regexp.
    """
    return '${' in strval

def _varName(token, strval):
    match = _RE_VAR_NAME.match(token)
    if match is None:
        msg = "Invalid placeholder ${%s} in %r." % (token, strval)
        raise UnresolvedPlaceholderError(token, strval, msg)
    return match.group(1)

def findVars(strval):
    """
    Return names of all placeholders in the string in order of appearance.
    Raises UnresolvedPlaceholderError for a token with invalid name.
    """

    if not mayHaveSubstVar(strval): # optimization
        return []
    return [_varName(x, strval) for x in _RE_SUBST_VARS.findall(strval)]

def substVars(strval, scope):
    """
    Return string with ${VAR} replaced by the value of VAR from 'scope'.
    Values are inserted as is, they are not scanned for placeholders again.
    Raises UnresolvedPlaceholderError if some VAR is not in the 'scope' or
    has invalid name.
    """

    if not mayHaveSubstVar(strval): # optimization
        return strval

    def replaceVar(match):
        name = _varName(match.group(1), strval)
        try:
            return scope[name]
        except KeyError:
            raise UnresolvedPlaceholderError(name, strval) from None

    return _RE_SUBST_VARS.sub(replaceVar, strval)
