# -*- coding: utf-8 -*-
#
# Copyright (C) 2003-2023 Edgewall Software
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution. The terms
# are also available at https://trac.edgewall.org/wiki/TracLicense.
#
# This software consists of voluntary contributions made by many
# individuals. For the exact contribution history, see the revision
# history and logs, available at https://trac.edgewall.org/log/.

import re
from urllib.parse import quote, urlencode


class Href(object):
    """Implements a callable that constructs URLs with the given base. The
    function can be called with any number of positional and keyword
    arguments which then are used to assemble the URL.

    Positional arguments are appended as individual segments of
    the path of the URL:

    >>> href = Href('/settings')
    >>> href('panel', 'datetime')
    '/settings/panel/datetime'

    If a positional parameter evaluates to None, it will be skipped:

    >>> href('panel', 'datetime', None)
    '/settings/panel/datetime'

    The first path segment can also be specified by calling an attribute
    of the instance, as follows:

    >>> href.settings('panel')
    '/settings/settings/panel'

    Keyword arguments are added to the query string, unless the value is
    None:

    >>> href = Href('/app')
    >>> href('settings', saved='true')
    '/app/settings?saved=true'

    Simply calling the Href object with no arguments will return the base
    URL:

    >>> Href('')()
    '/'

    Adding a string to an Href object prefixes the base URL:

    >>> Href('/app') + '/settings/panel/datetime/'
    '/app/settings/panel/datetime/'
    """

    def __init__(self, base, path_safe="/!~*'()", query_safe="!~*'()"):
        self.base = base.rstrip('/')
        self.path_safe = path_safe
        self.query_safe = query_safe
        self._derived = {}

    def __call__(self, *args, **kw):
        href = self.base
        params = []

        for name, value in kw.items():
            name = name[:-1] if name.endswith('_') else name
            if isinstance(value, (list, tuple)):
                params.extend((name, v) for v in value if v is not None)
            elif value is not None:
                params.append((name, value))

        path = '/'.join(quote(str(arg).strip('/'), self.path_safe)
                        for arg in args if arg is not None)
        if path:
            href += '/' + re.sub(r'/+', '/', path).lstrip('/')
        elif not href:
            href = '/'

        if params:
            href += '?' + urlencode(params, safe=self.query_safe)
        return href

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        if name not in self._derived:
            self._derived[name] = lambda *args, **kw: self(name, *args, **kw)
        return self._derived[name]

    def __add__(self, rhs):
        if not rhs:
            return self.base or '/'
        if rhs.startswith('?'):
            return (self.base or '/') + rhs
        if not rhs.startswith('/'):
            rhs = '/' + rhs
        return self.base + rhs
