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

import io
import numbers
import os.path
import unittest

from settingspanels.config import Configuration
from settingspanels.core import ComponentManager, ComponentMeta, SettingsError
from settingspanels.env import Environment
from settingspanels.loader import load_builtin_components
from settingspanels.log import logger_handler_factory
from settingspanels.util.translation import deactivate
from settingspanels.web.api import Request, _RequestArgs, arg_list_to_args


def Mock(bases=(), *initargs, **kw):
    """
    Simple factory for dummy classes that can be used as replacement for the
    real implementation in tests.

    Base classes for the mock can be specified using the first parameter,
    which must be either a tuple of class objects or a single class object.
    If the bases parameter is omitted, the base class of the mock will be
    object.

    So to create a mock that is derived from the builtin dict type, you can
    do:

    >>> mock = Mock(dict)
    >>> mock['foo'] = 'bar'
    >>> mock['foo']
    'bar'

    Attributes of the class are provided by any additional keyword
    parameters.

    >>> mock = Mock(foo='bar')
    >>> mock.foo
    'bar'

    Objects produced by this function have the special feature of not
    requiring the 'self' parameter on methods, because you should keep data
    at the scope of the test function. So you can just do:

    >>> mock = Mock(add=lambda x,y: x+y)
    >>> mock.add(1, 1)
    2
    """
    if not isinstance(bases, tuple):
        bases = (bases,)
    cls = type('Mock', bases, {})
    mock = cls(*initargs)
    for k, v in kw.items():
        setattr(mock, k, v)
    return mock


def MockRequest(env, **kwargs):
    """Request object for testing. Keyword arguments populate an
    `environ` dictionary and the callbacks.

    The following keyword arguments are commonly used:
    :keyword args: dictionary of request arguments
    :keyword authname: the name of the authenticated user, or 'anonymous'
    :keyword method: the HTTP request method
    :keyword path_info: the request path inside the application

    Additionally `remote_addr`, `script_name`, `server_name` and
    `server_port` can be specified as keyword arguments.
    """
    authname = kwargs.get('authname') or 'anonymous'

    def convert(val):
        if isinstance(val, bool):
            return str(int(val))
        elif isinstance(val, numbers.Real):
            return str(val)
        elif isinstance(val, (list, tuple)):
            return [convert(v) for v in val]
        else:
            return val

    if 'arg_list' in kwargs:
        arg_list = [(k, convert(v)) for k, v in kwargs['arg_list']]
        args = arg_list_to_args(arg_list)
    else:
        args = _RequestArgs()
        args.update((k, convert(v))
                    for k, v in kwargs.get('args', {}).items())
        arg_list = [(name, value) for name in args
                                  for value in args.getlist(name)]

    environ = {
        'settingspanels.base_url': 'http://example.org' +
                                   kwargs.get('script_name', ''),
        'wsgi.url_scheme': 'http',
        'PATH_INFO': kwargs.get('path_info', '/'),
        'REQUEST_METHOD': kwargs.get('method', 'GET'),
        'REMOTE_ADDR': kwargs.get('remote_addr', '127.0.0.1'),
        'REMOTE_USER': authname,
        'SCRIPT_NAME': kwargs.get('script_name', ''),
        'SERVER_NAME': kwargs.get('server_name', 'example.org'),
        'SERVER_PORT': kwargs.get('server_port', '80'),
    }

    status_sent = []
    headers_sent = {}
    response_sent = io.BytesIO()

    def start_response(status, headers, exc_info=None):
        status_sent.append(status)
        headers_sent.update(dict(headers))
        return response_sent.write

    req = Mock(Request, environ, start_response)
    req.status_sent = status_sent
    req.headers_sent = headers_sent
    req.response_sent = response_sent

    req.callbacks.update({
        'arg_list': lambda req: arg_list,
        'args': lambda req: args,
        'authname': lambda req: authname,
    })

    return req


class EnvironmentStub(Environment):
    """A stub of the `settingspanels.env.Environment` class for testing."""

    abstract = True

    def __init__(self, enable=None, disable=None, path=None):
        """Construct a new Environment stub object.

        :param enable: A list of component classes or name globs to
                       activate in the stub environment.
        :param disable: A list of component classes or name globs to
                        deactivate in the stub environment.
        :param path: The location of the environment in the file system.
                     No files or directories are created when specifying
                     this parameter.
        """
        if enable is not None and not isinstance(enable, (list, tuple)):
            raise TypeError('Keyword argument "enable" must be a list')
        if disable is not None and not isinstance(disable, (list, tuple)):
            raise TypeError('Keyword argument "disable" must be a list')

        ComponentManager.__init__(self)

        self._old_registry = None
        self._old_components = None

        import settingspanels
        self.path = path
        if self.path is None:
            self.path = os.path.dirname(settingspanels.__file__)
            if not os.path.isabs(self.path):
                self.path = os.path.join(os.getcwd(), self.path)

        # -- components
        load_builtin_components()

        # -- configuration
        self.config = Configuration(None)
        self.config.set('logging', 'log_level', 'DEBUG')
        self.config.set('logging', 'log_type', 'stderr')
        if enable is not None:
            self.config.set('components', 'settingspanels.*', 'disabled')
        for name_or_class in enable or ():
            config_key = self._component_name(name_or_class)
            self.config.set('components', config_key, 'enabled')
        for name_or_class in disable or ():
            config_key = self._component_name(name_or_class)
            self.config.set('components', config_key, 'disabled')
        self.config.set('settings', 'base_url', 'http://example.org')

        # -- logging
        self.log, self._log_handler = logger_handler_factory('test')
        self.log.addHandler(self._log_handler)

        deactivate()

    def clear_component_registry(self):
        """Clear the component registry.

        The registry entries are saved so they can be restored later
        using the `restore_component_registry` method.
        """
        self._old_registry = ComponentMeta._registry
        self._old_components = ComponentMeta._components
        ComponentMeta._registry = {}
        ComponentMeta._components = list(self._old_components)

    def restore_component_registry(self):
        """Restore the component registry.

        The component registry must have been cleared and saved using
        the `clear_component_registry` method.
        """
        if self._old_registry is None:
            raise SettingsError("The clear_component_registry method must "
                                "be called first.")
        ComponentMeta._registry = self._old_registry
        ComponentMeta._components = self._old_components
        self._old_registry = None

    def reset(self):
        """Shut down the logger and restore the component registry if
        it was cleared."""
        self.shutdown()
        if self._old_registry is not None:
            self.restore_component_registry()

    # overridden

    def is_component_enabled(self, cls):
        if self._component_name(cls).startswith('__main__.'):
            return True
        return Environment.is_component_enabled(self, cls)


def test_suite():
    import settingspanels.tests
    import settingspanels.prefs.tests
    import settingspanels.web.tests

    suite = unittest.TestSuite()
    suite.addTest(settingspanels.tests.test_suite())
    suite.addTest(settingspanels.prefs.tests.test_suite())
    suite.addTest(settingspanels.web.tests.test_suite())
    return suite


if __name__ == '__main__':
    unittest.main(defaultTest='test_suite')
