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

import hashlib
import os.path

from settingspanels import log
from settingspanels.config import (ChoiceOption, ConfigSection,
                                   Configuration, ConfigurationError, Option)
from settingspanels.core import Component, ComponentManager, SettingsError
from settingspanels.loader import load_components
from settingspanels.util import as_bool, lazy
from settingspanels.util.translation import _

__all__ = ['Environment', 'open_environment']


class Environment(Component, ComponentManager):
    """The environment holds the configuration and the logger shared by
    every component of a settings site.

    An environment is a directory containing:
     * `conf/settings.ini`, the configuration file
     * `log/`, the default location of log files
    """

    components_section = ConfigSection('components',
        """This section is used to enable or disable components provided by
        plugins, as well as by the application itself. The component to
        enable/disable is specified via the name of the option. Whether it's
        enabled is determined by the option value; setting the value to
        `enabled` or `on` will enable the component, any other value
        (typically `disabled` or `off`) will disable the component.

        The option name is either the fully qualified name of the
        components or the module/package prefix of the component, followed
        by a wildcard: `settingspanels.prefs.panels.*`.
        """)

    base_url = Option('settings', 'base_url', '',
        """Reference URL for the settings site, used when the request
        doesn't carry enough information to build absolute URLs.""")

    log_type = ChoiceOption('logging', 'log_type',
                            log.LOG_TYPES + log.LOG_TYPE_ALIASES,
        """Logging facility to use.

        Should be one of (`none`, `file`, `stderr`, `syslog`).""",
        case_sensitive=False)

    log_file = Option('logging', 'log_file', 'settings.log',
        """If `log_type` is `file`, this should be a path to the
        log-file.  Relative paths are resolved relative to the `log`
        directory of the environment.""")

    log_level = ChoiceOption('logging', 'log_level',
                             log.LOG_LEVELS + log.LOG_LEVEL_ALIASES,
        """Level of verbosity in log.

        Should be one of (`CRITICAL`, `ERROR`, `WARNING`, `INFO`, `DEBUG`).
        """, case_sensitive=False)

    log_format = Option('logging', 'log_format', None,
        """Custom logging format.

        If nothing is set, the following will be used:

        `SettingsPanels[$(module)s] $(levelname)s: $(message)s`

        In addition to the regular key names supported by the Python
        logger library, `$(path)s` and `$(basename)s` expand to the path
        and the name of the environment.
        """)

    def __init__(self, path, create=False, options=()):
        """Initialize the environment.

        :param path:    the absolute path to the environment
        :param create:  if `True`, the environment directory is created,
                        otherwise it is expected to exist already.
        :param options: a list of `(section, name, value)` tuples that
                        define configuration options
        """
        ComponentManager.__init__(self)

        self.path = os.path.normpath(os.path.normcase(path))
        self.log = None
        self.config = None

        if create:
            self.create(options)
        else:
            self.verify()
            self.setup_config()

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.path)

    @lazy
    def name(self):
        """The environment name."""
        return os.path.basename(self.path)

    @property
    def env(self):
        """Property returning the `Environment` object, which is often
        required for functions and methods that take a `Component` instance.
        """
        return self

    @property
    def conf_dir(self):
        return os.path.join(self.path, 'conf')

    @property
    def config_file_path(self):
        return os.path.join(self.conf_dir, 'settings.ini')

    @property
    def log_dir(self):
        return os.path.join(self.path, 'log')

    @property
    def log_file_path(self):
        path = self.log_file
        if not os.path.isabs(path):
            path = os.path.join(self.log_dir, path)
        return os.path.normcase(os.path.realpath(path))

    def component_activated(self, component):
        """Initialize additional member variables for components.

        Every component activated through the `Environment` object
        gets three member variables: `env` (the environment object),
        `config` (the environment configuration) and `log` (a logger
        object)."""
        component.env = self
        component.config = self.config
        component.log = self.log

    def _component_name(self, name_or_class):
        name = name_or_class
        if not isinstance(name_or_class, str):
            name = name_or_class.__module__ + '.' + name_or_class.__name__
        return name.lower()

    @lazy
    def _component_rules(self):
        _rules = {}
        for name, value in self.components_section.options():
            name = name.rstrip('.*').lower()
            _rules[name] = as_bool(value)
        return _rules

    def is_component_enabled(self, cls):
        """Implemented to only allow activation of components that are
        not disabled in the configuration.

        By default, all components in the `settingspanels` package
        except in `settingspanels.test` or `settingspanels.tests` are
        enabled. Components of other packages must be enabled explicitly.
        """
        component_name = self._component_name(cls)

        rules = self._component_rules
        cname = component_name
        while cname:
            enabled = rules.get(cname)
            if enabled is not None:
                return enabled
            idx = cname.rfind('.')
            if idx < 0:
                break
            cname = cname[:idx]

        return component_name.startswith('settingspanels.') and \
               not component_name.startswith('settingspanels.test.') and \
               not component_name.startswith('settingspanels.tests.') or None

    def enable_component(self, cls):
        """Enable a component or module."""
        self._component_rules[self._component_name(cls)] = True
        super().enable_component(cls)

    def verify(self):
        """Verify that the provided path points to a valid environment
        directory."""
        if not os.path.isdir(self.path):
            raise SettingsError(_("No environment found at %(path)s",
                                  path=self.path))
        if not os.path.isfile(self.config_file_path):
            raise ConfigurationError(
                _("No configuration file found at %(path)s",
                  path=self.config_file_path))

    def create(self, options=()):
        """Create the basic directory structure of the environment and
        write the initial configuration file."""
        if os.path.exists(self.path) and os.listdir(self.path):
            raise SettingsError(_("Directory exists and is not empty."))
        for dirname in (self.path, self.conf_dir, self.log_dir):
            if not os.path.exists(dirname):
                os.makedirs(dirname)
        with open(self.config_file_path, 'w', encoding='utf-8'):
            pass
        self.setup_config()
        for section, name, value in options:
            self.config.set(section, name, value)
        self.config.save()

    def setup_config(self):
        """Load the configuration file and the components."""
        self.config = Configuration(self.config_file_path)
        self.setup_log()
        load_components(self)

    def setup_log(self):
        """Initialize the logging sub-system."""
        self.log, log_handler = \
            self.create_logger(self.log_type, self.log_file_path,
                               self.log_level, self.log_format)
        self.log.addHandler(log_handler)
        self.log.info('-' * 32 + ' environment startup ' + '-' * 32)

    def create_logger(self, log_type, log_file, log_level, log_format):
        log_id = 'SettingsPanels.%s' % \
                 hashlib.sha1(self.path.encode('utf-8')).hexdigest()
        if log_format:
            log_format = log.expand_format(log_format, path=self.path,
                                           basename=self.name)
        return log.logger_handler_factory(log_type, log_file, log_level,
                                          log_id, format=log_format)

    def shutdown(self):
        """Close the log handlers of the environment."""
        if self.log:
            log.shutdown(self.log)


env_cache = {}


def open_environment(env_path=None, use_cache=False):
    """Open an existing environment object, and verify that the
    environment directory exists.

    :param env_path: absolute path to the environment directory; if
                     omitted, the value of the `SETTINGSPANELS_ENV`
                     environment variable is used
    :param use_cache: whether the environment should be cached for
                      subsequent invocations of this function
    :return: the `Environment` object
    """
    if not env_path:
        env_path = os.getenv('SETTINGSPANELS_ENV')
    if not env_path:
        raise SettingsError(_("Missing environment variable "
                              "\"SETTINGSPANELS_ENV\"."))
    env_path = os.path.normcase(os.path.normpath(env_path))
    if use_cache:
        env = env_cache.get(env_path)
        if env is None or env.config.parse_if_needed():
            if env is not None:
                env.shutdown()
            env = env_cache[env_path] = Environment(env_path)
    else:
        env = Environment(env_path)
    return env
