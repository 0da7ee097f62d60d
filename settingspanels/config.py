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

import os.path
import re
from collections import OrderedDict
from configparser import ConfigParser, ParsingError

from settingspanels.core import ExtensionPoint, SettingsError
from settingspanels.util import as_bool, cleandoc
from settingspanels.util.translation import N_, _

__all__ = ['Configuration', 'ConfigSection', 'Option', 'BoolOption',
           'ListOption', 'ChoiceOption', 'PathOption', 'ExtensionOption',
           'OrderedExtensionsOption', 'ConfigurationError']

_use_default = object()


def _getlist(value, sep, keep_empty):
    if not value:
        return []
    if isinstance(value, str):
        if isinstance(sep, (list, tuple)):
            splitted = re.split('|'.join(map(re.escape, sep)), value)
        else:
            splitted = value.split(sep)
        items = [item.strip() for item in splitted]
    else:
        items = list(value)
    if not keep_empty:
        items = [item for item in items if item not in (None, '')]
    return items


class ConfigurationError(SettingsError):
    """Exception raised when a value in the configuration file is not
    valid, or when the installed components are inconsistent (e.g. two
    settings panels claiming the same key).
    """
    title = N_("Configuration Error")

    def __init__(self, message=None, title=None, show_traceback=False):
        if message is None:
            message = _("Look in the log for more information.")
        super().__init__(message, title, show_traceback)


class Configuration(object):
    """Thin layer over `ConfigParser` from the Python standard library.

    In addition to providing some convenience methods, the class remembers
    the last modification time of the configuration file, and reparses it
    when the file has changed.
    """

    def __init__(self, filename):
        self.filename = filename
        self.parser = ConfigParser(interpolation=None,
                                   dict_type=OrderedDict)
        self._lastmtime = 0
        self._sections = {}
        self.parse_if_needed(force=True)

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.filename)

    def __contains__(self, name):
        """Return whether the configuration contains a section of the given
        name.
        """
        return name in self.sections()

    def __getitem__(self, name):
        """Return the configuration section with the specified name."""
        if name not in self._sections:
            self._sections[name] = Section(self, name)
        return self._sections[name]

    @property
    def exists(self):
        """Return boolean indicating configuration file existence."""
        return bool(self.filename) and os.path.isfile(self.filename)

    def get(self, section, key, default=''):
        """Return the value of the specified option.

        Valid default input is a string. Returns a string.
        """
        return self[section].get(key, default)

    def getbool(self, section, key, default=''):
        """Return the specified option as boolean value.

        If the value of the option is one of "yes", "true", "enabled", "on",
        or "1", this method returns `True`, otherwise `False`.
        """
        return self[section].getbool(key, default)

    def getlist(self, section, key, default='', sep=',', keep_empty=False):
        """Return a list of values that have been specified as a single
        comma-separated option.
        """
        return self[section].getlist(key, default, sep, keep_empty)

    def getpath(self, section, key, default=''):
        """Return a configuration value as an absolute path.

        Relative paths are resolved relative to the location of this
        configuration file.
        """
        return self[section].getpath(key, default)

    def set(self, section, key, value):
        """Change a configuration value.

        These changes are not persistent unless saved with `save()`.
        """
        self[section].set(key, value)

    def defaults(self, compmgr=None):
        """Returns a dictionary of the default configuration values.

        If `compmgr` is specified, return only options declared in components
        that are enabled in the given `ComponentManager`.
        """
        defaults = {}
        for (section, key), option in Option.get_registry(compmgr).items():
            defaults.setdefault(section, {})[key] = \
                option.dumps(option.default)
        return defaults

    def options(self, section, compmgr=None):
        """Return a list of `(name, value)` tuples for every option in the
        specified section, including the default values.
        """
        return self[section].options(compmgr)

    def remove(self, section, key):
        """Remove the specified option."""
        self[section].remove(key)

    def sections(self, compmgr=None, defaults=True):
        """Return a sorted list of section names."""
        sections = set(self.parser.sections())
        if defaults:
            sections.update(self.defaults(compmgr))
        return sorted(sections)

    def has_option(self, section, option, defaults=True):
        """Returns True if option exists in section, or is available
        through the Option registry.
        """
        return self[section].contains(option, defaults)

    def save(self):
        """Write the configuration options to the primary file."""
        if not self.filename:
            return
        with open(self.filename, 'w', encoding='utf-8') as fileobj:
            fileobj.write('# -*- coding: utf-8 -*-\n\n')
            self.parser.write(fileobj)
        self._lastmtime = os.path.getmtime(self.filename)
        self._cleanup()

    def parse_if_needed(self, force=False):
        if not self.filename or not os.path.isfile(self.filename):
            return False

        changed = False
        modtime = os.path.getmtime(self.filename)
        if force or modtime != self._lastmtime:
            self.parser = ConfigParser(interpolation=None,
                                       dict_type=OrderedDict)
            try:
                if not self.parser.read(self.filename, encoding='utf-8'):
                    raise ConfigurationError(
                        _("Error reading '%(file)s', make sure it is "
                          "readable.", file=self.filename))
            except ParsingError as e:
                raise ConfigurationError(str(e))
            self._lastmtime = modtime
            changed = True

        if changed:
            self._cleanup()
        return changed

    def _cleanup(self):
        for section in self._sections.values():
            section._cache.clear()


class Section(object):
    """Proxy for a specific configuration section.

    Objects of this class should not be instantiated directly.
    """
    __slots__ = ['config', 'name', '_cache']

    def __init__(self, config, name):
        self.config = config
        self.name = name
        self._cache = {}

    def __repr__(self):
        return '<%s [%s]>' % (self.__class__.__name__, self.name)

    def contains(self, key, defaults=True):
        if self.config.parser.has_option(self.name, key):
            return True
        return defaults and (self.name, key) in Option.registry

    __contains__ = contains

    def iterate(self, compmgr=None, defaults=True):
        """Iterate over the options in this section.

        If `compmgr` is specified, only return default option values for
        components that are enabled in the given `ComponentManager`.
        """
        options = set()
        if self.config.parser.has_section(self.name):
            for option in self.config.parser.options(self.name):
                options.add(option.lower())
                yield option
        if defaults:
            for section, option in Option.get_registry(compmgr):
                if section == self.name and option.lower() not in options:
                    yield option

    __iter__ = iterate

    def get(self, key, default=''):
        """Return the value of the specified option.

        Valid default input is a string. Returns a string.
        """
        cached = self._cache.get(key, _use_default)
        if cached is not _use_default:
            return cached
        if self.config.parser.has_option(self.name, key):
            value = self.config.parser.get(self.name, key)
        elif default is not _use_default:
            option = Option.registry.get((self.name, key))
            value = option.dumps(option.default) if option else _use_default
        else:
            value = _use_default
        if value is _use_default:
            return default
        self._cache[key] = value
        return value

    def getbool(self, key, default=''):
        """Return the value of the specified option as boolean."""
        return as_bool(self.get(key, default))

    def getlist(self, key, default='', sep=',', keep_empty=True):
        """Return a list of values that have been specified as a single
        comma-separated option.
        """
        return _getlist(self.get(key, default), sep, keep_empty)

    def getpath(self, key, default=''):
        """Return the value of the specified option as a path, relative to
        the location of this configuration file.
        """
        path = self.get(key, default)
        if not path:
            return default
        if not os.path.isabs(path):
            path = os.path.join(os.path.dirname(self.config.filename or ''),
                                path)
        return os.path.normcase(os.path.realpath(path))

    def options(self, compmgr=None):
        """Return `(key, value)` tuples for every option in the section."""
        for key in self.iterate(compmgr):
            yield key, self.get(key)

    def set(self, key, value):
        """Change a configuration value.

        These changes are not persistent unless saved with `save()`.
        """
        self._cache.pop(key, None)
        if not self.config.parser.has_section(self.name):
            self.config.parser.add_section(self.name)
        if value is None:
            value = ''
        elif value is True:
            value = 'enabled'
        elif value is False:
            value = 'disabled'
        return self.config.parser.set(self.name, key, str(value))

    def remove(self, key):
        """Delete a key from this section."""
        if self.config.parser.has_section(self.name):
            self._cache.pop(key, None)
            self.config.parser.remove_option(self.name, key)


def _get_registry(cls, compmgr=None):
    """Return the descriptor registry.

    If `compmgr` is specified, only return descriptors for components that
    are enabled in the given `ComponentManager`.
    """
    if compmgr is None:
        return cls.registry

    from settingspanels.core import ComponentMeta
    components = {}
    for comp in ComponentMeta._components:
        for attr in comp.__dict__.values():
            if isinstance(attr, cls):
                components[attr] = comp

    return dict(each for each in cls.registry.items()
                if each[1] not in components
                   or compmgr.is_enabled(components[each[1]]))


class ConfigSection(object):
    """Descriptor for configuration sections."""

    registry = {}

    @staticmethod
    def get_registry(compmgr=None):
        """Return the section registry, as a `dict` mapping section names to
        `ConfigSection` objects.
        """
        return _get_registry(ConfigSection, compmgr)

    def __init__(self, name, doc):
        """Create the configuration section."""
        self.name = name
        self.registry[self.name] = self
        self.__doc__ = cleandoc(doc)

    def __get__(self, instance, owner):
        if instance is None:
            return self
        config = getattr(instance, 'config', None)
        if config and isinstance(config, Configuration):
            return config[self.name]

    def __repr__(self):
        return '<%s [%s]>' % (self.__class__.__name__, self.name)


class Option(object):
    """Descriptor for configuration options."""

    registry = {}

    def accessor(self, section, name, default):
        return section.get(name, default)

    @staticmethod
    def get_registry(compmgr=None):
        """Return the option registry, as a `dict` mapping `(section, key)`
        tuples to `Option` objects.
        """
        return _get_registry(Option, compmgr)

    def __init__(self, section, name, default=None, doc=''):
        """Create the configuration option.

        :param section: the name of the configuration section this option
                        belongs to
        :param name: the name of the option
        :param default: the default value for the option
        :param doc: documentation of the option
        """
        self.section = section
        self.name = name
        self.default = self.normalize(default)
        self.registry[(self.section, self.name)] = self
        self.__doc__ = cleandoc(doc)

    def __get__(self, instance, owner):
        if instance is None:
            return self
        config = getattr(instance, 'config', None)
        if config and isinstance(config, Configuration):
            section = config[self.section]
            value = self.accessor(section, self.name, self.default)
            return value

    def __set__(self, instance, value):
        raise AttributeError(_("Setting attribute is not allowed."))

    def __repr__(self):
        return '<%s [%s] %r>' % (self.__class__.__name__, self.section,
                                 self.name)

    def dumps(self, value):
        """Return the value as a string to write to an ini file"""
        if value is None:
            return ''
        if value is True:
            return 'enabled'
        if value is False:
            return 'disabled'
        return str(value)

    def normalize(self, value):
        """Normalize the given value to write to an ini file"""
        return self.dumps(value)


class BoolOption(Option):
    """Descriptor for boolean configuration options."""

    def accessor(self, section, name, default):
        return section.getbool(name, default)

    def normalize(self, value):
        if value not in (True, False):
            value = as_bool(value)
        return self.dumps(value)


class ListOption(Option):
    """Descriptor for configuration options that contain multiple values
    separated by a specific character.
    """

    def __init__(self, section, name, default=None, sep=',', keep_empty=False,
                 doc=''):
        self.sep = sep
        self.keep_empty = keep_empty
        Option.__init__(self, section, name, default, doc)

    def accessor(self, section, name, default):
        return section.getlist(name, default, self.sep, self.keep_empty)

    def dumps(self, value):
        if isinstance(value, (list, tuple)):
            sep = self.sep
            if isinstance(sep, (list, tuple)):
                sep = sep[0]
            return sep.join(Option.dumps(self, v) or '' for v in value)
        return Option.dumps(self, value)

    def normalize(self, value):
        return self.dumps(_getlist(value, self.sep, self.keep_empty))


class ChoiceOption(Option):
    """Descriptor for configuration options providing a choice among a list
    of items.

    The default value is the first choice in the list.
    """

    def __init__(self, section, name, choices, doc='', case_sensitive=True):
        Option.__init__(self, section, name, str(choices[0]), doc)
        self.choices = sorted(set(str(c).strip() for c in choices))
        self.case_sensitive = case_sensitive

    def accessor(self, section, name, default):
        value = section.get(name, default)
        choices = self.choices[:]
        if not self.case_sensitive:
            choices = [c.lower() for c in choices]
            value = value.lower()
        try:
            idx = choices.index(value)
        except ValueError:
            raise ConfigurationError(
                    _('[%(section)s] %(entry)s: expected one of '
                      '(%(choices)s), got %(value)s',
                      section=section.name, entry=name, value=repr(value),
                      choices=', '.join('"%s"' % c
                                        for c in sorted(self.choices))))
        return self.choices[idx]


class PathOption(Option):
    """Descriptor for file system path configuration options.

    Relative paths are resolved to absolute paths using the directory
    containing the configuration file as the reference.
    """

    def accessor(self, section, name, default):
        return section.getpath(name, default)


class ExtensionOption(Option):
    """Name of a component implementing `interface`. Raises a
    `ConfigurationError` if the component cannot be found in the list of
    active components implementing the interface."""

    def __init__(self, section, name, interface, default=None, doc=''):
        Option.__init__(self, section, name, default, doc)
        self.xtnpt = ExtensionPoint(interface)

    def __get__(self, instance, owner):
        if instance is None:
            return self
        value = Option.__get__(self, instance, owner)
        for impl in self.xtnpt.extensions(instance):
            if impl.__class__.__name__ == value:
                return impl
        raise ConfigurationError(
            _("Cannot find an implementation of the %(interface)s "
              "interface named %(implementation)s. Please check "
              "that the Component is enabled or update the option "
              "%(option)s in the configuration.",
              interface=self.xtnpt.interface.__name__,
              implementation=value,
              option="[%s] %s" % (self.section, self.name)))


class OrderedExtensionsOption(ListOption):
    """A comma separated, ordered, list of components implementing
    `interface`. Can be empty.

    If `include_missing` is true (the default) all components implementing
    the interface are returned, with those specified by the option ordered
    first.
    """

    def __init__(self, section, name, interface, default=None,
                 include_missing=True, doc=''):
        ListOption.__init__(self, section, name, default, doc=doc)
        self.xtnpt = ExtensionPoint(interface)
        self.include_missing = include_missing

    def __get__(self, instance, owner):
        if instance is None:
            return self
        order = ListOption.__get__(self, instance, owner)
        components = []
        implementing_classes = []
        for impl in self.xtnpt.extensions(instance):
            implementing_classes.append(impl.__class__.__name__)
            if self.include_missing or impl.__class__.__name__ in order:
                components.append(impl)
        not_found = sorted(set(order) - set(implementing_classes))
        if not_found:
            raise ConfigurationError(
                _("Cannot find implementation(s) of the %(interface)s "
                  "interface named %(implementation)s. Please check "
                  "that the Component is enabled or update the option "
                  "%(option)s in the configuration.",
                  interface=self.xtnpt.interface.__name__,
                  implementation=', '.join(not_found),
                  option="[%s] %s" % (self.section, self.name)))

        def key(component):
            name = component.__class__.__name__
            if name in order:
                return 0, order.index(name)
            return 1, 0
        components.sort(key=key)
        return components
