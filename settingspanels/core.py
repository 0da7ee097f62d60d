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

import sys

__all__ = ['Component', 'ExtensionPoint', 'implements', 'Interface',
           'SettingsBaseError', 'SettingsError', 'SettingsValueError']


def N_(string):
    # settingspanels.util imports this module, so the marker lives here
    return string


class SettingsBaseError(Exception):
    """Root of the exceptions raised by SettingsPanels."""

    title = N_("Settings Error")


class SettingsError(SettingsBaseError):
    """An error shown to the user, with an optional `title`.

    :param message: what went wrong
    :param title: overrides the class `title`
    :param show_traceback: whether the error page should include the
                           traceback
    """

    def __init__(self, message, title=None, show_traceback=False):
        super().__init__(message)
        self._message = message
        self.title = title or self.title
        self.show_traceback = show_traceback

    message = property(lambda self: self._message,
                       lambda self, v: setattr(self, '_message', v))

    def __str__(self):
        return str(self.message)


class SettingsValueError(SettingsError, ValueError):
    """A value was rejected, for example a setting failing validation."""


class Interface(object):
    """Base class of the interfaces components implement, like
    `ISettingsPanel`."""


class ExtensionPoint(property):
    """Class attribute listing the enabled components implementing
    `interface`, e.g. all the settings panels of the environment.
    """

    def __init__(self, interface):
        property.__init__(self, self.extensions)
        self.interface = interface
        self.__doc__ = "List of components that implement `~%s.%s`" % \
                       (interface.__module__, interface.__name__)

    def extensions(self, component):
        """Return the active components of `component.compmgr`
        implementing the interface, in registration order."""
        compmgr = component.compmgr
        extensions = []
        for cls in ComponentMeta._registry.get(self.interface, ()):
            extension = compmgr[cls]
            if extension:
                extensions.append(extension)
        return extensions

    def __repr__(self):
        return '<ExtensionPoint %s>' % self.interface.__name__


class ComponentMeta(type):
    """Register every concrete component class and the interfaces it
    implements.

    Classes named `Component` or declaring `abstract = True` are not
    registered, so base classes such as `SettingsPanel` never show up
    as extensions.
    """

    _components = []
    _registry = {}

    def __new__(mcs, name, bases, d):
        new_class = type.__new__(mcs, name, bases, d)
        if name != 'Component' and not d.get('abstract'):
            mcs._register(new_class)
        return new_class

    @staticmethod
    def _register(cls):
        ComponentMeta._components.append(cls)
        for base in cls.__mro__:
            for interface in base.__dict__.get('_implements', ()):
                classes = ComponentMeta._registry.setdefault(interface, [])
                if cls not in classes:
                    classes.append(cls)

    def __call__(cls, *args, **kwargs):
        """Return the instance of the component for the manager given
        as first argument, creating it on first use.
        """
        if issubclass(cls, ComponentManager):
            self = cls.__new__(cls)
            self.compmgr = self
            self.__init__(*args, **kwargs)
            return self

        assert len(args) >= 1 and isinstance(args[0], ComponentManager), \
               "First argument must be a ComponentManager instance"
        compmgr = args[0]
        self = compmgr.components.get(cls)
        # Two threads may both build an instance, the last one wins
        if self is None:
            self = cls.__new__(cls)
            self.compmgr = compmgr
            compmgr.component_activated(self)
            self.__init__()
            compmgr.components[cls] = self
        return self


class Component(object, metaclass=ComponentMeta):
    """Base class of components.

    A component is a singleton per `ComponentManager` (usually the
    `Environment`). It declares the interfaces it implements with
    `implements()` and reaches the components implementing other
    interfaces through `ExtensionPoint` attributes.
    """

    @staticmethod
    def implements(*interfaces):
        """Declare, from within a class body, the interfaces the class
        implements."""
        frame = sys._getframe(1)
        locals_ = frame.f_locals
        assert locals_ is not frame.f_globals and '__module__' in locals_, \
               'implements() can only be used in a class definition'
        locals_.setdefault('_implements', []).extend(interfaces)

    def __repr__(self):
        return '<Component %s.%s>' % (self.__class__.__module__,
                                      self.__class__.__name__)


implements = Component.implements


class ComponentManager(object):
    """Hold the active component instances and decide which component
    classes are enabled."""

    def __init__(self):
        self.components = {}
        self.enabled = {}
        if isinstance(self, Component):
            self.components[self.__class__] = self

    def __getitem__(self, cls):
        """Return the instance of `cls`, or `None` if the class is
        disabled.

        Raises a `SettingsError` if `cls` isn't a registered component.
        """
        if not self.is_enabled(cls):
            return None
        component = self.components.get(cls)
        if component or issubclass(cls, ComponentManager):
            return component
        if cls not in ComponentMeta._components:
            raise SettingsError('Component "%s" not registered'
                                % cls.__name__)
        try:
            return cls(self)
        except TypeError as e:
            raise SettingsError("Unable to instantiate component %r (%s)"
                                % (cls, e))

    def is_enabled(self, cls):
        """Return whether `cls` is enabled, asking
        `is_component_enabled` once per class."""
        if cls not in self.enabled:
            self.enabled[cls] = self.is_component_enabled(cls)
        return self.enabled[cls]

    def enable_component(self, cls):
        """Enable `cls` whatever `is_component_enabled` says."""
        if not isinstance(cls, type):
            cls = cls.__class__
        self.enabled[cls] = True

    def component_activated(self, component):
        """Called before a new component instance is initialized, to
        give it attributes like `env`."""

    def is_component_enabled(self, cls):
        """Return whether `cls` may be activated.

        `False` and `None` both keep the component out; subclasses
        use `None` for classes without an explicit rule.
        """
        return True
