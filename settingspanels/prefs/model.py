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

import copy
import threading

from settingspanels.config import ExtensionOption
from settingspanels.core import *
from settingspanels.prefs.setting import SettingSystem

__all__ = ['IPreferencesChangeListener', 'IPreferencesStore',
           'PreferenceTransaction', 'PreferencesSystem', 'UserPreferences']


class PreferenceTransaction(object):
    """A proposed change of a single setting.

    `old_value`, `author`, `content_source` and `time` are filled in by
    the editor when the transaction is applied.
    """

    __slots__ = ('key', 'new_value', 'old_value', 'author',
                 'content_source', 'time')

    def __init__(self, key, new_value, old_value=None, author=None,
                 content_source=None, time=None):
        self.key = key
        self.new_value = new_value
        self.old_value = old_value
        self.author = author
        self.content_source = content_source
        self.time = time

    def __repr__(self):
        return '<%s %r: %r -> %r>' % (self.__class__.__name__, self.key,
                                      self.old_value, self.new_value)


class UserPreferences(object):
    """The settings of a user, or the global defaults when `user_id` is
    `None`.

    Only the explicitly set values are stored. `get_setting` falls back
    on the global defaults, then on the default of the setting
    definition.
    """

    def __init__(self, env, user_id=None, values=None):
        self.env = env
        self.user_id = user_id
        self.values = dict(values or {})
        self.is_new = values is None

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__,
                            'global' if self.is_global else self.user_id)

    @property
    def is_global(self):
        return self.user_id is None

    def has_value(self, key):
        return key in self.values

    def get_value(self, key):
        """Return the value explicitly stored for `key`, or `None`."""
        return self.values.get(key)

    def get_setting(self, key):
        """Return the effective value of the setting `key`."""
        if key in self.values:
            return self.values[key]
        if not self.is_global:
            defaults = PreferencesSystem(self.env).load_global_preferences()
            if defaults.has_value(key):
                return defaults.get_value(key)
        setting = SettingSystem(self.env).get_setting(key)
        return setting.default if setting else None

    def new_transaction(self, key, value):
        """Return a `PreferenceTransaction` setting `key` to `value`.

        A `value` of `None` removes the stored value, reverting the
        setting to its default.
        """
        return PreferenceTransaction(key, value)


class IPreferencesStore(Interface):
    """Extension point interface for components storing preferences."""

    def get_preferences_values(user_id):
        """Return the `dict` of values stored for `user_id` (`None` for
        the global defaults), or `None` if nothing was stored yet."""

    def save_preferences_values(user_id, values):
        """Replace the values stored for `user_id`."""


class IPreferencesChangeListener(Interface):
    """Extension point interface for components that should get notified
    when preferences change."""

    def preferences_changed(preferences, xactions):
        """Called after `xactions` were applied to `preferences`."""


class MemoryPreferencesStore(Component):
    """Keep the preferences in memory, for the lifetime of the process."""

    implements(IPreferencesStore)

    def __init__(self):
        self._values = {}
        self._lock = threading.RLock()

    def get_preferences_values(self, user_id):
        with self._lock:
            values = self._values.get(user_id)
            return copy.deepcopy(values) if values is not None else None

    def save_preferences_values(self, user_id, values):
        with self._lock:
            self._values[user_id] = copy.deepcopy(values)


class PreferencesSystem(Component):
    """Load and save user preferences."""

    store = ExtensionOption('settings', 'preferences_store',
                            IPreferencesStore, 'MemoryPreferencesStore',
        """Name of the component implementing `IPreferencesStore`, which
        is used for storing the user preferences.""")

    change_listeners = ExtensionPoint(IPreferencesChangeListener)

    def load_user_preferences(self, user):
        """Return the `UserPreferences` of `user`.

        If nothing has been stored yet, a new object holding no values
        is returned; it is not stored until it gets saved.
        """
        values = self.store.get_preferences_values(user.id)
        return UserPreferences(self.env, user.id, values)

    def load_global_preferences(self):
        """Return the global default `UserPreferences`."""
        values = self.store.get_preferences_values(None)
        return UserPreferences(self.env, None, values)

    def save_preferences(self, preferences, xactions=()):
        self.store.save_preferences_values(preferences.user_id,
                                           preferences.values)
        preferences.is_new = False
        for listener in self.change_listeners:
            listener.preferences_changed(preferences, xactions)
