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

import threading
import unittest

from settingspanels.config import ConfigurationError
from settingspanels.core import Component, implements
from settingspanels.prefs.model import IPreferencesChangeListener, \
                                       MemoryPreferencesStore, \
                                       PreferenceTransaction, \
                                       PreferencesSystem, UserPreferences
from settingspanels.test import EnvironmentStub
from settingspanels.user import User


class RecordingChangeListener(Component):
    """Remember the changes it gets notified of."""

    implements(IPreferencesChangeListener)

    def __init__(self):
        self.changes = []

    def preferences_changed(self, preferences, xactions):
        self.changes.append((preferences.user_id,
                             [x.key for x in xactions]))


class UserPreferencesTestCase(unittest.TestCase):

    def setUp(self):
        self.env = EnvironmentStub()
        self.prefs = PreferencesSystem(self.env)
        self.user = User(7, 'carol')

    def tearDown(self):
        self.env.reset()

    def test_new_preferences(self):
        preferences = self.prefs.load_user_preferences(self.user)
        self.assertTrue(preferences.is_new)
        self.assertFalse(preferences.is_global)
        self.assertEqual(7, preferences.user_id)
        self.assertEqual({}, preferences.values)

    def test_load_does_not_store(self):
        self.prefs.load_user_preferences(self.user)
        self.assertIsNone(self.prefs.store.get_preferences_values(7))

    def test_setting_falls_back_on_definition_default(self):
        preferences = self.prefs.load_user_preferences(self.user)
        self.assertEqual('UTC', preferences.get_setting('timezone'))
        self.assertEqual(14, preferences.get_setting('font_size'))
        self.assertIsNone(preferences.get_setting('no_such_setting'))

    def test_setting_falls_back_on_global_defaults(self):
        defaults = self.prefs.load_global_preferences()
        self.assertTrue(defaults.is_global)
        defaults.values['timezone'] = 'Europe/Paris'
        self.prefs.save_preferences(defaults)

        preferences = self.prefs.load_user_preferences(self.user)
        self.assertEqual('Europe/Paris', preferences.get_setting('timezone'))
        preferences.values['timezone'] = 'Asia/Tokyo'
        self.assertEqual('Asia/Tokyo', preferences.get_setting('timezone'))

    def test_explicit_value(self):
        preferences = UserPreferences(self.env, 7, {'pronoun': 'she'})
        self.assertFalse(preferences.is_new)
        self.assertTrue(preferences.has_value('pronoun'))
        self.assertEqual('she', preferences.get_value('pronoun'))
        self.assertIsNone(preferences.get_value('timezone'))

    def test_new_transaction(self):
        preferences = self.prefs.load_user_preferences(self.user)
        xaction = preferences.new_transaction('pronoun', 'he')
        self.assertIsInstance(xaction, PreferenceTransaction)
        self.assertEqual('pronoun', xaction.key)
        self.assertEqual('he', xaction.new_value)
        self.assertIsNone(xaction.old_value)

    def test_save_and_reload(self):
        preferences = self.prefs.load_user_preferences(self.user)
        preferences.values['pronoun'] = 'they'
        self.prefs.save_preferences(preferences)
        self.assertFalse(preferences.is_new)

        reloaded = self.prefs.load_user_preferences(self.user)
        self.assertFalse(reloaded.is_new)
        self.assertEqual({'pronoun': 'they'}, reloaded.values)

    def test_save_notifies_listeners(self):
        listener = RecordingChangeListener(self.env)
        preferences = self.prefs.load_user_preferences(self.user)
        preferences.values['pronoun'] = 'they'
        self.prefs.save_preferences(
            preferences, [PreferenceTransaction('pronoun', 'they')])
        self.assertEqual([(7, ['pronoun'])], listener.changes)

    def test_unknown_store(self):
        self.env.config.set('settings', 'preferences_store', 'NoSuchStore')
        self.assertRaises(ConfigurationError,
                          self.prefs.load_user_preferences, self.user)


class MemoryPreferencesStoreTestCase(unittest.TestCase):

    def setUp(self):
        self.env = EnvironmentStub()
        self.store = MemoryPreferencesStore(self.env)

    def tearDown(self):
        self.env.reset()

    def test_values_are_copied(self):
        values = {'pronoun': 'he'}
        self.store.save_preferences_values(1, values)
        values['pronoun'] = 'she'
        stored = self.store.get_preferences_values(1)
        self.assertEqual({'pronoun': 'he'}, stored)
        stored['pronoun'] = 'they'
        self.assertEqual({'pronoun': 'he'},
                         self.store.get_preferences_values(1))

    def test_global_values_kept_apart(self):
        self.store.save_preferences_values(None, {'timezone': 'UTC'})
        self.assertIsNone(self.store.get_preferences_values(1))
        self.assertEqual({'timezone': 'UTC'},
                         self.store.get_preferences_values(None))

    def test_concurrent_saves(self):
        def save(user_id):
            for i in range(50):
                self.store.save_preferences_values(user_id, {'n': i})
        threads = [threading.Thread(target=save, args=(user_id,))
                   for user_id in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        for user_id in range(8):
            self.assertEqual({'n': 49},
                             self.store.get_preferences_values(user_id))

    def test_stores_are_per_environment(self):
        self.store.save_preferences_values(1, {'pronoun': 'he'})
        other_env = EnvironmentStub()
        try:
            other = MemoryPreferencesStore(other_env)
            self.assertIsNone(other.get_preferences_values(1))
        finally:
            other_env.reset()


def test_suite():
    suite = unittest.TestSuite()
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        UserPreferencesTestCase))
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        MemoryPreferencesStoreTestCase))
    return suite


if __name__ == '__main__':
    unittest.main(defaultTest='test_suite')
