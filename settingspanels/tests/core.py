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

import unittest

from settingspanels.core import *
from settingspanels.core import ComponentManager, ComponentMeta


class SettingsErrorTestCase(unittest.TestCase):

    def test_init(self):
        e = SettingsError("the message", "the title", True)
        self.assertEqual("the message", e.message)
        self.assertEqual("the title", e.title)
        self.assertTrue(e.show_traceback)

    def test_default_title(self):
        e = SettingsError("the message")
        self.assertEqual("Settings Error", e.title)
        self.assertEqual("the message", str(e))

    def test_value_error(self):
        e = SettingsValueError("bad value")
        self.assertIsInstance(e, ValueError)
        self.assertIsInstance(e, SettingsError)


class ISpeaker(Interface):
    def speak():
        """Return a greeting."""


class IListener(Interface):
    def listen():
        """Return whatever was heard."""


class ComponentTestCase(unittest.TestCase):

    def setUp(self):
        self.compmgr = ComponentManager()
        # Keep the components defined by the tests out of the registry
        self.old_registry = ComponentMeta._registry
        ComponentMeta._registry = {}

    def tearDown(self):
        ComponentMeta._registry = self.old_registry

    def test_base_class_not_registered(self):
        self.assertNotIn(Component, ComponentMeta._components)
        self.assertRaises(SettingsError, self.compmgr.__getitem__, Component)

    def test_abstract_component_not_registered(self):
        class AbstractSpeaker(Component):
            abstract = True
        self.assertNotIn(AbstractSpeaker, ComponentMeta._components)
        self.assertRaises(SettingsError, self.compmgr.__getitem__,
                          AbstractSpeaker)

    def test_unregistered_class(self):
        class NotAComponent(object):
            pass
        self.assertRaises(SettingsError, self.compmgr.__getitem__,
                          NotAComponent)

    def test_component_identity(self):
        class Speaker(Component):
            pass
        first = Speaker(self.compmgr)
        self.assertIs(first, Speaker(self.compmgr))
        self.assertIs(first, self.compmgr[Speaker])

    def test_component_initializer(self):
        class Speaker(Component):
            def __init__(self):
                self.greeting = 'hello'
        self.assertEqual('hello', Speaker(self.compmgr).greeting)

    def test_extension_point_with_no_extension(self):
        class Audience(Component):
            speakers = ExtensionPoint(ISpeaker)
        self.assertEqual([], Audience(self.compmgr).speakers)

    def test_extension_point_with_extensions(self):
        class Audience(Component):
            speakers = ExtensionPoint(ISpeaker)
        class Alice(Component):
            implements(ISpeaker)
            def speak(self):
                return 'hi'
        class Bob(Component):
            implements(ISpeaker)
            def speak(self):
                return 'hey'
        speakers = Audience(self.compmgr).speakers
        self.assertEqual(['hi', 'hey'], [s.speak() for s in speakers])

    def test_inherited_implements(self):
        class Audience(Component):
            speakers = ExtensionPoint(ISpeaker)
        class BaseSpeaker(Component):
            abstract = True
            implements(ISpeaker)
        class Carol(BaseSpeaker):
            def speak(self):
                return 'hello'
        speakers = Audience(self.compmgr).speakers
        self.assertEqual(1, len(speakers))
        self.assertIsInstance(speakers[0], Carol)

    def test_multiple_interfaces(self):
        class Audience(Component):
            speakers = ExtensionPoint(ISpeaker)
            listeners = ExtensionPoint(IListener)
        class Both(Component):
            implements(ISpeaker, IListener)
        audience = Audience(self.compmgr)
        self.assertEqual(audience.speakers, audience.listeners)

    def test_disabled_component_not_an_extension(self):
        class DisablingManager(ComponentManager):
            def is_component_enabled(self, cls):
                return cls.__name__ != 'Dave'
        class Audience(Component):
            speakers = ExtensionPoint(ISpeaker)
        class Dave(Component):
            implements(ISpeaker)
        compmgr = DisablingManager()
        self.assertEqual([], Audience(compmgr).speakers)
        self.assertIsNone(compmgr[Dave])

    def test_enable_component(self):
        class DisablingManager(ComponentManager):
            def is_component_enabled(self, cls):
                return None
        class Speaker(Component):
            pass
        compmgr = DisablingManager()
        self.assertFalse(compmgr.is_enabled(Speaker))
        self.assertIsNone(compmgr[Speaker])
        compmgr.enable_component(Speaker)
        self.assertTrue(compmgr.is_enabled(Speaker))
        self.assertIsInstance(compmgr[Speaker], Speaker)

    def test_component_manager_component(self):
        class ManagerComponent(ComponentManager, Component):
            implements(ISpeaker)
            def __init__(self, foo, bar):
                ComponentManager.__init__(self)
                self.foo, self.bar = foo, bar
        class Audience(Component):
            speakers = ExtensionPoint(ISpeaker)
        mgr = ManagerComponent('Test', 42)
        self.assertEqual(id(mgr), id(mgr[ManagerComponent]))
        self.assertEqual([mgr], Audience(mgr).speakers)

    def test_first_argument_must_be_manager(self):
        class Speaker(Component):
            pass
        self.assertRaises(AssertionError, Speaker)


def test_suite():
    suite = unittest.TestSuite()
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        SettingsErrorTestCase))
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        ComponentTestCase))
    return suite


if __name__ == '__main__':
    unittest.main(defaultTest='test_suite')
