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

import os
import shutil
import tempfile
import time
import unittest

from settingspanels.config import *
from settingspanels.core import Component, ComponentManager, ComponentMeta, \
                                Interface, implements


class IDummy(Interface):
    pass


class ConfigurationTestCase(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.filename = os.path.join(self.tmpdir, 'settings.ini')
        self._write([])
        self._orig_registry = Option.registry
        Option.registry = {}

    def tearDown(self):
        Option.registry = self._orig_registry
        shutil.rmtree(self.tmpdir)

    def _read(self):
        return Configuration(self.filename)

    def _write(self, lines):
        with open(self.filename, 'w', encoding='utf-8') as fileobj:
            fileobj.write('\n'.join(lines + ['']))

    def test_default(self):
        config = self._read()
        self.assertEqual('', config.get('a', 'option'))
        self.assertEqual('value', config.get('a', 'option', 'value'))

        class Foo(object):
            option_a = Option('a', 'option', 'value')

        self.assertEqual('value', config.get('a', 'option'))

    def test_read_and_get(self):
        self._write(['[a]', 'option = x'])
        config = self._read()
        self.assertEqual('x', config.get('a', 'option'))
        self.assertEqual('x', config.get('a', 'option', 'y'))
        self.assertEqual('y', config.get('b', 'option2', 'y'))

    def test_read_and_getbool(self):
        self._write(['[a]', 'option = yes', 'option2 = disabled'])
        config = self._read()
        self.assertTrue(config.getbool('a', 'option'))
        self.assertFalse(config.getbool('a', 'option2'))
        self.assertFalse(config.getbool('b', 'option'))
        self.assertTrue(config.getbool('b', 'option', 'on'))

    def test_read_and_getlist(self):
        self._write(['[a]', 'option = foo, bar, baz', 'empty = '])
        config = self._read()
        self.assertEqual(['foo', 'bar', 'baz'],
                         config.getlist('a', 'option'))
        self.assertEqual([], config.getlist('a', 'empty'))
        self.assertEqual(['foo', 'bar', 'baz'],
                         config.getlist('a', 'option', sep=[',', ' ']))

    def test_set_and_save(self):
        config = self._read()
        config.set('b', 'option0', 'y')
        config.set('b', 'option1', True)
        config.set('b', 'option2', None)
        config.save()

        config = self._read()
        self.assertEqual('y', config.get('b', 'option0'))
        self.assertEqual('enabled', config.get('b', 'option1'))
        self.assertEqual('', config.get('b', 'option2'))

    def test_remove(self):
        self._write(['[a]', 'option = x'])
        config = self._read()
        config.remove('a', 'option')
        self.assertEqual('', config.get('a', 'option'))

    def test_sections(self):
        self._write(['[a]', 'option = x', '[b]', 'option = y'])
        config = self._read()
        self.assertEqual(['a', 'b'], config.sections())

        class Foo(object):
            option_c = Option('c', 'option', 'value')

        self.assertEqual(['a', 'b', 'c'], config.sections())
        self.assertEqual(['a', 'b'], config.sections(defaults=False))

    def test_options(self):
        self._write(['[a]', 'option = x', '[b]', 'option = y'])
        config = self._read()
        self.assertEqual(('option', 'x'), next(iter(config.options('a'))))
        self.assertEqual([], list(config.options('c')))

    def test_has_option(self):
        self._write(['[a]', 'option = x'])
        config = self._read()
        self.assertTrue(config.has_option('a', 'option'))
        self.assertFalse(config.has_option('a', 'missing'))

    def test_reparse(self):
        self._write(['[a]', 'option = x'])
        config = self._read()
        self.assertEqual('x', config.get('a', 'option'))
        time.sleep(2)  # needed because of low mtime granularity

        self._write(['[a]', 'option = y'])
        self.assertTrue(config.parse_if_needed())
        self.assertEqual('y', config.get('a', 'option'))

    def test_no_filename(self):
        config = Configuration(None)
        self.assertFalse(config.exists)
        config.set('a', 'option', 'x')
        config.save()
        self.assertEqual('x', config.get('a', 'option'))


class OptionDescriptorTestCase(unittest.TestCase):

    def setUp(self):
        self.config = Configuration(None)
        self._orig_registry = Option.registry
        Option.registry = {}

    def tearDown(self):
        Option.registry = self._orig_registry

    def _holder(self, **options):
        holder = type('Holder', (object,), options)()
        holder.config = self.config
        return holder

    def test_option_access(self):
        holder = self._holder(option=Option('a', 'option', 'default'))
        self.assertEqual('default', holder.option)
        self.config.set('a', 'option', 'value')
        self.assertEqual('value', holder.option)

    def test_set_option_attribute_not_allowed(self):
        holder = self._holder(option=Option('a', 'option', 'default'))
        self.assertRaises(AttributeError, setattr, holder, 'option', 'x')

    def test_bool_option(self):
        holder = self._holder(option=BoolOption('a', 'option', True))
        self.assertIs(True, holder.option)
        self.config.set('a', 'option', 'off')
        self.assertIs(False, holder.option)

    def test_list_option(self):
        holder = self._holder(option=ListOption('a', 'option', 'x, y'))
        self.assertEqual(['x', 'y'], holder.option)
        self.config.set('a', 'option', 'z|w')
        self.assertEqual(['z|w'], holder.option)

    def test_list_option_with_separator(self):
        holder = self._holder(option=ListOption('a', 'option', 'x|y',
                                                sep='|'))
        self.assertEqual(['x', 'y'], holder.option)

    def test_choice_option(self):
        holder = self._holder(option=ChoiceOption('a', 'option',
                                                  ['first', 'second']))
        self.assertEqual('first', holder.option)
        self.config.set('a', 'option', 'second')
        self.assertEqual('second', holder.option)
        self.config.set('a', 'option', 'third')
        self.assertRaises(ConfigurationError, getattr, holder, 'option')

    def test_choice_option_case_insensitive(self):
        holder = self._holder(option=ChoiceOption('a', 'option',
                                                  ['INFO', 'DEBUG'],
                                                  case_sensitive=False))
        self.config.set('a', 'option', 'debug')
        self.assertEqual('DEBUG', holder.option)

    def test_config_section(self):
        holder = self._holder(section=ConfigSection('users', ''))
        self.config.set('users', 'alice', '5')
        self.assertEqual([('alice', '5')], list(holder.section.options()))


class ExtensionOptionTestCase(unittest.TestCase):

    def setUp(self):
        self._old_registry = ComponentMeta._registry
        ComponentMeta._registry = {}
        self._orig_option_registry = Option.registry
        Option.registry = {}

        class ImplA(Component):
            implements(IDummy)

        class ImplB(Component):
            implements(IDummy)

        class ImplC(Component):
            implements(IDummy)

        class Holder(Component):
            single = ExtensionOption('a', 'single', IDummy, 'ImplA')
            ordered = OrderedExtensionsOption('a', 'ordered', IDummy,
                                              'ImplC, ImplA')
            ordered_only = OrderedExtensionsOption('a', 'only', IDummy,
                                                   'ImplB', False)

        self.ImplA, self.ImplB, self.ImplC = ImplA, ImplB, ImplC
        self.compmgr = ComponentManager()
        self.config = Configuration(None)
        self.holder = Holder(self.compmgr)
        self.holder.config = self.config

    def tearDown(self):
        ComponentMeta._registry = self._old_registry
        Option.registry = self._orig_option_registry

    def test_extension_option(self):
        self.assertIsInstance(self.holder.single, self.ImplA)
        self.config.set('a', 'single', 'ImplB')
        self.assertIsInstance(self.holder.single, self.ImplB)

    def test_extension_option_unknown(self):
        self.config.set('a', 'single', 'ImplZ')
        self.assertRaises(ConfigurationError, getattr, self.holder, 'single')

    def test_ordered_extensions_option(self):
        self.assertEqual([self.ImplC, self.ImplA, self.ImplB],
                         [c.__class__ for c in self.holder.ordered])

    def test_ordered_extensions_option_without_missing(self):
        self.assertEqual([self.ImplB],
                         [c.__class__ for c in self.holder.ordered_only])

    def test_ordered_extensions_option_unknown(self):
        self.config.set('a', 'ordered', 'ImplA, ImplZ')
        self.assertRaises(ConfigurationError, getattr, self.holder,
                          'ordered')


def test_suite():
    suite = unittest.TestSuite()
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        ConfigurationTestCase))
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        OptionDescriptorTestCase))
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        ExtensionOptionTestCase))
    return suite


if __name__ == '__main__':
    unittest.main(defaultTest='test_suite')
