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
from datetime import datetime, timezone

from markupsafe import Markup

from settingspanels.prefs.api import PanelRegistry
from settingspanels.prefs.model import PreferencesSystem, UserPreferences
from settingspanels.prefs.panels import AccountSettingsPanel, \
                                        DateTimeSettingsPanel, \
                                        DisplayPreferencesSettingsPanel, \
                                        EmailFormatSettingsPanel
from settingspanels.test import EnvironmentStub, MockRequest
from settingspanels.tests.user import add_users
from settingspanels.user import UserManager
from settingspanels.web.api import RequestDone


class BuiltinPanelsTestCase(unittest.TestCase):

    def setUp(self):
        self.env = EnvironmentStub()

    def tearDown(self):
        self.env.reset()

    def test_all_panels(self):
        registry = PanelRegistry(self.env)
        self.assertEqual(['account', 'datetime', 'display', 'emailformat'],
                         list(registry.get_all_panels()))

    def test_display_panels(self):
        registry = PanelRegistry(self.env)
        self.assertEqual(['account', 'application', 'email'],
                         list(registry.get_all_panel_groups_with_panels()))
        self.assertEqual(['account', 'datetime', 'display', 'emailformat'],
                         list(registry.get_all_display_panels()))

    def test_editable_by_administrators(self):
        self.assertTrue(AccountSettingsPanel(self.env)
                        .is_editable_by_administrators())
        self.assertTrue(DateTimeSettingsPanel(self.env)
                        .is_editable_by_administrators())
        self.assertTrue(DisplayPreferencesSettingsPanel(self.env)
                        .is_editable_by_administrators())
        self.assertFalse(EmailFormatSettingsPanel(self.env)
                         .is_editable_by_administrators())

    def test_email_panel_disabled_with_email(self):
        panel = EmailFormatSettingsPanel(self.env)
        self.assertTrue(panel.is_enabled())
        self.env.config.set('settings', 'email_enabled', False)
        self.assertFalse(panel.is_enabled())

    def test_panel_group(self):
        panel = DisplayPreferencesSettingsPanel(self.env)
        self.assertEqual('application',
                         panel.get_panel_group().get_panel_group_key())
        self.assertEqual("Applications",
                         panel.get_panel_group().get_panel_group_name())


class DateTimeSettingsPanelTestCase(unittest.TestCase):

    def setUp(self):
        self.env = EnvironmentStub()
        self.panel = DateTimeSettingsPanel(self.env)
        self.now = datetime(2024, 1, 5, 14, 34, tzinfo=timezone.utc)

    def tearDown(self):
        self.env.reset()

    def _preview(self, **values):
        preferences = UserPreferences(self.env, 1, values)
        return self.panel.format_preview(preferences, self.now)

    def test_preview_defaults(self):
        self.assertEqual('Jan 5, 2024 2:34 PM', self._preview())

    def test_preview_iso8601_24_hour(self):
        self.assertEqual('2024-01-05 14:34',
                         self._preview(date_format='iso8601',
                                       time_format='HH:mm'))

    def test_preview_timezone(self):
        self.assertEqual('2024-01-05 15:34',
                         self._preview(date_format='iso8601',
                                       time_format='HH:mm',
                                       timezone='Europe/Paris'))


class FormSettingsPanelTestCase(unittest.TestCase):

    def setUp(self):
        self.env = EnvironmentStub()
        add_users(self.env)
        self.bob = UserManager(self.env).get_user_by_name('bob')
        self.panel = DisplayPreferencesSettingsPanel(self.env)

    def tearDown(self):
        self.env.reset()

    def _process(self, method='GET', args=None):
        req = MockRequest(self.env, authname='bob', method=method,
                          path_info='/settings/panel/display/',
                          args=args or {})
        context = self.panel.bind(self.bob, self.bob, req)
        return req, self.panel.process_request(req, context)

    def _stored(self):
        return PreferencesSystem(self.env).load_user_preferences(self.bob) \
                                          .values

    def test_get_form(self):
        req, (template, data) = self._process()
        self.assertEqual('settings_form.html', template)
        self.assertEqual(['title_style', 'monospaced_font', 'font_size'],
                         [field['key'] for field in data['fields']])
        fields = dict((field['key'], field) for field in data['fields'])
        self.assertEqual('select', fields['title_style']['kind'])
        self.assertEqual('text', fields['monospaced_font']['kind'])
        self.assertEqual(14, fields['font_size']['value'])
        self.assertEqual('/settings/panel/display/', data['form_action'])

    def test_post_saves_and_redirects(self):
        with self.assertRaises(RequestDone):
            self._process('POST', {'title_style': 'text',
                                   'monospaced_font': '12px Menlo',
                                   'font_size': '16'})
        self.assertEqual({'title_style': 'text',
                          'monospaced_font': '12px Menlo',
                          'font_size': 16}, self._stored())

    def test_redirect_location(self):
        req = MockRequest(self.env, authname='bob', method='POST',
                          args={'title_style': 'glyph', 'font_size': '14'})
        context = self.panel.bind(self.bob, self.bob, req)
        self.assertRaises(RequestDone, self.panel.process_request, req,
                          context)
        self.assertEqual(['303 See Other'], req.status_sent)
        self.assertEqual('http://example.org/settings/panel/display/'
                         '?saved=true', req.headers_sent['Location'])

    def test_post_same_values_again(self):
        args = {'title_style': 'text', 'font_size': '16'}
        self.assertRaises(RequestDone, self._process, 'POST', args)
        self.assertRaises(RequestDone, self._process, 'POST', args)
        self.assertEqual({'title_style': 'text', 'font_size': 16},
                         self._stored())

    def test_empty_value_reverts_to_default(self):
        self.assertRaises(RequestDone, self._process, 'POST',
                          {'monospaced_font': 'Menlo'})
        self.assertRaises(RequestDone, self._process, 'POST',
                          {'monospaced_font': ''})
        self.assertEqual({}, self._stored())

    def test_post_invalid_values(self):
        self.assertRaises(RequestDone, self._process, 'POST',
                          {'title_style': 'text'})
        req, (template, data) = self._process('POST',
                                              {'title_style': 'glyph',
                                               'font_size': '64'})
        self.assertEqual(1, len(req.chrome['warnings']))
        self.assertIsInstance(req.chrome['warnings'][0], Markup)
        self.assertIn("Font Size", req.chrome['warnings'][0])
        fields = dict((field['key'], field) for field in data['fields'])
        self.assertEqual('64', fields['font_size']['value'])
        self.assertEqual({'title_style': 'text'}, self._stored())

    def test_saved_notice(self):
        req, (template, data) = self._process('GET', {'saved': 'true'})
        self.assertEqual(["Changes saved."], req.chrome['notices'])


def test_suite():
    suite = unittest.TestSuite()
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        BuiltinPanelsTestCase))
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        DateTimeSettingsPanelTestCase))
    suite.addTest(unittest.TestLoader().loadTestsFromTestCase(
        FormSettingsPanelTestCase))
    return suite


if __name__ == '__main__':
    unittest.main(defaultTest='test_suite')
