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

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from babel.dates import format_date, format_time

from settingspanels.config import BoolOption
from settingspanels.core import SettingsValueError
from settingspanels.prefs.api import SettingsPanel
from settingspanels.prefs.editor import PreferencesValidationError
from settingspanels.prefs.setting import BoolSetting, SettingSystem
from settingspanels.util.translation import N_, _
from settingspanels.web.chrome import add_notice, add_warning


class FormSettingsPanel(SettingsPanel):
    """Base class for panels editing a fixed list of settings in a
    single form.

    Subclasses list the keys of the settings in `setting_keys`. The
    form is saved one setting at a time, and only when every submitted
    value is valid.
    """

    abstract = True

    setting_keys = ()

    template = 'settings_form.html'

    def process_request(self, req, context):
        preferences = self.load_target_preferences(context)
        settings = SettingSystem(self.env)
        fields = [settings.get_setting(key) for key in self.setting_keys]
        fields = [setting for setting in fields if setting is not None]

        submitted = {}
        if req.method == 'POST':
            submitted = self._get_submitted_values(req, fields)
            errors = self._validate(fields, submitted)
            if not errors:
                try:
                    for setting in fields:
                        self.write_setting(context, preferences, setting.key,
                                           submitted[setting.key])
                except PreferencesValidationError as e:
                    errors = e.errors
                else:
                    req.redirect(req.href +
                                 self.get_panel_uri(context, '?saved=true'))
            for key, message in errors:
                add_warning(req, message)
        elif req.args.as_bool('saved', False):
            add_notice(req, _("Changes saved."))

        data = {
            'panel': self,
            'context': context,
            'fields': [self._field_data(setting, preferences, submitted)
                       for setting in fields],
            'form_action': req.href + self.get_panel_uri(context),
        }
        data.update(self.get_form_data(context, preferences))
        return self.template, data

    def get_form_data(self, context, preferences):
        """Return additional data for the template."""
        return {}

    # Internal methods

    def _get_submitted_values(self, req, fields):
        values = {}
        for setting in fields:
            if isinstance(setting, BoolSetting):
                # unchecked checkboxes aren't submitted
                values[setting.key] = setting.key in req.args
                continue
            value = req.args.getfirst(setting.key)
            if value is not None:
                value = value.strip()
            values[setting.key] = value or None
        return values

    def _validate(self, fields, values):
        errors = []
        for setting in fields:
            value = values[setting.key]
            if value is None:
                continue
            try:
                setting.validate(value)
            except SettingsValueError as e:
                errors.append((setting.key,
                               _("%(label)s: %(message)s",
                                 label=setting.get_label(),
                                 message=e.message)))
        return errors

    def _field_data(self, setting, preferences, submitted):
        if isinstance(setting, BoolSetting):
            kind = 'checkbox'
        elif setting.get_options() is not None:
            kind = 'select'
        else:
            kind = 'text'
        if setting.key in submitted:
            value = submitted[setting.key]
        else:
            value = preferences.get_setting(setting.key)
        return {
            'key': setting.key,
            'label': setting.get_label(),
            'kind': kind,
            'value': '' if value is None else value,
            'options': setting.get_options(),
            'description': _(setting.description)
                           if setting.description else None,
            'required': setting.required,
        }


class AccountSettingsPanel(FormSettingsPanel):

    panel_key = 'account'
    panel_name = N_("Account")
    panel_group_key = 'account'

    setting_keys = ('pronoun', 'translation')

    def is_editable_by_administrators(self):
        return True


class DateTimeSettingsPanel(FormSettingsPanel):
    """Time zone and formats used to display dates and times, with a
    preview of the current time."""

    panel_key = 'datetime'
    panel_name = N_("Date and Time")
    panel_group_key = 'account'

    setting_keys = ('timezone', 'date_format', 'time_format',
                    'week_start_day')

    def is_editable_by_administrators(self):
        return True

    def get_form_data(self, context, preferences):
        return {'preview': self.format_preview(preferences)}

    def format_preview(self, preferences, now=None):
        """Format `now` (the current time by default) the way the
        preferences ask for."""
        if now is None:
            now = datetime.now(timezone.utc)
        tzinfo = ZoneInfo(preferences.get_setting('timezone') or 'UTC')
        locale = preferences.get_setting('translation') or 'en_US'
        now = now.astimezone(tzinfo)
        date_format = preferences.get_setting('date_format') or 'medium'
        if date_format == 'iso8601':
            date = now.date().isoformat()
        else:
            date = format_date(now, date_format, locale=locale)
        time = format_time(now, preferences.get_setting('time_format'),
                           tzinfo=tzinfo, locale=locale)
        return '%s %s' % (date, time)


class DisplayPreferencesSettingsPanel(FormSettingsPanel):

    panel_key = 'display'
    panel_name = N_("Display Preferences")
    panel_group_key = 'application'

    setting_keys = ('title_style', 'monospaced_font', 'font_size')

    def is_editable_by_administrators(self):
        return True


class EmailFormatSettingsPanel(FormSettingsPanel):

    panel_key = 'emailformat'
    panel_name = N_("Email Format")
    panel_group_key = 'email'

    setting_keys = ('html_emails', 'email_re_prefix')

    email_enabled = BoolOption('settings', 'email_enabled', True,
        """Whether the site sends email. When disabled, the email
        settings panels are not available.""")

    def is_enabled(self):
        return self.email_enabled and super().is_enabled()
