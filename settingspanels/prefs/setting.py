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

"""Definitions of the settings stored in the user preferences.

Every setting is described by a `Setting` object contributed by an
`ISettingProvider` component. The definition provides the default value
and validates the values proposed by the preferences editor.
"""

from collections import OrderedDict

from zoneinfo import available_timezones

from settingspanels.config import ConfigurationError
from settingspanels.core import *
from settingspanels.util import as_bool, as_int, lazy
from settingspanels.util.translation import N_, _, get_available_locales, \
                                            get_locale_name

__all__ = ['BoolSetting', 'ChoiceSetting', 'ISettingProvider', 'IntSetting',
           'LocaleSetting', 'Setting', 'SettingSystem', 'TimezoneSetting']


class ISettingProvider(Interface):
    """Extension point interface for components defining settings."""

    def get_settings():
        """Return an iterable of `Setting` objects."""


class Setting(object):
    """A free-form text setting.

    :param key: the key under which the value is stored
    :param label: human-readable label, marked with `N_`
    :param default: the value used when the preferences don't define one
    :param required: whether the preferences must define a value
    :param max_length: maximum length of the value, if any
    """

    def __init__(self, key, label, default=None, required=False,
                 max_length=None, description=None):
        self.key = key
        self.label = label
        self.default = default
        self.required = required
        self.max_length = max_length
        self.description = description

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.key)

    def get_label(self):
        return _(self.label)

    def validate(self, value):
        """Return the normalized `value`, or raise a `SettingsValueError`
        if it isn't acceptable."""
        value = str(value).strip()
        if self.max_length is not None and len(value) > self.max_length:
            raise SettingsValueError(
                _("The value must not be longer than %(max)d characters.",
                  max=self.max_length))
        return value

    def get_options(self):
        """Return a list of `(value, label)` tuples for settings with a
        fixed set of values, `None` otherwise."""
        return None


class BoolSetting(Setting):

    def validate(self, value):
        return as_bool(value)


class IntSetting(Setting):

    def __init__(self, key, label, default=0, min=None, max=None, **kwargs):
        super().__init__(key, label, default, **kwargs)
        self.min = min
        self.max = max

    def validate(self, value):
        intvalue = as_int(value)
        if intvalue is None:
            raise SettingsValueError(
                _("%(value)s is not an integer.", value=repr(value)))
        if self.min is not None and intvalue < self.min or \
                self.max is not None and intvalue > self.max:
            raise SettingsValueError(
                _("The value must be between %(min)s and %(max)s.",
                  min=self.min, max=self.max))
        return intvalue


class ChoiceSetting(Setting):
    """A setting taking one value out of a fixed list.

    :param choices: list of `(value, label)` tuples, labels marked with
                    `N_`
    """

    def __init__(self, key, label, choices, default=None, **kwargs):
        if default is None and choices:
            default = choices[0][0]
        super().__init__(key, label, default, **kwargs)
        self.choices = choices

    def validate(self, value):
        value = str(value).strip()
        if value not in dict(self.get_options()):
            raise SettingsValueError(
                _('"%(value)s" is not a valid choice.', value=value))
        return value

    def get_options(self):
        return [(value, _(label)) for value, label in self.choices]


class TimezoneSetting(Setting):
    """A setting holding an IANA time zone identifier."""

    def validate(self, value):
        value = str(value).strip()
        if value not in self._timezones:
            raise SettingsValueError(
                _('"%(value)s" is not a known time zone.', value=value))
        return value

    def get_options(self):
        return [(tz, tz) for tz in sorted(self._timezones)]

    @lazy
    def _timezones(self):
        return available_timezones() | {'UTC'}


class LocaleSetting(Setting):
    """A setting holding the identifier of a locale with translations."""

    def validate(self, value):
        value = str(value).strip()
        if value not in get_available_locales():
            raise SettingsValueError(
                _('"%(value)s" is not an available language.', value=value))
        return value

    def get_options(self):
        return sorted((locale_id, get_locale_name(locale_id) or locale_id)
                      for locale_id in get_available_locales())


class SettingSystem(Component):
    """Collect the setting definitions."""

    providers = ExtensionPoint(ISettingProvider)

    def get_all_settings(self):
        """Return an `OrderedDict` mapping keys to `Setting` objects.

        Raises a `ConfigurationError` if two definitions share a key.
        """
        settings = OrderedDict()
        for provider in self.providers:
            for setting in provider.get_settings() or []:
                if setting.key in settings:
                    raise ConfigurationError(
                        _('Setting "%(key)s" is defined more than once.',
                          key=setting.key))
                settings[setting.key] = setting
        return settings

    def get_setting(self, key):
        """Return the `Setting` with the given key, or `None`."""
        return self.get_all_settings().get(key)


class CoreSettingProvider(Component):
    """The settings edited by the built-in panels."""

    implements(ISettingProvider)

    def get_settings(self):
        yield ChoiceSetting('pronoun', N_("Pronoun"), [
            ('they', N_("They / them")),
            ('she', N_("She / her")),
            ('he', N_("He / him")),
        ], description=N_("Choose the pronoun you prefer."))
        yield LocaleSetting('translation', N_("Language"), 'en_US')
        yield TimezoneSetting('timezone', N_("Timezone"), 'UTC',
                              required=True)
        yield ChoiceSetting('date_format', N_("Date Format"), [
            ('medium', N_("Medium (Jan 5, 2024)")),
            ('short', N_("Short (1/5/24)")),
            ('long', N_("Long (January 5, 2024)")),
            ('iso8601', N_("ISO 8601 (2024-01-05)")),
        ])
        yield ChoiceSetting('time_format', N_("Time Format"), [
            ('h:mm a', N_("12 Hour, 2:34 PM")),
            ('HH:mm', N_("24 Hour, 14:34")),
        ])
        yield IntSetting('week_start_day', N_("Week Starts On"), 0, min=0,
                         max=6, description=N_("0 is Sunday, 6 is "
                                               "Saturday."))
        yield ChoiceSetting('title_style', N_("Page Titles"), [
            ('glyph', N_("With Unicode Glyphs")),
            ('text', N_("Plain Text")),
        ])
        yield Setting('monospaced_font', N_("Monospaced Font"), '',
                      max_length=64,
                      description=N_('Overrides the default font, like '
                                     '"14px Menlo, monospace".'))
        yield IntSetting('font_size', N_("Font Size"), 14, min=8, max=32)
        yield BoolSetting('html_emails', N_("HTML Email"), True)
        yield BoolSetting('email_re_prefix', N_('Add "Re:" Prefix'), False)
