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

from settingspanels.core import SettingsError, SettingsValueError
from settingspanels.prefs.model import PreferencesSystem
from settingspanels.prefs.setting import SettingSystem
from settingspanels.util.translation import N_, _

__all__ = ['ContentSource', 'NoEffectError', 'PreferencesEditor',
           'PreferencesValidationError']


class PreferencesValidationError(SettingsError):
    """One or more proposed values were rejected.

    `errors` holds a list of `(key, message)` tuples.
    """

    title = N_("Invalid Settings")

    def __init__(self, errors):
        self.errors = list(errors)
        message = ' '.join(message for key, message in self.errors)
        super().__init__(message)


class NoEffectError(SettingsError):
    """Some transactions would not change anything.

    `xactions` holds the transactions without effect.
    """

    title = N_("No Effect")

    def __init__(self, xactions):
        self.xactions = list(xactions)
        super().__init__(
            _("The settings %(keys)s already have the requested values.",
              keys=', '.join('"%s"' % x.key for x in self.xactions)))


class ContentSource(object):
    """Where a change comes from: the web, the console, a test..."""

    __slots__ = ('source', 'params')

    def __init__(self, source, **params):
        self.source = source
        self.params = params

    def __repr__(self):
        return '<%s %s %r>' % (self.__class__.__name__, self.source,
                               self.params)

    @classmethod
    def from_request(cls, req):
        if req is None:
            return cls('unknown')
        return cls('web', remote_addr=req.remote_addr)


class PreferencesEditor(object):
    """Apply preference transactions on behalf of an actor.

    :param actor: the `User` making the change
    :param content_source: the `ContentSource` of the change
    :param continue_on_no_effect: if `True`, transactions which would not
                                  change anything are skipped instead of
                                  raising a `NoEffectError`
    :param continue_on_missing_fields: if `True`, required settings
                                       without a value don't raise a
                                       `PreferencesValidationError`
    """

    def __init__(self, env, actor, content_source=None,
                 continue_on_no_effect=False,
                 continue_on_missing_fields=False):
        self.env = env
        self.log = env.log
        self.actor = actor
        self.content_source = content_source or ContentSource('unknown')
        self.continue_on_no_effect = continue_on_no_effect
        self.continue_on_missing_fields = continue_on_missing_fields

    def apply_transactions(self, preferences, xactions):
        """Validate and apply `xactions` to `preferences`, then save
        them.

        :return: the list of transactions that changed something.
        """
        settings = SettingSystem(self.env)
        now = datetime.now(timezone.utc)
        errors = []
        no_effect = []
        applied = []
        values = dict(preferences.values)

        for xaction in xactions:
            setting = settings.get_setting(xaction.key)
            if setting is None:
                errors.append((xaction.key,
                               _('"%(key)s" is not a valid setting.',
                                 key=xaction.key)))
                continue
            new_value = xaction.new_value
            if new_value is not None:
                try:
                    new_value = setting.validate(new_value)
                except SettingsValueError as e:
                    errors.append((xaction.key,
                                   _("%(label)s: %(message)s",
                                     label=setting.get_label(),
                                     message=e.message)))
                    continue
            old_value = values.get(xaction.key)
            if old_value == new_value:
                no_effect.append(xaction)
                continue
            if new_value is None:
                del values[xaction.key]
            else:
                values[xaction.key] = new_value
            applied.append((xaction, old_value, new_value))

        if errors:
            raise PreferencesValidationError(errors)

        if no_effect and not self.continue_on_no_effect:
            raise NoEffectError(no_effect)

        if not self.continue_on_missing_fields:
            missing = [setting for setting in
                       settings.get_all_settings().values()
                       if setting.required and setting.key not in values]
            if missing:
                raise PreferencesValidationError(
                    (setting.key, _("%(label)s is required.",
                                    label=setting.get_label()))
                    for setting in missing)

        if not applied:
            self.log.debug("No change to apply to %r", preferences)
            return []

        # Transactions are only updated once all of them are valid
        for xaction, old_value, new_value in applied:
            xaction.old_value = old_value
            xaction.new_value = new_value
            xaction.author = self.actor
            xaction.content_source = self.content_source
            xaction.time = now
        applied = [xaction for xaction, old_value, new_value in applied]

        preferences.values = values
        PreferencesSystem(self.env).save_preferences(preferences, applied)
        self.log.info("%r changed %s of %r (%r)", self.actor,
                      ', '.join(x.key for x in applied), preferences,
                      self.content_source)
        return applied
