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

from collections import OrderedDict, namedtuple

from settingspanels.config import ConfigurationError, ListOption
from settingspanels.core import *
from settingspanels.perm import CAN_EDIT, PermissionSystem
from settingspanels.prefs.editor import ContentSource, PreferencesEditor
from settingspanels.prefs.model import PreferencesSystem
from settingspanels.util import lazy, unicode_quote
from settingspanels.util.translation import _

__all__ = ['ISettingsPanel', 'ISettingsPanelGroup', 'PanelContext',
           'PanelRegistry', 'SettingsPanel', 'SettingsPanelGroup']


class ISettingsPanel(Interface):
    """A panel of the settings application.

    Panels behave like lightweight controllers: they render a form with
    some options and update the preferences when the form is submitted.
    Subclass `SettingsPanel` rather than implementing this interface
    directly.
    """

    def get_panel_key():
        """Return the unique key of the panel, used in URIs."""

    def get_panel_name():
        """Return the human-readable name of the panel."""

    def get_panel_group_key():
        """Return the key of the `ISettingsPanelGroup` the panel belongs
        to."""

    def is_enabled():
        """Return `False` to prevent the panel from being displayed or
        used."""

    def is_editable_by_administrators():
        """Return `True` if administrators may use the panel to edit the
        settings of another (system agent) account."""

    def get_panel_order_vector():
        """Return the key used to sort the list of panels."""

    def process_request(req, context):
        """Process a request for the panel.

        Return a `(template, data)` tuple, rendered as a fragment and
        composed into the settings page, or send a response (for
        example a redirect) and raise `RequestDone`.
        """


class ISettingsPanelGroup(Interface):
    """A named collection of panels, shown together in the navigation."""

    def get_panel_group_key():
        """Return the unique key of the group."""

    def get_panel_group_name():
        """Return the human-readable name of the group."""

    def get_panel_group_order():
        """Return an integer, groups are displayed in ascending order."""


class PanelContext(namedtuple('PanelContext', 'user viewer req controller '
                                              'navigation override_uri')):
    """The request-scoped state a panel works with.

    `user` is the account whose settings are viewed or edited, `viewer`
    the account performing the action. They differ when an administrator
    edits another account. Contexts are immutable, use `replace` to
    derive a modified copy.
    """

    __slots__ = ()

    def __new__(cls, user, viewer, req=None, controller=None,
                navigation=None, override_uri=None):
        return super().__new__(cls, user, viewer, req, controller,
                               navigation, override_uri)

    def replace(self, **kwargs):
        return self._replace(**kwargs)

    @property
    def is_self_edit(self):
        return self.user.id == self.viewer.id


class PanelRegistry(Component):
    """Discover the settings panels and the panel groups, and order
    them for display."""

    panels = ExtensionPoint(ISettingsPanel)
    groups = ExtensionPoint(ISettingsPanelGroup)

    disabled_panels = ListOption('settings', 'disabled_panels', '',
        doc="""Keys of the settings panels which are neither displayed nor
        usable, e.g. `emailformat, display`.""")

    def get_all_panels(self):
        """Return an `OrderedDict` mapping the panel keys to the panels,
        sorted by their order vector.

        Raises a `ConfigurationError` if two panels share a key.
        """
        return OrderedDict(self._all_panels)

    def get_panel(self, key):
        """Return the panel with the given key, or `None`."""
        return dict(self._all_panels).get(key)

    def get_all_panel_groups(self):
        """Return an `OrderedDict` mapping the group keys to the groups,
        ordered by `(group order, group key)`.

        Raises a `ConfigurationError` if two groups share a key.
        """
        return OrderedDict(self._all_groups)

    def get_all_panel_groups_with_panels(self):
        """Return the groups containing at least one panel, in display
        order."""
        return OrderedDict((key, group)
                           for key, group in self._all_groups
                           if group.get_panels())

    def get_all_display_panels(self):
        """Return an `OrderedDict` of the panels to display, group by
        group.

        Panels referencing a group which doesn't exist are left out,
        they can still be looked up with `get_all_panels`.
        """
        panels = OrderedDict()
        for group in self.get_all_panel_groups_with_panels().values():
            for key, panel in group.get_panels().items():
                panels[key] = panel
        return panels

    def get_panel_group(self, panel):
        """Return the group of `panel`.

        Raises a `ConfigurationError` if the group doesn't exist.
        """
        group_key = panel.get_panel_group_key()
        group = self.get_all_panel_groups_with_panels().get(group_key)
        if group is None:
            raise ConfigurationError(
                _('No settings panel group with key "%(key)s" exists!',
                  key=group_key))
        return group

    def get_group_panels(self, group_key):
        """Return an `OrderedDict` of the panels of the given group, in
        panel order."""
        return OrderedDict((key, panel) for key, panel in self._all_panels
                           if panel.get_panel_group_key() == group_key)

    # Internal methods

    @lazy
    def _all_panels(self):
        panels = {}
        for panel in self.panels:
            key = panel.get_panel_key()
            if not key:
                raise ConfigurationError(
                    _('Settings panel %(panel)s does not define a key.',
                      panel=panel.__class__.__name__))
            if key in panels:
                raise ConfigurationError(
                    _('Two settings panels (%(first)s and %(second)s) share '
                      'the same key "%(key)s". Each panel must have a '
                      'unique key.', key=key,
                      first=panels[key].__class__.__name__,
                      second=panel.__class__.__name__))
            panels[key] = panel
        self.log.debug("Discovered %d settings panels", len(panels))
        return tuple(sorted(panels.items(),
                            key=lambda item: item[1].get_panel_order_vector()))

    @lazy
    def _all_groups(self):
        groups = {}
        for group in self.groups:
            key = group.get_panel_group_key()
            if key in groups:
                raise ConfigurationError(
                    _('Two settings panel groups (%(first)s and '
                      '%(second)s) share the same key "%(key)s".', key=key,
                      first=groups[key].__class__.__name__,
                      second=group.__class__.__name__))
            groups[key] = group
        return tuple(sorted(groups.items(),
                            key=lambda item: (
                                item[1].get_panel_group_order(), item[0])))


class SettingsPanel(Component):
    """Base class for settings panels.

    Settings panels appear in the settings application and behave like
    lightweight controllers: generally, they render some sort of form
    with options in it, and then update the preferences when the user
    submits the form. Subclass this class to add new settings panels.

    Subclasses define `panel_key`, `panel_name` and `panel_group_key`,
    and implement `process_request`.
    """

    abstract = True

    implements(ISettingsPanel)

    panel_key = None
    panel_name = None
    panel_group_key = None

    # Panel configuration

    def get_panel_key(self):
        """Return a unique string used in the URI to identify this panel,
        like "example"."""
        return self.panel_key

    def get_panel_name(self):
        """Return a human-readable description of the panel's contents,
        like "Example Settings"."""
        if self.panel_name is None:
            raise NotImplementedError
        return _(self.panel_name)

    def get_panel_group_key(self):
        """Return the key of the panel group of this panel."""
        if self.panel_group_key is None:
            raise NotImplementedError
        return self.panel_group_key

    def is_enabled(self):
        """Return `False` to prevent this panel from being displayed or
        used. You can do, e.g., configuration checks here, to determine
        if the feature your panel controls is unavailable. By default,
        all panels are enabled unless listed in
        `[settings] disabled_panels`.
        """
        return self.get_panel_key() not in \
               PanelRegistry(self.env).disabled_panels

    def is_editable_by_administrators(self):
        """Return `True` if this panel is available to administrators
        while editing system agent accounts."""
        return False

    def get_panel_order_vector(self):
        """Generate a key to sort the list of panels.

        Panels are sorted by their untranslated name, ties are broken by
        key. Override to force a custom placement.
        """
        name = self.panel_name
        if name is None:
            name = self.get_panel_name()
        return name, self.get_panel_key()

    # Panel implementation

    def process_request(self, req, context):
        """Process a user request for this settings panel.

        Return a `(template, data)` tuple to have the template rendered
        and composed into a normal settings page, or send a response
        (typically a redirect after saving) which raises `RequestDone`.
        """
        raise NotImplementedError

    def bind(self, user, viewer, req=None, controller=None,
             navigation=None, override_uri=None):
        """Return the `PanelContext` for processing a request."""
        return PanelContext(user, viewer, req, controller, navigation,
                            override_uri)

    def get_panel_uri(self, context, path=''):
        """Get the URI for this panel.

        :param context: the `PanelContext` of the request
        :param path: optional path to append
        :return: relative URI for the panel
        """
        path = path.lstrip('/')

        if context.override_uri:
            return context.override_uri.rstrip('/') + '/' + path

        key = unicode_quote(self.get_panel_key(), safe='')
        if context.user.id != context.viewer.id:
            return '/settings/%s/panel/%s/%s' % (context.user.id, key, path)
        else:
            return '/settings/panel/%s/%s' % (key, path)

    def get_panel_group(self):
        return PanelRegistry(self.env).get_panel_group(self)

    # Internal methods

    def load_target_preferences(self, context):
        """Load the preferences of the context user, requiring the
        viewer to hold the edit capability on them."""
        preferences = PreferencesSystem(self.env) \
                      .load_user_preferences(context.user)
        PermissionSystem(self.env).require_capability(context.viewer,
                                                      preferences, CAN_EDIT)
        return preferences

    def new_dialog(self, context, title, message, submit_uri=None):
        return context.controller.new_dialog(context.req, title, message,
                                             submit_uri)

    def write_setting(self, context, preferences, key, value):
        """Change a single setting, on behalf of the context viewer.

        Writing the current value again, or leaving unrelated required
        settings unset, is not an error. Validation errors are raised as
        `PreferencesValidationError`.
        """
        editor = PreferencesEditor(self.env, context.viewer,
                                   ContentSource.from_request(context.req),
                                   continue_on_no_effect=True,
                                   continue_on_missing_fields=True)
        xactions = [preferences.new_transaction(key, value)]
        return editor.apply_transactions(preferences, xactions)


class SettingsPanelGroup(Component):
    """Base class for settings panel groups."""

    abstract = True

    implements(ISettingsPanelGroup)

    panel_group_key = None
    panel_group_name = None
    panel_group_order = 1000

    def get_panel_group_key(self):
        return self.panel_group_key

    def get_panel_group_name(self):
        return _(self.panel_group_name)

    def get_panel_group_order(self):
        return self.panel_group_order

    def get_panels(self):
        """Return an `OrderedDict` of the panels of this group."""
        return PanelRegistry(self.env) \
               .get_group_panels(self.get_panel_group_key())
