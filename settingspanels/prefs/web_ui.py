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

import os.path
import re
from collections import OrderedDict

from settingspanels.core import *
from settingspanels.perm import PermissionError
from settingspanels.prefs.api import PanelContext, PanelRegistry
from settingspanels.user import UserManager
from settingspanels.util.translation import _
from settingspanels.web.api import HTTPNotFound, IRequestHandler
from settingspanels.web.chrome import Chrome, ITemplateProvider
from settingspanels.web.nav import SideNavigation


class SettingsModule(Component):
    """Displays the settings panels and dispatches control to the
    individual panels.

    The module is the controller the panels are bound to: panels may
    call back into it through their context, e.g. to build dialogs.
    """

    implements(IRequestHandler, ITemplateProvider)

    _request_re = re.compile(r'/settings(?:/(?P<user_id>[0-9]+))?'
                             r'(?:/panel/(?P<panel_key>[^/]+)'
                             r'(?:/(?P<panel_path>.*))?)?/?$')

    # IRequestHandler methods

    def match_request(self, req):
        match = self._request_re.match(req.path_info)
        if match:
            for name, value in match.groupdict().items():
                if value is not None:
                    req.args[name] = value
            return True

    def process_request(self, req):
        users = UserManager(self.env)
        viewer = users.get_user_by_name(req.authname)
        if viewer is None:
            raise PermissionError(msg=_("You must log in to edit your "
                                        "settings."))

        user_id = req.args.get('user_id')
        if user_id is None:
            user = viewer
        else:
            user = users.get_user(user_id)
            if user is None:
                raise HTTPNotFound(_("No user with id %(id)s.", id=user_id))
        if user != viewer and not viewer.is_admin:
            raise PermissionError(msg=_("You can only edit your own "
                                        "settings."))

        base_context = PanelContext(user, viewer, req, self)
        panels = self.get_usable_panels(base_context)
        navigation = self.build_navigation(req, base_context, panels)

        panel_key = req.args.get('panel_key')
        if panel_key is None:
            if not panels:
                raise HTTPNotFound(_("No settings panels are available."))
            first = next(iter(panels.values()))
            req.redirect(req.href + first.get_panel_uri(base_context))

        panel = PanelRegistry(self.env).get_panel(panel_key)
        if panel is None or not panel.is_enabled():
            raise HTTPNotFound(_('No settings panel "%(key)s".',
                                 key=panel_key))
        if user != viewer and not panel.is_editable_by_administrators():
            raise PermissionError(msg=_('The "%(panel)s" settings of other '
                                        'accounts can not be edited.',
                                        panel=panel.get_panel_name()))

        navigation.select_filter(panel_key)
        context = panel.bind(user, viewer, req, self, navigation)
        self.log.debug("%r processes the settings of %r for %r", panel,
                       user, viewer)
        template, data = panel.process_request(req, context)[:2]
        content = Chrome(self.env).render_fragment(req, template, data)

        return 'settings.html', {
            'title': panel.get_panel_name(),
            'user': user,
            'viewer': viewer,
            'panel': panel,
            'navigation': navigation,
            'content': content,
        }

    # ITemplateProvider methods

    def get_templates_dirs(self):
        return [os.path.join(os.path.dirname(__file__), 'templates')]

    # Public API

    def get_usable_panels(self, context):
        """Return the display panels available in `context`: enabled
        ones, restricted to the panels administrators may use when
        editing another account."""
        return OrderedDict((key, panel) for key, panel in
                    PanelRegistry(self.env).get_all_display_panels().items()
                    if panel.is_enabled() and
                       (context.is_self_edit or
                        panel.is_editable_by_administrators()))

    def build_navigation(self, req, context, panels):
        """Return the `SideNavigation` listing `panels` under the labels
        of their groups."""
        navigation = SideNavigation(req.href + '/settings')
        registry = PanelRegistry(self.env)
        for group in registry.get_all_panel_groups_with_panels().values():
            group_panels = [panel for key, panel
                            in group.get_panels().items() if key in panels]
            if not group_panels:
                continue
            navigation.add_label(group.get_panel_group_name())
            for panel in group_panels:
                navigation.add_filter(panel.get_panel_key(),
                                      panel.get_panel_name(),
                                      req.href + panel.get_panel_uri(context))
        return navigation

    def new_dialog(self, req, title, message, submit_uri=None):
        """Return a `(template, data)` tuple for a confirmation or
        information dialog, for panels to return from
        `process_request`."""
        return 'settings_dialog.html', {
            'title': title,
            'message': message,
            'submit_uri': submit_uri,
        }
