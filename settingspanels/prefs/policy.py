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

from settingspanels.core import *
from settingspanels.perm import CAN_EDIT, CAN_VIEW, IPermissionPolicy
from settingspanels.prefs.model import UserPreferences
from settingspanels.user import UserManager


class DefaultPreferencesPolicy(Component):
    """Default policy for user preferences.

    Users may view and edit their own preferences. Administrators may
    view and edit the preferences of system agents, and the global
    defaults.
    """

    implements(IPermissionPolicy)

    # IPermissionPolicy methods

    def check_capability(self, capability, viewer, obj):
        if not isinstance(obj, UserPreferences) or \
                capability not in (CAN_VIEW, CAN_EDIT):
            return None
        if viewer is None:
            return False
        if obj.is_global:
            return viewer.is_admin
        if obj.user_id == viewer.id:
            return True
        if viewer.is_admin:
            owner = UserManager(self.env).get_user(obj.user_id)
            if owner is not None and owner.is_system_agent:
                return True
        return None
