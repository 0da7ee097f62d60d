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

from settingspanels.prefs.api import SettingsPanelGroup
from settingspanels.util.translation import N_


class AccountPanelGroup(SettingsPanelGroup):

    panel_group_key = 'account'
    panel_group_name = N_("Account")
    panel_group_order = 100


class ApplicationPanelGroup(SettingsPanelGroup):

    panel_group_key = 'application'
    panel_group_name = N_("Applications")
    panel_group_order = 200


class EmailPanelGroup(SettingsPanelGroup):

    panel_group_key = 'email'
    panel_group_name = N_("Email")
    panel_group_order = 300
