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

from settingspanels.config import OrderedExtensionsOption
from settingspanels.core import *
from settingspanels.util.translation import _, N_

__all__ = ['CAN_EDIT', 'CAN_VIEW', 'IPermissionPolicy', 'PermissionError',
           'PermissionSystem']

CAN_VIEW = 'CAN_VIEW'
CAN_EDIT = 'CAN_EDIT'


class PermissionError(SettingsBaseError):
    """Insufficient permissions to perform the operation."""

    title = N_("Forbidden")

    def __init__(self, capability=None, obj=None, msg=None):
        self.capability = capability
        self.obj = obj
        if msg is None:
            if self.capability:
                msg = _("You do not have the %(capability)s capability "
                        "required to perform this operation.",
                        capability=self.capability)
            else:
                msg = _("Insufficient privileges to perform this "
                        "operation.")
        super().__init__(msg)

    @property
    def message(self):
        return self.args[0]


class IPermissionPolicy(Interface):
    """A security policy provider deciding whether a viewer holds a
    capability on an object."""

    def check_capability(capability, viewer, obj):
        """Check that `viewer` holds `capability` on `obj`.

        :param capability: the name of the capability, e.g. `CAN_EDIT`
        :param viewer: the acting `User`, or `None` for anonymous
        :param obj: the object the capability applies to

        :return: `True` if the capability is granted, `False` if it is
                 denied, or `None` if indifferent. If `None` is returned,
                 the next policy in the chain will be used, and so on.
        """


class PermissionSystem(Component):
    """Capability checking sub-system."""

    policies = OrderedExtensionsOption('settings', 'permission_policies',
        IPermissionPolicy, 'DefaultPreferencesPolicy', False,
        """List of components implementing `IPermissionPolicy`, in the
        order in which they will be applied. The first policy taking a
        decision wins; when no policy decides, the capability is
        denied.""")

    def check_capability(self, viewer, obj, capability):
        """Return `True` if `viewer` holds `capability` on `obj`."""
        for policy in self.policies:
            decision = policy.check_capability(capability, viewer, obj)
            if decision is not None:
                if decision is False:
                    self.log.debug("%s denies %r %s on %r",
                                   policy.__class__.__name__, viewer,
                                   capability, obj)
                return decision
        self.log.debug("No policy allowed %r %s on %r", viewer, capability,
                       obj)
        return False

    def require_capability(self, viewer, obj, capability):
        """Raise a `PermissionError` unless `viewer` holds `capability`
        on `obj`."""
        if not self.check_capability(viewer, obj, capability):
            raise PermissionError(capability, obj)
