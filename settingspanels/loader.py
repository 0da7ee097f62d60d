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

import importlib
from importlib.metadata import entry_points

from settingspanels.util import exception_to_unicode

__all__ = ['load_components']

ENTRY_POINT_GROUP = 'settingspanels.plugins'

# Modules shipping the default components; importing them registers
# the components with the component manager.
BUILTIN_MODULES = (
    'settingspanels.perm',
    'settingspanels.user',
    'settingspanels.prefs.model',
    'settingspanels.prefs.editor',
    'settingspanels.prefs.policy',
    'settingspanels.prefs.setting',
    'settingspanels.prefs.groups',
    'settingspanels.prefs.panels',
    'settingspanels.prefs.web_ui',
    'settingspanels.web.chrome',
    'settingspanels.web.main',
)


def _enable_plugin(env, module):
    """Enable the given plugin module if it wasn't disabled explicitly."""
    if env.is_component_enabled(module) is None:
        env.enable_component(module)


def _iter_entry_points(group):
    eps = entry_points()
    if hasattr(eps, 'select'):
        return eps.select(group=group)
    return eps.get(group, ())


def load_builtin_components():
    for module in BUILTIN_MODULES:
        importlib.import_module(module)


def load_components(env, auto_enable=()):
    """Import the built-in modules and the plugins advertised through
    the `settingspanels.plugins` entry point group.

    Plugins listed in `auto_enable` are enabled unless the configuration
    disables them explicitly. A plugin failing to import is logged and
    skipped.
    """
    load_builtin_components()
    for entry in sorted(_iter_entry_points(ENTRY_POINT_GROUP),
                        key=lambda entry: entry.name):
        if entry.value in BUILTIN_MODULES:
            continue
        env.log.debug('Loading plugin "%s" from "%s"', entry.name,
                      entry.value)
        try:
            entry.load()
        except (ImportError, AttributeError) as e:
            env.log.error('Skipping "%s": %s', entry.name,
                          exception_to_unicode(e))
        else:
            if entry.name in auto_enable:
                _enable_plugin(env, entry.module)
