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

__all__ = ['NavigationItem', 'SideNavigation']


class NavigationItem(object):
    """A label or a link of the side navigation."""

    __slots__ = ('key', 'label', 'href', 'is_label')

    def __init__(self, key, label, href=None, is_label=False):
        self.key = key
        self.label = label
        self.href = href
        self.is_label = is_label

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.key)


class SideNavigation(object):
    """The menu listed beside the settings page: group labels, each
    followed by the links of the group's panels.
    """

    def __init__(self, base_uri=None):
        self.base_uri = base_uri
        self.items = []
        self.selected_key = None

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def add_label(self, label):
        self.items.append(NavigationItem(None, label, is_label=True))

    def add_filter(self, key, label, href):
        """Add a link to the panel with the given key."""
        self.items.append(NavigationItem(key, label, href))

    def select_filter(self, key):
        """Mark the link with the given key as the current one, and
        return its key or `None` if there is no such link."""
        for item in self.items:
            if not item.is_label and item.key == key:
                self.selected_key = key
                return key
        self.selected_key = None

    def get_links(self):
        return [item for item in self.items if not item.is_label]
