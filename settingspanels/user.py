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

from settingspanels.config import ConfigSection, ListOption
from settingspanels.core import *
from settingspanels.util import as_int

__all__ = ['IUserProvider', 'User', 'UserManager']


class User(object):
    """An account known to the settings site.

    Users compare equal when their `id` is equal.
    """

    __slots__ = ('id', 'username', 'name', 'email', 'is_admin',
                 'is_system_agent')

    def __init__(self, id, username, name=None, email=None, is_admin=False,
                 is_system_agent=False):
        self.id = id
        self.username = username
        self.name = name or username
        self.email = email
        self.is_admin = is_admin
        self.is_system_agent = is_system_agent

    def __eq__(self, other):
        return isinstance(other, User) and self.id == other.id

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return '<User %s %r>' % (self.id, self.username)


class IUserProvider(Interface):
    """Extension point interface for components that know about user
    accounts."""

    def get_users():
        """Return an iterable of `(id, username, name, email)` tuples.

        `name` and `email` may be `None`.
        """


class ConfigUserProvider(Component):
    """Read the user accounts from the `[users]` section of the
    configuration."""

    implements(IUserProvider)

    users_section = ConfigSection('users',
        """Every entry in this section declares a user account: the option
        name is the username, the value is the numeric user id optionally
        followed by the display name and the email address, separated by
        commas:
        {{{
        [users]
        alice = 5, Alice Liddell, alice@example.org
        bot = 9
        }}}
        """)

    def get_users(self):
        for username, value in self.users_section.options():
            fields = [each.strip() for each in value.split(',')]
            user_id = as_int(fields[0])
            if user_id is None:
                self.log.warning("Ignoring user %s with invalid id %r",
                                 username, fields[0])
                continue
            name = fields[1] if len(fields) > 1 and fields[1] else None
            email = fields[2] if len(fields) > 2 and fields[2] else None
            yield user_id, username, name, email


class UserManager(Component):
    """Resolve user accounts by id and username."""

    providers = ExtensionPoint(IUserProvider)

    administrators = ListOption('settings', 'administrators', '',
        doc="""Usernames of the administrators. Administrators may edit
        the settings of system agents, through the panels that allow it.""")

    system_agents = ListOption('settings', 'system_agents', '',
        doc="""Usernames of system agent (bot) accounts.""")

    def get_known_users(self):
        """Return the `User` objects of all accounts, ordered by id."""
        users = {}
        administrators = set(self.administrators)
        system_agents = set(self.system_agents)
        for provider in self.providers:
            for user_id, username, name, email in provider.get_users() or []:
                if user_id in users:
                    continue
                users[user_id] = User(user_id, username, name, email,
                                      is_admin=username in administrators,
                                      is_system_agent=username in
                                                      system_agents)
        return [users[user_id] for user_id in sorted(users)]

    def get_user(self, user_id):
        """Return the `User` with the given id, or `None`."""
        user_id = as_int(user_id)
        for user in self.get_known_users():
            if user.id == user_id:
                return user

    def get_user_by_name(self, username):
        """Return the `User` with the given username, or `None`."""
        if not username or username == 'anonymous':
            return None
        for user in self.get_known_users():
            if user.username == username:
                return user
