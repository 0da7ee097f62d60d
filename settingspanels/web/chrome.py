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

from jinja2 import Environment as JinjaEnvironment, FileSystemLoader
from markupsafe import Markup, escape

from settingspanels.config import BoolOption, PathOption
from settingspanels.core import *
from settingspanels.util import lazy
from settingspanels.util import translation

__all__ = ['Chrome', 'ITemplateProvider', 'add_notice', 'add_warning']


class ITemplateProvider(Interface):
    """Extension point interface for components that provide their own
    Jinja2 templates.
    """

    def get_templates_dirs():
        """Return a list of directories containing the provided template
        files.
        """


def add_warning(req, msg, *args):
    """Add a non-fatal warning to the request object.

    When rendering pages, all warnings will be rendered to the user. Note
    that the message is escaped (and therefore converted to `Markup`)
    before it is stored in the request object.
    """
    _add_message(req, 'warnings', msg, args)


def add_notice(req, msg, *args):
    """Add an informational notice to the request object.

    When rendering pages, all notices will be rendered to the user. Note
    that the message is escaped (and therefore converted to `Markup`)
    before it is stored in the request object.
    """
    _add_message(req, 'notices', msg, args)


def _add_message(req, name, msg, args):
    if args:
        msg %= args
    if not isinstance(msg, Markup):
        msg = escape(msg)
    if msg not in req.chrome[name]:
        req.chrome[name].append(msg)


class Chrome(Component):
    """Render the pages of the settings site with Jinja2."""

    template_providers = ExtensionPoint(ITemplateProvider)

    auto_reload = BoolOption('settings', 'auto_reload', False,
        """Automatically reload template files after modification.""")

    templates_dir = PathOption('settings', 'templates_dir', '',
        """Path to a directory of templates overriding the built-in
        ones. Relative paths are resolved from the `conf` directory of
        the environment.""")

    def get_all_templates_dirs(self):
        """Return the template directories of the site and of every
        `ITemplateProvider`.

        The `[settings] templates_dir` directory comes first, so its
        templates take precedence.
        """
        dirs = []
        if self.templates_dir:
            dirs.append(self.templates_dir)
        dirs.append(os.path.join(os.path.dirname(os.path.dirname(__file__)),
                                 'templates'))
        for provider in self.template_providers:
            dirs.extend(provider.get_templates_dirs() or [])
        return dirs

    @lazy
    def jenv(self):
        jenv = JinjaEnvironment(
            loader=FileSystemLoader(self.get_all_templates_dirs()),
            auto_reload=self.auto_reload,
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        jenv.globals.update(_=translation.gettext,
                            gettext=translation.gettext,
                            ngettext=translation.ngettext)
        return jenv

    def load_template(self, filename):
        """Retrieve the Jinja2 `Template` with the given name."""
        return self.jenv.get_template(filename)

    def populate_data(self, req, data):
        """Add the data every template can expect to `data`.

        Values already present in `data` take precedence.
        """
        d = {'req': req}
        if req is not None:
            d.update({
                'href': req.href,
                'abs_href': req.abs_href,
                'chrome': req.chrome,
                'authname': req.authname,
            })
        d.update(data)
        return d

    def render_fragment(self, req, filename, data):
        """Produce a `Markup` string from the template *filename* and
        the input *data*, without the page layout."""
        template = self.load_template(filename)
        return Markup(template.render(self.populate_data(req, data)))

    def render_template(self, req, filename, data):
        """Render a full page and return it as UTF-8 encoded `bytes`.

        Notices and warnings added to the request are only known once
        the handler is done, so the page is rendered last.
        """
        content = self.render_fragment(req, filename, data)
        return content.encode('utf-8')
