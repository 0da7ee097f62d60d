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

import os
import sys
import traceback

from settingspanels.config import ConfigurationError, Option
from settingspanels.core import *
from settingspanels.env import open_environment
from settingspanels.perm import PermissionError
from settingspanels.prefs.model import PreferencesSystem
from settingspanels.user import UserManager
from settingspanels.util import exception_to_unicode, translation
from settingspanels.util.translation import _
from settingspanels.web.api import HTTPException, HTTPForbidden, \
                                   HTTPInternalServerError, HTTPNotFound, \
                                   IAuthenticator, IRequestHandler, \
                                   Request, RequestDone
from settingspanels.web.chrome import Chrome

__all__ = ['RequestDispatcher', 'dispatch_request']


class RequestDispatcher(Component):
    """Web request dispatcher.

    This component dispatches incoming requests to registered handlers
    and renders the template they return.
    """

    authenticators = ExtensionPoint(IAuthenticator)
    handlers = ExtensionPoint(IRequestHandler)

    default_path = Option('settings', 'default_path', '/settings',
        """Path the base URL of the site redirects to.""")

    # Public API

    def authenticate(self, req):
        for authenticator in self.authenticators:
            try:
                authname = authenticator.authenticate(req)
            except SettingsError as e:
                self.log.error("Can't authenticate using %s: %s",
                               authenticator.__class__.__name__,
                               exception_to_unicode(e, traceback=True))
                break  # don't fallback to other authenticators
            if authname:
                return authname
        return req.remote_user or 'anonymous'

    def get_locale(self, req):
        """Return the language the authenticated user prefers, or the
        site default for anonymous requests."""
        preferences = PreferencesSystem(self.env)
        user = UserManager(self.env).get_user_by_name(req.authname)
        if user is None:
            prefs = preferences.load_global_preferences()
        else:
            prefs = preferences.load_user_preferences(user)
        locale = prefs.get_setting('translation')
        self.log.debug("Locale of %s: %s", req.authname, locale)
        return locale

    def dispatch(self, req):
        """Find a registered handler that matches the request and let
        it process it.

        `PermissionError` is turned into `HTTPForbidden`, other
        `SettingsError` into `HTTPInternalServerError`.
        """
        self.log.debug('Dispatching %r', req)
        chrome = Chrome(self.env)

        try:
            chosen_handler = None
            for handler in self.handlers:
                if handler.match_request(req):
                    chosen_handler = handler
                    break
            self.log.debug("Chosen handler is %s", chosen_handler)
            if not chosen_handler:
                if req.path_info in ('', '/') and self.default_path:
                    req.redirect(req.href + self.default_path)
                raise HTTPNotFound(_('No handler matched request to '
                                     '%(path)s', path=req.path_info))

            resp = chosen_handler.process_request(req)
            if resp:
                template, data = resp[:2]
                self.log.debug("Rendering response with template %s",
                               template)
                output = chrome.render_template(req, template, data)
                req.send(output, 'text/html')
        except (RequestDone, HTTPException):
            raise
        except PermissionError as e:
            raise HTTPForbidden(e.message) from e
        except NotImplementedError as e:
            tb = traceback.extract_tb(sys.exc_info()[2])[-1]
            self.log.warning("%s caught from %s:%d in %s: %s",
                             e.__class__.__name__, tb[0], tb[1], tb[2],
                             str(e) or "(no message)")
            raise HTTPInternalServerError(
                _("Not implemented: %(message)s",
                  message=str(e) or e.__class__.__name__)) from e
        except ConfigurationError as e:
            self.log.error("Configuration error while processing %r: %s",
                           req, exception_to_unicode(e))
            raise HTTPInternalServerError(e) from e
        except SettingsError as e:
            raise HTTPInternalServerError(e) from e


def dispatch_request(environ, start_response):
    """Main entry point for the settings web interface.

    :param environ: the WSGI environment dict
    :param start_response: the WSGI callback for starting the response
    """
    environ.setdefault('settingspanels.env_path',
                       os.getenv('SETTINGSPANELS_ENV'))
    environ.setdefault('settingspanels.base_url',
                       os.getenv('SETTINGSPANELS_BASE_URL'))

    env_path = environ.get('settingspanels.env_path')
    if not env_path:
        raise EnvironmentError('The environment option "SETTINGSPANELS_ENV" '
                               'is missing. It is required to locate the '
                               'settings environment.')
    run_once = environ.get('wsgi.run_once', False)

    env = env_error = None
    try:
        env = open_environment(env_path, use_cache=not run_once)
    except Exception as e:
        env_error = e
    else:
        if not environ.get('settingspanels.base_url') and env.base_url:
            environ['settingspanels.base_url'] = env.base_url

    req = Request(environ, start_response)
    try:
        if env_error:
            raise HTTPInternalServerError(env_error)
        dispatcher = RequestDispatcher(env)
        req.callbacks['authname'] = dispatcher.authenticate
        req.callbacks['locale'] = dispatcher.get_locale
        translation.activate(req.locale)
        dispatcher.dispatch(req)
    except RequestDone:
        pass
    except HTTPException as e:
        if not req.response_started:
            send_user_error(req, env, e)
    except Exception:
        if not req.response_started:
            send_internal_error(env, req, sys.exc_info())
    finally:
        translation.deactivate()
        if env and run_once:
            env.shutdown()
    return []


def _send_error(req, exc_info, template='error.html',
                content_type='text/html', status=500, env=None, data={}):
    if env:
        try:
            content = Chrome(env).render_template(req, template, data)
        except Exception:
            env.log.error("Can't render the error page: %s",
                          exception_to_unicode(sys.exc_info()[1],
                                               traceback=True))
            content = None
    else:
        content = None
    if content is None:
        content_type = 'text/plain'
        content = '%s\n\n%s' % (data.get('title'), data.get('message'))
    try:
        req.send_error(exc_info, content, content_type, status)
    except RequestDone:
        pass


def send_user_error(req, env, e):
    if env:
        env.log.warning('[%s] %s, %r, referrer %r',
                        req.remote_addr, exception_to_unicode(e),
                        req, req.environ.get('HTTP_REFERER'))
    data = {'title': e.title, 'type': 'SettingsError', 'message': e.message,
            'status': e.code}
    _send_error(req, sys.exc_info(), status=e.code, env=env, data=data)


def send_internal_error(env, req, exc_info):
    if env:
        env.log.error("[%s] Internal Server Error: %r, referrer %r%s",
                      req.remote_addr, req, req.environ.get('HTTP_REFERER'),
                      exception_to_unicode(exc_info[1], traceback=True))
    data = {'title': _("Oops..."), 'type': 'internal',
            'message': exception_to_unicode(exc_info[1]), 'status': 500}
    _send_error(req, exc_info, status=500, env=env, data=data)
