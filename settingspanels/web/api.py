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

import sys
from http.server import BaseHTTPRequestHandler
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from settingspanels.core import Interface, SettingsBaseError, SettingsError
from settingspanels.util import as_bool, as_int, lazy
from settingspanels.util.translation import _
from settingspanels.web.href import Href

__all__ = ['IAuthenticator', 'IRequestHandler', 'HTTPException',
           'Request', 'RequestDone', 'arg_list_to_args']


class IAuthenticator(Interface):
    """Extension point interface for components that can provide the name
    of the remote user."""

    def authenticate(req):
        """Return the name of the remote user, or `None` if the identity of
        the user is unknown."""


class IRequestHandler(Interface):
    """Decide which `Component` handles which `Request`, and how."""

    def match_request(req):
        """Return whether the handler wants to process the given request."""

    def process_request(req):
        """Process the request.

        Return a `(template_name, data)` tuple, where `data` is a
        dictionary of substitutions for the Jinja2 template.

        Note that if template processing should not occur, this method
        can simply send the response itself, which raises `RequestDone`.
        """


HTTP_STATUS = dict((int(code), reason.title()) for code, (reason, description)
                   in BaseHTTPRequestHandler.responses.items())


class HTTPException(SettingsBaseError):

    code = 500
    reason = 'Internal Server Error'

    def __init__(self, detail, *args):
        if isinstance(detail, SettingsError):
            self.detail = detail.message
            self.reason = detail.title
        else:
            self.detail = detail
        if args:
            self.detail = self.detail % args
        super().__init__('%s %s (%s)' % (self.code, self.reason,
                                         self.detail))

    @property
    def message(self):
        return str(self.detail)

    @property
    def title(self):
        title = _("Error")
        if self.reason:
            if title.lower() in self.reason.lower():
                title = self.reason
            else:
                title = _("Error: %(message)s", message=self.reason)
        return title

    @classmethod
    def subclass(cls, name, code):
        """Create a new Exception class representing a HTTP status code."""
        reason = HTTP_STATUS.get(code, 'Unknown')
        new_class = type(name, (HTTPException,), {
            '__doc__': 'Exception for HTTP %d %s' % (code, reason),
            'code': code,
            'reason': reason,
        })
        return new_class


for code in [code for code in HTTP_STATUS if code >= 400]:
    exc_name = ''.join(c for c in HTTP_STATUS[code] if c.isalnum())
    if exc_name.lower().startswith('http'):
        exc_name = exc_name[4:]
    exc_name = 'HTTP' + exc_name
    setattr(sys.modules[__name__], exc_name,
            HTTPException.subclass(exc_name, code))
    __all__.append(exc_name)
del code, exc_name


class _RequestArgs(dict):
    """Dictionary subclass that provides convenient access to request
    parameters that may contain multiple values."""

    def as_int(self, name, default=None, min=None, max=None):
        """Return the value as an integer, or `default` if the conversion
        fails."""
        if name not in self:
            return default
        return as_int(self.getfirst(name), default, min, max)

    def as_bool(self, name, default=None):
        """Return the value as a boolean, or `default` if the conversion
        fails."""
        if name not in self:
            return default
        return as_bool(self.getfirst(name), default)

    def getfirst(self, name, default=None):
        """Return the first value for the specified parameter, or
        `default` if the parameter was not provided.
        """
        if name not in self:
            return default
        val = self[name]
        if isinstance(val, list):
            val = val[0]
        return val

    def getlist(self, name):
        """Return a list of values for the specified parameter, even if
        only one value was provided.
        """
        if name not in self:
            return []
        val = self[name]
        if not isinstance(val, list):
            val = [val]
        return val


def arg_list_to_args(arg_list):
    """Convert a list of `(name, value)` tuples into a `_RequestArgs`."""
    args = _RequestArgs()
    for name, value in arg_list:
        if name in args:
            if isinstance(args[name], list):
                args[name].append(value)
            else:
                args[name] = [args[name], value]
        else:
            args[name] = value
    return args


class RequestDone(SettingsBaseError):
    """Marker exception that indicates whether request processing has
    completed and a response was sent.
    """


class Request(object):
    """Represents a HTTP request/response pair.

    This class provides a convenience API over WSGI. Attributes listed
    in `callbacks` are computed lazily on first access.
    """

    def __init__(self, environ, start_response):
        """Create the request wrapper.

        :param environ: The WSGI environment dict
        :param start_response: The WSGI callback for starting the response
        """
        self.environ = environ
        self._start_response = start_response
        self._status = '200 OK'
        self._outheaders = []
        self._write = None
        self._body_started = False

        self.callbacks = {
            'arg_list': Request._parse_arg_list,
            'args': lambda req: arg_list_to_args(req.arg_list),
            'authname': lambda req: req.remote_user or 'anonymous',
        }
        self.chrome = {'notices': [], 'warnings': []}

        self.base_url = self.environ.get('settingspanels.base_url')
        if not self.base_url:
            self.base_url = self._reconstruct_url()
        self.href = Href(self.base_path)
        self.abs_href = Href(self.base_url)

    def __getattr__(self, name):
        """Performs lazy attribute lookup by delegating to the functions
        in the callbacks dictionary."""
        if name != 'callbacks' and name in self.callbacks:
            value = self.callbacks[name](self)
            setattr(self, name, value)
            return value
        raise AttributeError(name)

    def __repr__(self):
        uri = self.environ.get('PATH_INFO', '')
        qs = self.query_string
        if qs:
            uri += '?' + qs
        return '<%s "%s %r">' % (self.__class__.__name__, self.method, uri)

    # Public API

    @property
    def method(self):
        """The HTTP method of the request"""
        return self.environ['REQUEST_METHOD']

    @property
    def path_info(self):
        """Path inside the application"""
        path_info = self.environ.get('PATH_INFO', '')
        if isinstance(path_info, bytes):
            try:
                return path_info.decode('utf-8')
            except UnicodeDecodeError:
                raise HTTPNotFound(
                    _("Invalid URL encoding (was %(path_info)r)",
                      path_info=path_info))
        # PEP 3333 strings are latin-1 decoded bytes
        try:
            return path_info.encode('latin-1').decode('utf-8')
        except (UnicodeEncodeError, UnicodeDecodeError):
            return path_info

    @property
    def query_string(self):
        """Query part of the request"""
        return self.environ.get('QUERY_STRING', '')

    @property
    def remote_addr(self):
        """IP address of the remote user"""
        return self.environ.get('REMOTE_ADDR')

    @property
    def remote_user(self):
        """Name of the remote user.

        Will be `None` if the user has not logged in using HTTP
        authentication.
        """
        return self.environ.get('REMOTE_USER')

    @property
    def scheme(self):
        """The scheme of the request URL"""
        return self.environ.get('wsgi.url_scheme', 'http')

    @property
    def base_path(self):
        """The root path of the application"""
        return self.environ.get('SCRIPT_NAME', '')

    @property
    def server_name(self):
        """Name of the server"""
        return self.environ.get('SERVER_NAME', 'localhost')

    @property
    def server_port(self):
        """Port number the server is bound to"""
        return int(self.environ.get('SERVER_PORT', 80))

    @lazy
    def is_authenticated(self):
        return self.authname and self.authname != 'anonymous'

    @property
    def status(self):
        return self._status

    def send_response(self, code=200):
        """Set the status code of the response."""
        self._status = '%s %s' % (code, HTTP_STATUS.get(code, 'Unknown'))

    def send_header(self, name, value):
        """Send the response header with the specified name and value."""
        self._outheaders.append((name, str(value)))

    def end_headers(self):
        """Must be called after all headers have been sent and before the
        actual content is written.
        """
        self._write = self._start_response(self._status, self._outheaders)

    def redirect(self, url, permanent=False):
        """Send a redirect to the client, forwarding to the specified URL.

        The `url` may be relative or absolute, relative URLs will be
        translated appropriately.
        """
        if permanent:
            status = 301  # 'Moved Permanently'
        elif self.method == 'POST':
            status = 303  # 'See Other' -- safe to use in response to a POST
        else:
            status = 302  # 'Found' -- normal temporary redirect

        self.send_response(status)
        if not url.startswith(('http://', 'https://')):
            # Make sure the URL is absolute
            scheme, host = urlsplit(self.base_url)[:2]
            url = urlunsplit((scheme, host, url, None, None))

        self.send_header('Location', url)
        self.send_header('Content-Type', 'text/plain')
        self.send_header('Content-Length', 0)
        self.send_header('Pragma', 'no-cache')
        self.send_header('Cache-Control', 'no-cache')
        self.send_header('Expires', 'Fri, 01 Jan 1999 00:00:00 GMT')
        self.end_headers()
        raise RequestDone

    def send(self, content, content_type='text/html', status=200):
        if isinstance(content, str):
            content = content.encode('utf-8')
        self.send_response(status)
        self.send_header('Cache-Control', 'must-revalidate')
        self.send_header('Expires', 'Fri, 01 Jan 1999 00:00:00 GMT')
        self.send_header('Content-Type', content_type + ';charset=utf-8')
        self.send_header('Content-Length', len(content))
        self.end_headers()

        if self.method != 'HEAD':
            self.write(content)
        raise RequestDone

    def send_error(self, exc_info, content, content_type='text/html',
                   status=500):
        """Send an error page.

        The status line and the headers are sent again through
        `start_response` along with `exc_info`, which is allowed by WSGI
        as long as no body was written yet.
        """
        if isinstance(content, str):
            content = content.encode('utf-8')
        self.send_response(status)
        self._outheaders = []
        self.send_header('Cache-Control', 'must-revalidate')
        self.send_header('Expires', 'Fri, 01 Jan 1999 00:00:00 GMT')
        self.send_header('Content-Type', content_type + ';charset=utf-8')
        self.send_header('Content-Length', len(content))
        self._write = self._start_response(self._status, self._outheaders,
                                           exc_info)
        if self.method != 'HEAD':
            self.write(content)
        raise RequestDone

    @property
    def response_started(self):
        """Whether the body of the response was started."""
        return self._write is not None and self._body_started

    def read(self, size=None):
        """Read the specified number of bytes from the request body."""
        fileobj = self.environ.get('wsgi.input')
        if fileobj is None:
            return b''
        if size is None:
            size = as_int(self.environ.get('CONTENT_LENGTH'), -1)
        return fileobj.read(size)

    def write(self, data):
        """Write the given data to the response body.

        *data* **must** be a `bytes` string, encoded with the charset
        which has been specified in the ``'Content-Type'`` header or
        UTF-8 otherwise.
        """
        if not self._write:
            self.end_headers()
        if isinstance(data, str):
            raise ValueError("Can't send str content")
        if data:
            self._body_started = True
            self._write(data)

    # Internal methods

    def _parse_arg_list(self):
        """Parse the supplied request parameters into a list of
        `(name, value)` tuples.

        Only url-encoded forms are supported in the request body.
        """
        arg_list = parse_qsl(self.query_string, keep_blank_values=True)
        content_type = self.environ.get('CONTENT_TYPE', '')
        if self.method == 'POST' and \
                content_type.startswith('application/x-www-form-urlencoded'):
            body = self.read()
            try:
                body = body.decode('utf-8')
            except UnicodeDecodeError:
                raise HTTPBadRequest(_("Invalid request arguments."))
            arg_list += parse_qsl(body, keep_blank_values=True)

        for name, value in arg_list:
            if '\x00' in name or '\x00' in value:
                raise HTTPBadRequest(_("Invalid request arguments."))
        return arg_list

    def _reconstruct_url(self):
        """Reconstruct the absolute base URL of the application."""
        host = self.environ.get('HTTP_HOST')
        if not host:
            host = self.server_name
            port = self.server_port
            if (self.scheme, port) not in (('http', 80), ('https', 443)):
                host += ':%d' % port
        return urlunsplit((self.scheme, host, self.base_path, None, None))
