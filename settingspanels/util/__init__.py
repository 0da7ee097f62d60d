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

import functools
import inspect
import traceback as tb
from urllib.parse import quote


class lazy(object):
    """A lazily-evaluated attribute.

    The value is computed on first access and stored in the instance
    `__dict__`, so later lookups don't call `fn` again. Deleting the
    attribute resets it.
    """

    def __init__(self, fn):
        self.fn = fn
        functools.update_wrapper(self, fn)

    def __get__(self, instance, owner):
        if instance is None:
            return self
        if self.fn.__name__ in instance.__dict__:
            return instance.__dict__[self.fn.__name__]
        result = self.fn(instance)
        instance.__dict__[self.fn.__name__] = result
        return result

    def __set__(self, instance, value):
        instance.__dict__[self.fn.__name__] = value

    def __delete__(self, instance):
        instance.__dict__.pop(self.fn.__name__, None)


def as_bool(value, default=False):
    """Convert the given value to a `bool`.

    If `value` is a string, return `True` for any of "yes", "true",
    "enabled", "on" or non-zero numbers, ignoring case. For non-string
    arguments, return the argument converted to a `bool`, or `default`
    if the conversion fails.
    """
    if isinstance(value, str):
        try:
            return bool(float(value))
        except ValueError:
            value = value.strip().lower()
            if value in ('yes', 'true', 'enabled', 'on'):
                return True
            elif value in ('no', 'false', 'disabled', 'off'):
                return False
            return default
    try:
        return bool(value)
    except (TypeError, ValueError):
        return default


def as_int(s, default=None, min=None, max=None):
    """Convert s to an int and limit it to the given range, or return
    default if unsuccessful."""
    try:
        value = int(s)
    except (TypeError, ValueError):
        return default
    if min is not None and value < min:
        value = min
    if max is not None and value > max:
        value = max
    return value


def cleandoc(message):
    """Removes uniform indentation and leading/trailing whitespace."""
    return inspect.cleandoc(message).strip()


def exception_to_unicode(e, traceback=False):
    """Convert an `Exception` to a string.

    The representation contains the class name of the exception and,
    optionally, the traceback of the exception being handled.
    """
    message = '%s: %s' % (e.__class__.__name__, e)
    if traceback:
        traceback_only = tb.format_exc().split('\n')[:-2]
        message = '\n%s\n%s' % ('\n'.join(traceback_only), message)
    return message


def unicode_quote(value, safe='/'):
    """Percent-encode `value`, UTF-8 encoding it first.

    :param safe: the characters that would otherwise be quoted but
                 shouldn't here (defaults to '/')
    """
    return quote(str(value).encode('utf-8'), safe)
