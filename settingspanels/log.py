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

import logging
import logging.handlers
import sys

LOG_TYPES = ('file', 'stderr', 'syslog', 'none')
LOG_TYPE_ALIASES = ('unix',)
LOG_LEVELS = ('INFO', 'CRITICAL', 'ERROR', 'WARNING', 'DEBUG')
LOG_LEVEL_ALIASES_MAP = {'WARN': 'WARNING', 'ALL': 'DEBUG'}
LOG_LEVEL_ALIASES = tuple(sorted(LOG_LEVEL_ALIASES_MAP))

DEFAULT_FORMAT = 'SettingsPanels[%(module)s] %(levelname)s: %(message)s'


def get_log_level(name):
    """Return the `logging` level for a `[logging] log_level` value,
    aliases included."""
    name = name.upper()
    name = LOG_LEVEL_ALIASES_MAP.get(name, name)
    if name not in LOG_LEVELS:
        # ChoiceOption restricts the values, no need to translate
        raise AssertionError("Unrecognized log level '%s'" % name)
    return getattr(logging, name)


def expand_format(format, **values):
    """Convert a `[logging] log_format` value to a `logging` format.

    `$(name)s` placeholders become `%(name)s`. Those named in `values`
    (like `path` and `basename` for the environment) are substituted
    right away, the others are left to the `logging.Formatter`.

    >>> expand_format('[$(basename)s] $(message)s', basename='prefs')
    '[prefs] %(message)s'
    """
    format = format.replace('$(', '%(')
    for name, value in values.items():
        format = format.replace('%%(%s)s' % name,
                                str(value).replace('%', '%%'))
    return format


def _create_handler(logtype, logfile):
    if logtype == 'file':
        return logging.FileHandler(logfile, encoding='utf-8')
    if logtype in ('syslog', 'unix'):
        return logging.handlers.SysLogHandler('/dev/log')
    if logtype == 'stderr':
        return logging.StreamHandler(sys.stderr)
    return logging.NullHandler()


def logger_handler_factory(logtype='syslog', logfile=None, level='WARNING',
                           logid='SettingsPanels', format=None):
    """Return a `(logger, handler)` pair for the given log type.

    The handler is not attached to the logger, the caller adds it and
    removes it again with `shutdown`. Timestamps are added to the
    default format for files and the console, syslog has its own.
    """
    logtype = logtype.lower()
    logger = logging.getLogger(logid)
    logger.setLevel(get_log_level(level))

    handler = _create_handler(logtype, logfile)
    if not format:
        format = DEFAULT_FORMAT
        if logtype in ('file', 'stderr'):
            format = '%(asctime)s ' + format
    datefmt = '%X' if logtype == 'stderr' else None
    handler.setFormatter(logging.Formatter(format, datefmt))
    return logger, handler


def shutdown(logger):
    """Flush, close and detach every handler of `logger`."""
    for handler in logger.handlers[:]:
        handler.flush()
        handler.close()
        logger.removeHandler(handler)
