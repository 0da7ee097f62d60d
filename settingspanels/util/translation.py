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

"""Utilities for text translation with gettext and Babel."""

import os
import threading

from babel import Locale, UnknownLocaleError
from babel.support import NullTranslations, Translations

__all__ = ['gettext', 'ngettext', '_', 'N_', 'activate', 'deactivate',
           'get_available_locales', 'get_locale_name']

LOCALE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)),
                          'locale')


def safefmt(string, kwargs):
    if kwargs:
        try:
            return string % kwargs
        except KeyError:
            pass
    return string


N_ = _noop = lambda string: string


class TranslationsProxy(object):
    """Delegate translation calls to the `Translations` activated for
    the current thread, falling back on null translations.
    """

    def __init__(self):
        self._current = threading.local()
        self._null_translations = NullTranslations()

    @property
    def active(self):
        return getattr(self._current, 'translations', None) or \
               self._null_translations

    def activate(self, locale):
        if isinstance(locale, Locale):
            locale = str(locale)
        if locale:
            t = Translations.load(LOCALE_DIR, [locale])
        else:
            t = None
        self._current.translations = t

    def deactivate(self):
        t = getattr(self._current, 'translations', None)
        self._current.translations = None
        return t

    def gettext(self, string, **kwargs):
        return safefmt(self.active.gettext(string), kwargs)

    def ngettext(self, singular, plural, num, **kwargs):
        kwargs.setdefault('num', num)
        return safefmt(self.active.ngettext(singular, plural, num), kwargs)


translations = TranslationsProxy()

gettext = _ = translations.gettext
ngettext = translations.ngettext


def activate(locale):
    """Activate the translations of `locale` for the current thread."""
    translations.activate(locale)


def deactivate():
    """Deactivate translations.
    :return: the current Translations, if any
    """
    return translations.deactivate()


def get_available_locales():
    """Return a list of locale identifiers of the locales for which
    translations are available, always including `en_US`.
    """
    locales = ['en_US']
    if os.path.isdir(LOCALE_DIR):
        for dirname in sorted(os.listdir(LOCALE_DIR)):
            catalog = os.path.join(LOCALE_DIR, dirname, 'LC_MESSAGES',
                                   'messages.mo')
            if '.' not in dirname and os.path.isfile(catalog) and \
                    dirname not in locales:
                locales.append(dirname)
    return locales


def get_locale_name(locale_id):
    """Return the display name of `locale_id`, or `None` if it isn't a
    valid locale identifier."""
    if not locale_id:
        return None
    try:
        return Locale.parse(locale_id).display_name
    except (ValueError, UnknownLocaleError):
        return None
