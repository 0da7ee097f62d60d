#!/usr/bin/env python3
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

from setuptools import find_packages, setup


min_python = (3, 9)
if sys.version_info < min_python:
    print("SettingsPanels requires Python %d.%d or later" % min_python)
    sys.exit(1)


setup(
    name='SettingsPanels',
    version='1.0.0',
    description='Pluggable user settings panels for web applications',
    long_description="""
SettingsPanels is a small web application framework for user settings.
Panels are components: each one declares a key, a name and a group, and
the settings page dispatches requests to it. Plugins add their own
panels and groups through the `settingspanels.plugins` entry point.
""",
    author='Edgewall Software',
    author_email='trac-dev@googlegroups.com',
    license='BSD',
    url='https://trac.edgewall.org/',
    classifiers=[
        'Environment :: Web Environment',
        'Framework :: Trac',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP :: WSGI :: Application',
    ],
    python_requires='>=3.9',
    packages=find_packages(),
    package_data={
        'settingspanels': ['templates/*.html'],
        'settingspanels.prefs': ['templates/*.html'],
    },
    install_requires=[
        'Jinja2>=2.10',
        'MarkupSafe>=2.0',
        'Babel>=2.2',
        'tzdata',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'settingspanels.plugins': [
            'settingspanels.prefs.panels = settingspanels.prefs.panels',
            'settingspanels.prefs.groups = settingspanels.prefs.groups',
        ],
    },
    zip_safe=False,
)
