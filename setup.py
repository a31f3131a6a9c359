#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re

from setuptools import find_packages, setup

# the package can't be imported before its dependencies are installed, so the version is read from the source
with open('luaserde/version.py') as fp:
    __version__ = re.search(r"^BASE_VERSION = '([^']+)'", fp.read(), re.MULTILINE).group(1)  # type: ignore[union-attr]

setup(
    name='luaserde',
    version=__version__,
    description='Convert typed Python values to and from Lua values',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.11',
    packages=find_packages(exclude=('luaserde_tests', 'luaserde_tests.*')),
    install_requires=[
        'lupa>=2.0',
        'pydantic>=2.0',
        'PyYAML',
        'structlog',
        'typing_extensions>=4.4',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
