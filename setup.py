# coding=utf-8
# Copyright 2024 The Resurrect Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Setup script for resurrect."""

# pyformat: disable

from setuptools import find_packages
from setuptools import setup


_dct = {}
with open('resurrect/version.py', encoding='utf-8') as f:
  exec(f.read(), _dct)  # pylint: disable=exec-used
__version__ = _dct['__version__']

long_description = """
# Resurrect

Resurrect serializes arbitrary, possibly cyclic, Python object graphs to JSON
and restores them later. Shared references stay shared, cycles survive, and
instances come back as instances of their original classes. Values JSON can't
hold (datetimes, regular expressions, non-finite floats, XML elements and a
`MISSING` sentinel) are encoded with small builder records.
"""

setup(
    name='resurrect',
    version=__version__,
    include_package_data=True,
    packages=find_packages(exclude=['docs']),  # Required
    python_requires='>=3.8',
    install_requires=[
        'absl-py',
        'typing-extensions',
    ],
    extras_require={
        'testing': [
            'pytest',
        ],
    },
    description='Resurrect: JSON serialization of object graphs',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='The Resurrect Authors',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    license='Apache 2.0',
    keywords='json serialization object graph cycles',
)
