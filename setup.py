# Licensed to the Apache Software Foundation (ASF) under one or more
# contributor license agreements.  See the NOTICE file distributed with
# this work for additional information regarding copyright ownership.
# The ASF licenses this file to You under the Apache License, Version 2.0
# (the "License"); you may not use this file except in compliance with
# the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import re

from setuptools import setup, find_packages

with open('solrdump/__init__.py') as f:
    __version__ = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]', f.read(), re.MULTILINE).group(1)

with open('requirements.txt') as f:
    pip_requirements = f.readlines()

setup(
    name="solrdump",
    version=__version__,

    author="solrdump developers",

    description="Export documents from a SOLR collection as JSON lines using cursorMark deep paging.",
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    packages=find_packages(exclude=['tests', 'tests.*']),
    platforms='any',
    python_requires='>=3.7',
    install_requires=pip_requirements,
    extras_require={
        'kerberos': ['requests-gssapi>=1.2', 'gssapi>=1.6'],
        'test': ['pytest', 'requests-mock'],
    },
    entry_points={
        'console_scripts': ['solrdump=solrdump.cli:main'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
    ],
    zip_safe=False
)
