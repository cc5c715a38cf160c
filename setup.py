#!/usr/bin/env python
import re
import sys

# This shouldn't be needed since I have python_requires set but just in case:
if sys.version_info < (3,8):
    raise ValueError('Must use python >= 3.8')

from setuptools import setup

# Read the version rather than import the package so psutil isn't needed here
with open('sharesync/__init__.py') as file:
    version = re.search(r'^__version__ = "(.*?)"',file.read(),re.M).group(1)

setup(
    name='sharesync',
    packages=['sharesync'],
    long_description=open('readme.md').read(),
    long_description_content_type='text/markdown',
    entry_points = {
        'console_scripts': ['sharesync=sharesync.cli:cli'],
    },
    version=version,
    description='Multi-folder two-way sync of network shares to an rclone remote',
    install_requires=['psutil'],
    extras_require={
        'test': ['pytest'],
    },
    license='MIT',
    python_requires='>=3.8'
)
