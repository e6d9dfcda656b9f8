#!/usr/bin/env python

import re

from setuptools import setup


version = ''
with open('s3lite/__init__.py', 'r') as fd:
    version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
                        fd.read(), re.MULTILINE).group(1)

if not version:
    raise RuntimeError('Cannot find version information')


with open('README.rst', 'rb') as f:
    readme = f.read().decode('utf-8')

setup(
    name='s3lite',
    version=version,
    description='A small AWS S3 client with Signature Version 4 signing',
    long_description=readme,
    packages=['s3lite'],
    install_requires=['requests!=2.9.0'],
    extras_require={
        'test': ['mock', 'pytest'],
    },
    include_package_data=True,
    python_requires='>=3.6',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ]
)
