#!/usr/bin/env python

import os
import re
from setuptools import setup

version_file = os.path.join('partsplit', '__init__.py')
with open(version_file, 'rb') as f:
    version_data = f.read().strip().decode('ascii')

version_re = re.compile(r'((?:\d+)\.(?:\d+)\.(?:\d+))')
version = version_re.search(version_data).group(0)

tests_require = [
    'pytest',
    'pytest-cov',
    'pytest-timeout',
    'PyYAML'
]

dev_require = tests_require + [
    'invoke',
    'nox',
    'atheris',
    'build',
]

setup(name='python-partsplit',
      version=version,
      description='Split fully buffered multipart bodies into header/body parts',
      license='Apache',
      platforms='any',
      zip_safe=False,
      packages=[
          'partsplit',
      ],
      extras_require={
          'test': tests_require,
          'dev': dev_require,
      },
      python_requires='>=3.9',
      classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Software Development :: Libraries :: Python Modules'
      ],
     )
