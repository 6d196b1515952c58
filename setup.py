#! /usr/bin/env python

"""
<Program Name>
  setup.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  BUILD SOURCE DISTRIBUTION

  The following shell command generates a keyasymmetric source archive that
  can be distributed to other users.  The packaged source is saved to the
  'dist' folder in the current directory.

  $ python setup.py sdist


  INSTALLATION OPTIONS

  pip - installing and managing Python packages (recommended):

  # Installing from Python Package Index (https://pypi.python.org/pypi).
  $ pip install keyasymmetric

  # Installing from local source archive.
  $ pip install <path to archive>

  # Or from the root directory of the unpacked archive.
  $ pip install .

  # Support for passphrase protected OpenSSH private keys.
  $ pip install keyasymmetric[openssh]
"""

from setuptools import setup
from setuptools import find_packages


with open('README.rst') as file_object:
  long_description = file_object.read()

setup(
  name = 'keyasymmetric',
  version = '0.1.0',
  description = 'Recognize asymmetric keys and X.509 certificates in any'
      ' common format and extract their properties',
  license = 'MIT',
  long_description = long_description,
  long_description_content_type = 'text/x-rst',
  keywords = 'cryptography, keys, certificates, rsa, ecdsa, dsa, x509, pem',
  classifiers = [
    'Development Status :: 4 - Beta',
    'Intended Audience :: Developers',
    'License :: OSI Approved :: MIT License',
    'Natural Language :: English',
    'Operating System :: POSIX',
    'Operating System :: POSIX :: Linux',
    'Operating System :: MacOS :: MacOS X',
    'Operating System :: Microsoft :: Windows',
    'Programming Language :: Python :: 3',
    'Programming Language :: Python :: 3.8',
    'Programming Language :: Python :: 3.9',
    'Programming Language :: Python :: 3.10',
    'Programming Language :: Python :: 3.11',
    'Programming Language :: Python :: 3.12',
    'Programming Language :: Python :: Implementation :: CPython',
    'Topic :: Security',
    'Topic :: Software Development'
  ],
  python_requires = "~=3.8",
  install_requires = [
      'cryptography>=42.0.0',
      'pyasn1>=0.4.8',
      'pyasn1-modules>=0.3.0'],
  extras_require = {
      'openssh': ['bcrypt>=3.2.0']},
  packages = find_packages(exclude=['tests', 'debian']),
  scripts = []
)
