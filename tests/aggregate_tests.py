#!/usr/bin/env python

"""
<Program Name>
  aggregate_tests.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Run all the unit tests from every .py file beginning with "test_" in
  'keyasymmetric/tests'.
"""

import glob
import random
import sys
import unittest

# Generate a list of pathnames that match a pattern (i.e., that begin with
# 'test_' and end with '.py'.  A shell-style wildcard is used with glob() to
# match desired filenames.  All the tests matching the pattern will be loaded
# and run in a test suite.
test_list = glob.glob("test_*.py")

# Remove '.py' from each filename to allow loadTestsFromNames() (called below)
# to properly load the file as a module.
tests_modules_to_run = []
for test in test_list:
    assert test[-3:] == ".py", "aggregate_tests.py is inconsistent; fix."
    tests_modules_to_run.append(test[:-3])

# Randomize the order in which the tests run.  Randomization might catch errors
# with unit tests that do not properly clean up or restore monkey-patched
# modules.
random.shuffle(tests_modules_to_run)

if __name__ == "__main__":
    suite = unittest.TestLoader().loadTestsFromNames(tests_modules_to_run)
    all_tests_passed = (
        unittest.TextTestRunner(verbosity=1, buffer=True).run(suite).wasSuccessful()
    )
    if not all_tests_passed:
        sys.exit(1)
