#!/usr/bin/env python

"""
<Program Name>
  test_exceptions.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Test cases for exceptions.py (mainly the exceptions defined there).
"""

import logging
import unittest

import keyasymmetric.exceptions

logger = logging.getLogger(__name__)


class TestExceptions(unittest.TestCase):
    def test_hierarchy(self):
        for error in (
            keyasymmetric.exceptions.EmptyInputError,
            keyasymmetric.exceptions.UnrecognizedKeyError,
            keyasymmetric.exceptions.UnexpectedKindError,
            keyasymmetric.exceptions.FormatError,
            keyasymmetric.exceptions.UnsupportedAlgorithmError,
            keyasymmetric.exceptions.UnsupportedLibraryError,
        ):
            self.assertTrue(issubclass(error, keyasymmetric.exceptions.Error))

    def test_unexpected_kind_error(self):
        error = keyasymmetric.exceptions.UnexpectedKindError("private", "public")
        logger.error(error)
        self.assertEqual(error.expected, "private")
        self.assertEqual(error.actual, "public")
        self.assertEqual(
            str(error),
            'Value is not recognized as a private key; its type is "public".',
        )

    def test_unexpected_kind_error_without_kind(self):
        error = keyasymmetric.exceptions.UnexpectedKindError("public", None)
        self.assertEqual(
            str(error),
            'Value is not recognized as a public key; its type is "<not set>".',
        )


# Run the unit tests.
if __name__ == "__main__":
    unittest.main()
