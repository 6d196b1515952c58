"""
<Program Name>
  exceptions.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Define exceptions.  The names chosen for exception classes should end in
  'Error' (except where there is a good reason not to).
"""


class Error(Exception):
    """Indicate a generic error."""


class EmptyInputError(Error):
    """Indicate that an empty value was passed where key material was
    expected."""


class UnrecognizedKeyError(Error):
    """Indicate that a value is neither a known key format nor a certificate
    carrying a loadable key."""


class UnexpectedKindError(Error):
    """Indicate that a value was recognized as a key, but not of the kind the
    caller asked for (e.g. a public key where a private key was expected)."""

    def __init__(self, expected: str, actual):
        super().__init__(
            f"Value is not recognized as a {expected} key; its type is "
            f"\"{actual if actual else '<not set>'}\"."
        )
        self.expected = expected
        self.actual = actual


class FormatError(Error):
    """Indicate an error while parsing a value in a specific key format."""


class UnsupportedAlgorithmError(Error):
    """Indicate that a key uses an algorithm other than the one requested, or
    one that cannot be handled at all."""


class UnsupportedLibraryError(Error):
    """Indicate that the installed cryptography backend cannot perform a
    required operation."""
