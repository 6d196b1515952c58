"""keyasymmetric tests.

NOTE: This file is only considered when running tests via aggregate_tests.py, or
with the '-m' flag, when invoked individually.

"""

import logging

# Failed load attempts are logged at DEBUG; keep test output readable.
logging.getLogger("keyasymmetric").setLevel(logging.ERROR)
