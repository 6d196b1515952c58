"""
<Program Name>
  loader.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  The generic key loader: try every supported (algorithm, format)
  combination in a static priority order until one decodes the value.

  The list of combinations is closed and known in advance: it is the cross
  product of 'keyasymmetric.settings.ALGORITHMS' and
  'keyasymmetric.settings.FORMATS', restricted to what each format supports
  (see 'keyasymmetric.formats.FORMATS').  Every attempt is independently
  fallible: a failure is logged and the next combination is tried.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from keyasymmetric import formats, settings
from keyasymmetric.exceptions import UnrecognizedKeyError, UnsupportedAlgorithmError
from keyasymmetric.handles import KeyHandle

logger = logging.getLogger(__name__)

LoaderEntry = Tuple[str, str]


def load_order(
    algorithms: Optional[Sequence[str]] = None,
    format_names: Optional[Sequence[str]] = None,
    exclude: Iterable[LoaderEntry] = (),
) -> List[LoaderEntry]:
    """Return the (algorithm, format) combinations to try, in order.

    Args:
        algorithms: Algorithm order. Defaults to settings.ALGORITHMS.
        format_names: Format order per algorithm. Defaults to
            settings.FORMATS.
        exclude: Combinations to leave out, e.g. those already tried.
    """
    if algorithms is None:
        algorithms = settings.ALGORITHMS
    if format_names is None:
        format_names = settings.FORMATS

    skipped = set(exclude)
    order = []
    unknown = [name for name in format_names if name not in formats.FORMATS]
    if unknown:
        logger.warning("Ignoring unknown key formats: %s", ", ".join(unknown))

    for algorithm in algorithms:
        for name in format_names:
            entry = (algorithm, name)
            if name in unknown or entry in skipped or entry in order:
                continue
            if algorithm in formats.FORMATS[name].algorithms:
                order.append(entry)

    return order


def load_format(
    algorithm: str, format_name: str, data: bytes, password: Optional[bytes] = None
) -> KeyHandle:
    """Load 'data' as an 'algorithm' key in format 'format_name'.

    Raises:
        UnsupportedAlgorithmError: the format cannot hold 'algorithm' keys.
        Any exception of the format loader, see keyasymmetric.formats.
    """
    key_format = formats.FORMATS[format_name]
    if algorithm not in key_format.algorithms:
        raise UnsupportedAlgorithmError(f"{format_name} does not hold {algorithm} keys")

    return key_format.load(data, password, algorithm)


def try_load(
    entries: Iterable[LoaderEntry], data: bytes, password: Optional[bytes] = None
) -> Optional[KeyHandle]:
    """Return the handle of the first entry that loads 'data', or None."""
    for algorithm, format_name in entries:
        try:
            return load_format(algorithm, format_name, data, password)

        # Parsers raise a wide range of exceptions on foreign input; none of
        # them may abort the search.
        except Exception as e:
            logger.debug(
                "Value is not a %s key in %s format: %s: %s",
                algorithm,
                format_name,
                type(e).__name__,
                e,
            )

    return None


def load(
    data: bytes,
    password: Optional[bytes] = None,
    exclude: Iterable[LoaderEntry] = (),
) -> KeyHandle:
    """
    <Purpose>
      Load a key in any supported format and algorithm.  This is slow: in
      the worst case, every (algorithm, format) combination parses 'data'.

    <Arguments>
      data:
        The key value.

      password:
        Passphrase for encrypted private keys, or None.

      exclude:
        Combinations that need not be tried.

    <Exceptions>
      keyasymmetric.exceptions.UnrecognizedKeyError, if no combination loads
      'data'.

    <Side Effects>
      None.

    <Returns>
      A KeyHandle.
    """

    handle = try_load(load_order(exclude=exclude), data, password)
    if handle is None:
        raise UnrecognizedKeyError("Value is not recognized as a key")

    return handle
