"""Helpers shared by the format loaders."""

from __future__ import annotations

from typing import Callable, Optional


def load_private(loader: Callable, data: bytes, password: Optional[bytes]):
    """Call a pyca/cryptography private key loader, ignoring 'password' if
    the key turns out not to be encrypted.

    pyca/cryptography raises TypeError both when a password is passed for an
    unencrypted key and when one is missing for an encrypted key; only the
    first case is retried.
    """
    try:
        return loader(data, password)
    except TypeError:
        if password is None:
            raise

    return loader(data, None)
