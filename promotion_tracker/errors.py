"""Exceptions raised by :mod:`promotion_tracker`."""
from __future__ import annotations


class StorageError(RuntimeError):
    """A metrics or exam store could not complete a read or write."""
