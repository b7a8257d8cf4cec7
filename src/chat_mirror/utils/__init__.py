"""Utility functions for chat_mirror.

This module contains internal utility functions.
"""

from chat_mirror.utils.lazy_import import lazy_import
from chat_mirror.utils.timestamps import (
    iso_to_epoch_ms,
    now_ms,
    optional_iso_to_epoch_ms,
    optional_unix_to_epoch_ms,
    unix_to_epoch_ms,
)

__all__ = [
    "iso_to_epoch_ms",
    "lazy_import",
    "now_ms",
    "optional_iso_to_epoch_ms",
    "optional_unix_to_epoch_ms",
    "unix_to_epoch_ms",
]
