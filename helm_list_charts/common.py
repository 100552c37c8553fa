"""
Common utilities shared across helm_list_charts modules.
"""

from __future__ import annotations

import os
from typing import Mapping


# Values that leave an on/off environment toggle switched off
FALSY_VALUES = frozenset({"0", "false", "no", "off"})


class ListChartsError(Exception):
    """Base class for errors that abort a listing run."""
    pass


def is_truthy(value: str | None) -> bool:
    """
    Interpret an environment variable value as an on/off toggle.

    Args:
        value: Raw value, or None if the variable is unset

    Returns:
        True for any non-empty value other than 0/false/no/off
    """
    if value is None:
        return False
    value = value.strip()
    return bool(value) and value.lower() not in FALSY_VALUES


def env_flag(name: str, environ: Mapping[str, str] | None = None) -> bool:
    """Check whether the environment toggle `name` is switched on."""
    if environ is None:
        environ = os.environ
    return is_truthy(environ.get(name))
