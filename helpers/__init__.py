"""Helper utilities for the keystroke analysis package.

This package contains small utilities shared by the models and services.
"""

from .debug_util import DebugUtil  # noqa: F401
