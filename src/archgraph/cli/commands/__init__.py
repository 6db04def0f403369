"""
CLI Commands Package.

Each command is implemented in its own module for maintainability.
"""

from . import flows
from . import highlight
from . import importer
from . import layout
from . import render
from . import subjects

__all__ = [
    "flows",
    "highlight",
    "importer",
    "layout",
    "render",
    "subjects",
]
