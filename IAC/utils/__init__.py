"""
Utility functions for stack definitions.

Provides naming conventions, tag factories, and output utilities.
"""

from IAC.utils.naming import ResourceNamer
from IAC.utils.tags import resource_tags, with_tags
from IAC.utils.outputs import resolve_outputs, write_outputs_to_env

__all__ = [
    "ResourceNamer",
    "resolve_outputs",
    "resource_tags",
    "with_tags",
    "write_outputs_to_env",
]
