"""Command-line interface for markup-tree.

Provides the ``parse`` and ``check`` commands over XML files and directories.
"""

from .main import main

__all__ = ["main"]
