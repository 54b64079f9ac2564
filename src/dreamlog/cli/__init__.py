"""
DreamLog CLI - Command Line Interface for the dream journal

Provides terminal commands for:
- Logging, listing, searching and deleting dreams
- Importing exported HTML journal entries
- Viewing window unlock state and running pattern analyses
- Managing hidden tags
"""

from .main import cli, main

__all__ = ["cli", "main"]
