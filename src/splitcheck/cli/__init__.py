"""
Command Line Interface

Click-based commands for settling session files and analysing past sessions.
"""

from .main import main

__all__ = ["main"]
