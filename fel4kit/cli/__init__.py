"""
fel4kit CLI module.

This module provides the command-line interface for fel4kit.
"""

from .parser import CLI, main
from . import utils

__all__ = ["CLI", "main", "utils"]
