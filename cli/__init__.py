"""
CLI Module

Command-line access to the league tables.

Usage:
    python -m cli.main leaders
"""

from cli.main import main

__all__ = ["main"]
