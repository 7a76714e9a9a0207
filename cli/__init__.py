"""CLI package for X Post Publisher

Command-line interface for logging in to X, publishing posts and running
the HTTP API.
"""

from cli.main import main

__all__ = [
    "main",
]
