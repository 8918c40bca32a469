# rank_tracker/__init__.py
"""
rank_tracker package initializer.
Defines package version and exposes the CLI.
"""
__version__ = "1.0.0"

from rank_tracker.cli import cli  # noqa: E402

__all__ = ["__version__", "cli"]
