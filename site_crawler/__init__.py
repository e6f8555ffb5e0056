"""
site_crawler package initializer.
Defines package version and exposes the CLI.
"""
__version__ = "0.1.0"

from site_crawler.cli import cli  # noqa: E402

__all__ = ["__version__", "cli"]
