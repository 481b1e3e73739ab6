"""CLI command modules for culprit."""

from culprit.command.session import ScanCommand, SearchCommand

__all__ = ["ScanCommand", "SearchCommand"]
