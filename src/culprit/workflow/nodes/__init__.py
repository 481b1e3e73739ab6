"""Workflow nodes for the session graph."""

from culprit.workflow.nodes.initialize import Initialize
from culprit.workflow.nodes.report import Report
from culprit.workflow.nodes.strategy import Scan, Search

__all__ = [
    "Initialize",
    "Scan",
    "Search",
    "Report",
]
