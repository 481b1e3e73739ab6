"""Search strategy implementations."""

from culprit.strategy.base import Strategy
from culprit.strategy.bisect import BisectionSearch, SearchStep
from culprit.strategy.linear import LinearScan, ScanFrame

__all__ = [
    "Strategy",
    "LinearScan",
    "ScanFrame",
    "BisectionSearch",
    "SearchStep",
]
