"""Pipeline stages for a migration run."""

from .classify import Classification, classify
from .walk import DirectoryWalker
from .summary import SummaryAggregator
from .process import FileProcessor
from .reporting import RunReport, render_summary

__all__ = [
    "Classification",
    "DirectoryWalker",
    "FileProcessor",
    "RunReport",
    "SummaryAggregator",
    "classify",
    "render_summary",
]
