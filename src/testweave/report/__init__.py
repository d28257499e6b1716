"""Reporters for test runs."""

from testweave.report.collect import CollectingReporter
from testweave.report.progress import ProgressReporter, describe_path

__all__ = ["CollectingReporter", "ProgressReporter", "describe_path"]
