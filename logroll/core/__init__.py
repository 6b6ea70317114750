"""Rotation and retention engine."""

from .archiver import compress_file
from .retention import RetentionDecision, RetentionScanner, SegmentInfo, list_segments, plan_retention
from .rotating_writer import RotatingWriter
from .scheduler import CLEANUP_INTERVAL, PeriodicTask, Scheduler

__all__ = [
    "CLEANUP_INTERVAL",
    "PeriodicTask",
    "RetentionDecision",
    "RetentionScanner",
    "RotatingWriter",
    "Scheduler",
    "SegmentInfo",
    "compress_file",
    "list_segments",
    "plan_retention",
]
