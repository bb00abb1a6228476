"""devjunk data models."""

from devjunk.models.junk_kind import JunkKind, KindGroup
from devjunk.models.scan_options import ScanOptions
from devjunk.models.scan_result import ScanItem, ScanProgress, ScanResult, SkippedPath
from devjunk.models.clean_result import CleanFailure, CleanOutcome, CleanResult

__all__ = [
    "CleanFailure",
    "CleanOutcome",
    "CleanResult",
    "JunkKind",
    "KindGroup",
    "ScanItem",
    "ScanOptions",
    "ScanProgress",
    "ScanResult",
    "SkippedPath",
]
