"""Record processing module."""

from trtrimmer.process.report import build_report, summarize_report, write_report
from trtrimmer.process.trim import TrimmedRecord, TrimStats, run_trimming, trim_records

__all__ = [
    "trim_records",
    "run_trimming",
    "TrimmedRecord",
    "TrimStats",
    "build_report",
    "summarize_report",
    "write_report",
]
