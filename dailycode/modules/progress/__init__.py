"""Progress Module - Attempt recording and progress statistics."""

from dailycode.modules.progress.interface import (
    Attempt,
    AttemptSubmission,
    IProgressRepository,
    PerformanceAnalysis,
    Progress,
    ProgressStats,
    SubmissionResult,
)

__all__ = [
    "Attempt",
    "AttemptSubmission",
    "IProgressRepository",
    "PerformanceAnalysis",
    "Progress",
    "ProgressStats",
    "SubmissionResult",
]
