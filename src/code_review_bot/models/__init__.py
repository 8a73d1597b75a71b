"""
Data Models

Core data models of the code review pipeline
"""

from .diff import DiffLine, DiffLineKind, FileDiff
from .review import (
    Priority,
    APIChangeType,
    ModificationRequest,
    ReviewIssue,
    ReviewResponse,
    TechnicalDetail,
    APIChange,
    DocumentationResponse,
)
from .patch import ApplyStatus, ApplyResult, ApplySummary

__all__ = [
    "DiffLine",
    "DiffLineKind",
    "FileDiff",
    "Priority",
    "APIChangeType",
    "ModificationRequest",
    "ReviewIssue",
    "ReviewResponse",
    "TechnicalDetail",
    "APIChange",
    "DocumentationResponse",
    "ApplyStatus",
    "ApplyResult",
    "ApplySummary",
]
