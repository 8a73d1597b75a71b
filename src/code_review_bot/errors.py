"""
Error Types

Failures raised by the review pipeline. Extraction and analysis failures
abort the whole run; per-modification failures are reported as results
by the patch applier instead of being raised.
"""

from typing import Optional


class CodeReviewBotError(Exception):
    """Base class for review pipeline errors"""


class RetrievalFailure(CodeReviewBotError):
    """Revision-control backend could not produce a diff or log"""
    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.command = command


class AnalysisCallFailure(CodeReviewBotError):
    """Analysis service could not be reached or returned an error status"""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AnalysisParseFailure(CodeReviewBotError):
    """Analysis service answered, but the content is not usable JSON"""
    def __init__(self, message: str, content: Optional[str] = None):
        super().__init__(message)
        self.content = content


class ReportWriteError(CodeReviewBotError):
    """A markdown artifact could not be written"""
