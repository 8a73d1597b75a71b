"""
Code Review Bot

Reviews pending git changes with a language model, writes markdown
reports and applies confirmed code modifications.
"""

__version__ = "1.0.0"

from .api import ReviewOrchestrator, ReviewRequest, ReviewOutcome

__all__ = ["ReviewOrchestrator", "ReviewRequest", "ReviewOutcome"]
