"""
LLM Analysis Engine

This module provides prompt building, the analysis service client and
validation of review and documentation responses.
"""

from .prompts import PromptBuilder
from .client import AnalysisClient
from .analyzer import ChangeAnalyzer

__all__ = ['PromptBuilder', 'AnalysisClient', 'ChangeAnalyzer']
