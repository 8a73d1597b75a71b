"""
Report Formatting Layer

This module renders reviews and change documentation as markdown.
"""

from .markdown import MarkdownFormatter

__all__ = ['MarkdownFormatter']
