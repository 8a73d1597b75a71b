"""
Git Integration Layer

This module provides diff retrieval from the local repository and
filtering of raw unified diff text into file-scoped sections.
"""

from .backend import GitBackend
from .extractor import DiffExtractor, parse_file_diffs, filter_diff

__all__ = ['GitBackend', 'DiffExtractor', 'parse_file_diffs', 'filter_diff']
