"""
Diff Extractor

Retrieves pending changes from the repository and filters the raw
unified diff down to well-formed, file-scoped sections.
"""

import asyncio
import logging
from typing import List, Optional

from ..models.diff import DiffLine, DiffLineKind, FileDiff
from .backend import GitBackend


logger = logging.getLogger(__name__)

FILE_HEADER_PREFIX = 'diff --git'
METADATA_PREFIXES = ('index ', '--- ', '+++ ')
HUNK_PREFIX = '@@'
CONTENT_MARKERS = {
    ' ': DiffLineKind.CONTEXT,
    '+': DiffLineKind.ADDITION,
    '-': DiffLineKind.DELETION,
}


def header_file_path(line: str) -> str:
    """File path named by a `diff --git a/X b/Y` header (the b/ side)."""
    if ' b/' in line:
        return line.split(' b/', 1)[1]
    return line[len(FILE_HEADER_PREFIX):].strip() or line


def classify_line(line: str, in_file: bool) -> Optional[DiffLineKind]:
    """
    Classify a raw diff line.

    Args:
        line: Raw line of diff text
        in_file: Whether a `diff --git` header has been seen

    Returns:
        Kind of the line, or None if the line must be dropped
    """
    if line.startswith(FILE_HEADER_PREFIX):
        return DiffLineKind.HEADER

    if not in_file:
        return None

    if line.startswith(METADATA_PREFIXES):
        return DiffLineKind.METADATA

    if line.startswith(HUNK_PREFIX):
        return DiffLineKind.HUNK

    if line:
        return CONTENT_MARKERS.get(line[0])

    return None


def parse_file_diffs(diff_text: str) -> List[FileDiff]:
    """
    Parse diff text into per-file sections, dropping unclassified lines.

    Args:
        diff_text: Raw unified diff text

    Returns:
        FileDiff objects in order of appearance
    """
    file_diffs: List[FileDiff] = []
    current: Optional[FileDiff] = None

    for line in diff_text.split('\n'):
        kind = classify_line(line, in_file=current is not None)
        if kind is None:
            continue

        if kind == DiffLineKind.HEADER:
            current = FileDiff(file_path=header_file_path(line))
            file_diffs.append(current)

        current.lines.append(DiffLine(kind=kind, text=line, file_path=current.file_path))

    return file_diffs


def filter_diff(diff_text: str) -> str:
    """Keep only lines that belong to well-formed file sections."""
    return '\n'.join(file_diff.to_text() for file_diff in parse_file_diffs(diff_text))


def summarize_changes(file_diffs: List[FileDiff]) -> List[str]:
    """Human-readable lines describing touched files and changed lines."""
    summary = []
    for file_diff in file_diffs:
        summary.append(f"File: {file_diff.file_path}")
        for line in file_diff.lines:
            if line.kind == DiffLineKind.ADDITION:
                summary.append(f"Added: {line.content}")
            elif line.kind == DiffLineKind.DELETION:
                summary.append(f"Removed: {line.content}")
    return summary


class DiffExtractor:
    """
    Produces normalized diff text for review.

    Staged changes come first, then unstaged ones. When the working tree
    is clean the diff against the base branch is used instead.
    """

    def __init__(self, backend: GitBackend):
        """
        Initialize diff extractor.

        Args:
            backend: Git backend of the repository under review
        """
        self.backend = backend

    async def get_diff(self, branch: str = "main") -> Optional[str]:
        """
        Get the pending changes as filtered diff text.

        Args:
            branch: Branch to diff against when nothing is pending

        Returns:
            Diff text, or None when there are no changes anywhere

        Raises:
            RetrievalFailure: If git cannot produce a diff
        """
        staged = await asyncio.to_thread(self.backend.staged_diff)
        unstaged = await asyncio.to_thread(self.backend.unstaged_diff)

        if staged and not staged.endswith('\n'):
            staged += '\n'
        full_diff = staged + unstaged

        if not full_diff.strip():
            logger.info(f"No staged or unstaged changes, diffing against {branch}")
            branch_diff = await asyncio.to_thread(self.backend.branch_diff, branch)
            if not branch_diff.strip():
                logger.info("No changes found")
                return None
            return branch_diff

        file_diffs = parse_file_diffs(full_diff)

        logger.info("Detected changes:")
        for line in summarize_changes(file_diffs):
            logger.info(line)

        return '\n'.join(file_diff.to_text() for file_diff in file_diffs)

    async def get_commit_messages(self, branch: str = "main") -> str:
        """
        Get commit messages since `branch`, one `<short hash>: <message>` per line.

        Raises:
            RetrievalFailure: If the log cannot be read
        """
        commits = await asyncio.to_thread(self.backend.commit_log, branch)
        logger.debug(f"Found {len(commits)} commits since {branch}")
        return '\n'.join(f"{sha[:7]}: {message}" for sha, message in commits)
