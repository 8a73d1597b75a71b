"""
Patch Applier

Applies model-proposed text substitutions to files in the project.

Each modification is applied independently: the file is read, a backup
of the untouched content is written, the edit is made with an anchor
match on the `original` snippet, and the written file is read back to
verify the change took effect.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from ..models.patch import ApplyResult, ApplyStatus, ApplySummary
from ..models.review import ModificationRequest


logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read UTF-8 text without newline translation."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n")


def normalize_snippet(original: str) -> str:
    """Anchor text for an `original` snippet: trimmed, one leading '+' removed."""
    anchor = normalize_line_endings(original).strip()
    if anchor.startswith('+'):
        anchor = anchor[1:]
    return anchor


def normalize_suggestion(suggested: Optional[str]) -> str:
    return normalize_line_endings(suggested or '').strip()


def remove_anchor_lines(content: str, anchor: str) -> str:
    """
    Cut the anchor and everything after it from each line that contains it.

    The remainder is right-stripped; a line left empty is dropped.
    Lines without the anchor are kept as they are.
    """
    kept = []
    for line in content.split('\n'):
        index = line.find(anchor)
        if index == -1:
            kept.append(line)
            continue

        before = line[:index].rstrip()
        if before:
            kept.append(before)
    return '\n'.join(kept)


def replace_anchor_lines(content: str, anchor: str, suggested: str) -> str:
    """Replace the anchor through end of line with `suggested`, on every matching line."""
    pattern = re.compile(re.escape(anchor) + '.*$', re.MULTILINE)
    return pattern.sub(lambda match: suggested, content)


def apply_edit(content: str, anchor: str, suggested: str) -> str:
    """Edited content; an empty suggestion means delete."""
    if not suggested:
        return remove_anchor_lines(content, anchor)
    return replace_anchor_lines(content, anchor, suggested)


class PatchApplier:
    """
    Applies ModificationRequests to files under a project root.

    Requests are processed strictly in order, each one completed before
    the next begins. Failures are reported per request and never stop
    the batch.
    """

    def __init__(self, project_dir: str):
        """
        Initialize patch applier.

        Args:
            project_dir: Root directory that modification paths are relative to
        """
        self.project_root = Path(project_dir).resolve()

    def resolve_path(self, file: str) -> Path:
        """
        Absolute path of a project file.

        Raises:
            ValueError: If the path escapes the project root
        """
        path = (self.project_root / file).resolve()
        if path != self.project_root and self.project_root not in path.parents:
            raise ValueError(f"Path escapes project root: {file}")
        return path

    async def apply(
        self,
        modifications: Iterable[ModificationRequest],
        backup_suffix: str = ".backup"
    ) -> ApplySummary:
        """
        Apply modifications one at a time.

        Args:
            modifications: Requests in the order they should be applied
            backup_suffix: Suffix of the backup written next to each file

        Returns:
            ApplySummary with one result per request, in input order
        """
        summary = ApplySummary()

        for modification in modifications:
            result = await asyncio.to_thread(self.apply_one, modification, backup_suffix)
            summary.results.append(result)

        logger.info(
            f"Applied {summary.applied} of {len(summary)} modifications "
            f"({summary.no_op} no-op, {summary.failed} failed)"
        )
        return summary

    def apply_one(self, modification: ModificationRequest, backup_suffix: str = ".backup") -> ApplyResult:
        """
        Apply a single modification.

        Returns:
            ApplyResult; errors are captured in the result, not raised
        """
        logger.info(f"Processing modification for {modification.file}")
        backup_path = None

        try:
            file_path = self.resolve_path(modification.file)
            content = read_text(file_path)

            normalized_content = normalize_line_endings(content)
            anchor = normalize_snippet(modification.original)
            suggested = normalize_suggestion(modification.suggested)

            backup = Path(f"{file_path}{backup_suffix}")
            write_text(backup, content)
            backup_path = str(backup)
            logger.info(f"Backup created at: {backup_path}")

            if not anchor:
                raise ValueError("Original snippet is empty")

            new_content = apply_edit(normalized_content, anchor, suggested)

            if new_content == normalized_content:
                matching_line = next(
                    (line for line in normalized_content.split('\n') if anchor in line),
                    None
                )
                logger.warning(f"No changes were made to {modification.file}")
                logger.warning(f"Original content: {anchor}")
                logger.warning(f"Line containing content: {matching_line}")
                return ApplyResult(
                    modification=modification,
                    status=ApplyStatus.NO_OP,
                    backup_path=backup_path
                )

            write_text(file_path, new_content)

            verify_content = read_text(file_path)
            if verify_content == content:
                logger.error(f"File content remained unchanged after writing {modification.file}")
                return ApplyResult(
                    modification=modification,
                    status=ApplyStatus.FAILED,
                    backup_path=backup_path,
                    error="File content remained unchanged after writing"
                )

            logger.info(f"Successfully modified {modification.file}")
            logger.info(f"- Original line: {anchor}")
            if suggested:
                logger.info(f"- New line: {suggested}")
            else:
                logger.info("- Line removed")

            return ApplyResult(
                modification=modification,
                status=ApplyStatus.APPLIED,
                backup_path=backup_path
            )

        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.error(f"Failed to modify {modification.file}: {e}")
            return ApplyResult(
                modification=modification,
                status=ApplyStatus.FAILED,
                backup_path=backup_path,
                error=str(e) or e.__class__.__name__
            )
