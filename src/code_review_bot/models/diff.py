"""
Diff Data Models

Line-level view of a unified diff taken from the working tree
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class DiffLineKind(Enum):
    """Classification of a retained unified diff line"""
    HEADER = "header"        # diff --git a/X b/Y
    METADATA = "metadata"    # index, ---, +++
    HUNK = "hunk"            # @@ -a,b +c,d @@
    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"


CONTENT_KINDS = {DiffLineKind.CONTEXT, DiffLineKind.ADDITION, DiffLineKind.DELETION}


@dataclass
class DiffLine:
    """A single line of a unified diff"""
    kind: DiffLineKind
    text: str
    file_path: str

    @property
    def content(self) -> str:
        """Line text without its diff marker"""
        if self.kind in CONTENT_KINDS:
            return self.text[1:]
        return self.text


@dataclass
class FileDiff:
    """All diff lines belonging to one `diff --git` section"""
    file_path: str
    lines: List[DiffLine] = field(default_factory=list)

    def __post_init__(self):
        """Validate fields"""
        if not self.file_path:
            raise ValueError("file_path cannot be empty")

    @property
    def added_lines(self) -> List[str]:
        return [line.content for line in self.lines if line.kind == DiffLineKind.ADDITION]

    @property
    def removed_lines(self) -> List[str]:
        return [line.content for line in self.lines if line.kind == DiffLineKind.DELETION]

    @property
    def additions(self) -> int:
        return len(self.added_lines)

    @property
    def deletions(self) -> int:
        return len(self.removed_lines)

    def to_text(self) -> str:
        """Reassemble the section as diff text"""
        return '\n'.join(line.text for line in self.lines)
