"""
Unit tests for diff extraction and filtering.
"""

import pytest
from unittest.mock import Mock

from code_review_bot.errors import RetrievalFailure
from code_review_bot.git.extractor import (
    DiffExtractor,
    classify_line,
    filter_diff,
    header_file_path,
    parse_file_diffs,
    summarize_changes,
)
from code_review_bot.models.diff import DiffLineKind


STAGED_DIFF = """diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,4 @@
 import os
+import sys

 def main():
"""

UNSTAGED_DIFF = """diff --git a/README.md b/README.md
index 1111111..2222222 100644
--- a/README.md
+++ b/README.md
@@ -1,2 +1,2 @@
-Old title
+New title
 body
"""


def make_backend(staged="", unstaged="", branch=""):
    backend = Mock()
    backend.staged_diff.return_value = staged
    backend.unstaged_diff.return_value = unstaged
    backend.branch_diff.return_value = branch
    backend.commit_log.return_value = []
    return backend


class TestClassifyLine:
    """Unit tests for line classification."""

    def test_header_always_kept(self):
        assert classify_line("diff --git a/x b/x", in_file=False) == DiffLineKind.HEADER
        assert classify_line("diff --git a/x b/x", in_file=True) == DiffLineKind.HEADER

    def test_metadata_only_inside_file(self):
        for line in ("index 123..456", "--- a/x", "+++ b/x"):
            assert classify_line(line, in_file=True) == DiffLineKind.METADATA
            assert classify_line(line, in_file=False) is None

    def test_hunk_only_inside_file(self):
        assert classify_line("@@ -1 +1 @@", in_file=True) == DiffLineKind.HUNK
        assert classify_line("@@ -1 +1 @@", in_file=False) is None

    def test_content_markers(self):
        assert classify_line(" ctx", in_file=True) == DiffLineKind.CONTEXT
        assert classify_line("+add", in_file=True) == DiffLineKind.ADDITION
        assert classify_line("-del", in_file=True) == DiffLineKind.DELETION

    def test_stray_lines_dropped(self):
        assert classify_line("\\ No newline at end of file", in_file=True) is None
        assert classify_line("new file mode 100644", in_file=True) is None
        assert classify_line("", in_file=True) is None
        assert classify_line("+add", in_file=False) is None

    def test_header_file_path(self):
        assert header_file_path("diff --git a/src/a.py b/src/a.py") == "src/a.py"
        assert header_file_path("diff --git a/old.py b/new.py") == "new.py"


class TestParseFileDiffs:
    """Unit tests for grouping lines into FileDiffs."""

    def test_groups_by_header(self):
        file_diffs = parse_file_diffs(STAGED_DIFF + UNSTAGED_DIFF)

        assert [f.file_path for f in file_diffs] == ["src/app.py", "README.md"]
        assert file_diffs[0].added_lines == ["import sys"]
        assert file_diffs[1].added_lines == ["New title"]
        assert file_diffs[1].removed_lines == ["Old title"]

    def test_lines_before_first_header_discarded(self):
        text = "garbage\n+not in a file\n" + STAGED_DIFF
        file_diffs = parse_file_diffs(text)

        assert len(file_diffs) == 1
        assert file_diffs[0].lines[0].text.startswith("diff --git")

    def test_lines_owned_by_their_section(self):
        file_diffs = parse_file_diffs(STAGED_DIFF + UNSTAGED_DIFF)
        for file_diff in file_diffs:
            assert all(line.file_path == file_diff.file_path for line in file_diff.lines)
            assert sum(1 for line in file_diff.lines if line.kind == DiffLineKind.HEADER) == 1

    def test_filter_drops_stray_lines(self):
        text = STAGED_DIFF.replace(" import os\n", " import os\nstray text\n")
        assert "stray text" not in filter_diff(text)
        assert "+import sys" in filter_diff(text)

    def test_summary(self):
        summary = summarize_changes(parse_file_diffs(UNSTAGED_DIFF))
        assert summary == ["File: README.md", "Removed: Old title", "Added: New title"]


class TestDiffExtractor:
    """Unit tests for DiffExtractor."""

    @pytest.mark.asyncio
    async def test_staged_then_unstaged(self):
        backend = make_backend(staged=STAGED_DIFF, unstaged=UNSTAGED_DIFF)
        diff = await DiffExtractor(backend).get_diff("main")

        assert diff.index("src/app.py") < diff.index("README.md")
        assert "+New title" in diff
        backend.branch_diff.assert_not_called()

    @pytest.mark.asyncio
    async def test_staged_without_trailing_newline(self):
        backend = make_backend(staged=STAGED_DIFF.rstrip("\n"), unstaged=UNSTAGED_DIFF)
        diff = await DiffExtractor(backend).get_diff("main")

        assert "diff --git a/README.md b/README.md" in diff.split("\n")

    @pytest.mark.asyncio
    async def test_falls_back_to_branch_diff(self):
        backend = make_backend(staged="  \n", unstaged="", branch=UNSTAGED_DIFF)
        diff = await DiffExtractor(backend).get_diff("develop")

        backend.branch_diff.assert_called_once_with("develop")
        assert diff == UNSTAGED_DIFF

    @pytest.mark.asyncio
    async def test_no_changes_anywhere(self):
        backend = make_backend(staged="", unstaged="\n", branch=" \n")
        assert await DiffExtractor(backend).get_diff("main") is None

    @pytest.mark.asyncio
    async def test_retrieval_failure_propagates(self):
        backend = make_backend()
        backend.staged_diff.side_effect = RetrievalFailure("fatal: bad revision")

        with pytest.raises(RetrievalFailure, match="bad revision"):
            await DiffExtractor(backend).get_diff("main")

    @pytest.mark.asyncio
    async def test_commit_messages(self):
        backend = make_backend()
        backend.commit_log.return_value = [
            ("a1b2c3d4e5f6", "Add feature"),
            ("0f9e8d7c6b5a", "Fix bug"),
        ]

        messages = await DiffExtractor(backend).get_commit_messages("main")

        assert messages == "a1b2c3d: Add feature\n0f9e8d7: Fix bug"
        backend.commit_log.assert_called_once_with("main")
