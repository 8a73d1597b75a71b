"""
Unit tests for patch application.
"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from code_review_bot.models.patch import ApplyStatus
from code_review_bot.models.review import ModificationRequest
from code_review_bot.patch.applier import (
    PatchApplier,
    apply_edit,
    normalize_snippet,
    normalize_suggestion,
    remove_anchor_lines,
    replace_anchor_lines,
)


def mod(file, original, suggested="", priority="medium"):
    return ModificationRequest(
        file=file,
        original=original,
        suggested=suggested,
        explanation="test",
        priority=priority,
    )


class TestEditFunctions:
    """Unit tests for the pure edit functions."""

    def test_normalize_snippet(self):
        assert normalize_snippet("  +foo();\r\n") == "foo();"
        assert normalize_snippet("++x") == "+x"
        assert normalize_snippet("a\r\nb") == "a\nb"

    def test_normalize_suggestion(self):
        assert normalize_suggestion(None) == ""
        assert normalize_suggestion("  bar();\r\n") == "bar();"

    def test_deletion_removes_anchor_and_trailing_text(self):
        content = "foo();\nbar(); // keep\nfoo(); // extra"
        assert remove_anchor_lines(content, "foo();") == "bar(); // keep"

    def test_deletion_keeps_text_before_anchor(self):
        content = "x = 1  # remove me\ny = 2"
        assert remove_anchor_lines(content, "# remove me") == "x = 1\ny = 2"

    def test_deletion_leaves_other_lines(self):
        content = "a\n\nfoo()\n  \nb"
        assert remove_anchor_lines(content, "foo()") == "a\n\n  \nb"

    def test_replacement_rewrites_every_matching_line(self):
        content = "log(a); // one\nkeep();\n    log(a); // two"
        result = replace_anchor_lines(content, "log(a);", "debug(a);")
        assert result == "debug(a);\nkeep();\n    debug(a);"

    def test_replacement_escapes_regex_characters(self):
        content = "value = items[0] * (a + b)\nother"
        result = replace_anchor_lines(content, "items[0] * (a + b)", "first_sum")
        assert result == "value = first_sum\nother"

    def test_replacement_inserted_literally(self):
        content = "path = 'a'"
        result = replace_anchor_lines(content, "'a'", r"'C:\new\1' $&")
        assert result == r"path = 'C:\new\1' $&"

    def test_apply_edit_dispatch(self):
        assert apply_edit("a\nb", "a", "") == "b"
        assert apply_edit("a\nb", "a", "c") == "c\nb"

    def test_anchor_not_found_unchanged(self):
        content = "alpha\nbeta"
        assert apply_edit(content, "gamma", "") == content
        assert apply_edit(content, "gamma", "delta") == content


class TestPatchApplier:
    """Unit tests for PatchApplier with files on disk."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.applier = PatchApplier(self.temp_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write(self, name, content):
        path = Path(self.temp_dir, name)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        return path

    def read(self, name):
        with open(Path(self.temp_dir, name), "r", encoding="utf-8", newline="") as f:
            return f.read()

    def test_replacement_applied(self):
        self.write("app.js", "const a = 1;\nvar b = 2;\n")

        result = self.applier.apply_one(mod("app.js", "var b = 2;", "const b = 2;"))

        assert result.status == ApplyStatus.APPLIED
        assert self.read("app.js") == "const a = 1;\nconst b = 2;\n"
        assert result.backup_path == str(Path(self.temp_dir, "app.js").resolve()) + ".backup"
        assert self.read("app.js.backup") == "const a = 1;\nvar b = 2;\n"

    def test_deletion_applied(self):
        self.write("app.py", "import os\nimport sys\nprint(1)\n")

        result = self.applier.apply_one(mod("app.py", "+import sys", ""))

        assert result.status == ApplyStatus.APPLIED
        assert self.read("app.py") == "import os\nprint(1)\n"

    def test_no_op_does_not_write(self):
        path = self.write("app.py", "print('hello')\n")
        os.utime(path, (1_000_000, 1_000_000))

        result = self.applier.apply_one(mod("app.py", "print('bye')", "print('ciao')"))

        assert result.status == ApplyStatus.NO_OP
        assert result.error is None
        assert self.read("app.py") == "print('hello')\n"
        assert os.stat(path).st_mtime == 1_000_000
        assert self.read("app.py.backup") == "print('hello')\n"

    def test_crlf_content_normalized(self):
        self.write("win.txt", "one\r\ntwo\r\n")

        result = self.applier.apply_one(mod("win.txt", "two\r\n", "three"))

        assert result.status == ApplyStatus.APPLIED
        assert self.read("win.txt") == "one\nthree\n"
        assert self.read("win.txt.backup") == "one\r\ntwo\r\n"

    def test_missing_file_fails_without_backup(self):
        result = self.applier.apply_one(mod("missing.py", "x", "y"))

        assert result.status == ApplyStatus.FAILED
        assert result.backup_path is None
        assert result.error

    def test_path_outside_root_fails(self):
        result = self.applier.apply_one(mod("../outside.py", "x", "y"))

        assert result.status == ApplyStatus.FAILED
        assert "escapes project root" in result.error

    def test_empty_anchor_fails_after_backup(self):
        self.write("a.py", "x = 1\n")

        result = self.applier.apply_one(mod("a.py", "  +  ", "y = 2"))

        assert result.status == ApplyStatus.FAILED
        assert result.backup_path is not None
        assert self.read("a.py") == "x = 1\n"

    def test_custom_backup_suffix(self):
        self.write("a.py", "x = 1\n")

        result = self.applier.apply_one(mod("a.py", "x = 1", "x = 2"), backup_suffix=".orig")

        assert result.backup_path.endswith("a.py.orig")
        assert self.read("a.py.orig") == "x = 1\n"

    def test_write_that_does_not_take_effect_fails(self):
        self.write("a.py", "x = 1\n")

        with patch("code_review_bot.patch.applier.write_text") as mock_write:
            def write_backup_only(path, content):
                if str(path).endswith(".backup"):
                    with open(path, "w", encoding="utf-8", newline="") as f:
                        f.write(content)
            mock_write.side_effect = write_backup_only

            result = self.applier.apply_one(mod("a.py", "x = 1", "x = 2"))

        assert result.status == ApplyStatus.FAILED
        assert "unchanged after writing" in result.error
        assert result.backup_path is not None

    def test_permission_error_reported(self):
        self.write("a.py", "x = 1\n")

        with patch("code_review_bot.patch.applier.read_text", side_effect=PermissionError("denied")):
            result = self.applier.apply_one(mod("a.py", "x = 1", "x = 2"))

        assert result.status == ApplyStatus.FAILED
        assert result.error == "denied"

    @pytest.mark.asyncio
    async def test_batch_continues_after_failure(self):
        self.write("ok.py", "a = 1\n")

        summary = await self.applier.apply([
            mod("missing.py", "a = 1", "a = 2"),
            mod("ok.py", "a = 1", "a = 2"),
            mod("ok.py", "nothing here", "b"),
        ])

        assert [r.status for r in summary.results] == [
            ApplyStatus.FAILED,
            ApplyStatus.APPLIED,
            ApplyStatus.NO_OP,
        ]
        assert (summary.applied, summary.no_op, summary.failed) == (1, 1, 1)
        assert self.read("ok.py") == "a = 2\n"

    @pytest.mark.asyncio
    async def test_sequential_edits_to_same_file(self):
        self.write("ok.py", "a = 1\nb = 1\n")

        summary = await self.applier.apply([
            mod("ok.py", "a = 1", "a = 2"),
            mod("ok.py", "b = 1", "b = 2"),
        ])

        assert summary.applied == 2
        assert self.read("ok.py") == "a = 2\nb = 2\n"
        # Second backup holds the content after the first edit
        assert self.read("ok.py.backup") == "a = 2\nb = 1\n"
