"""
Markdown Report Formatter

Renders reviews and change documentation as markdown reports
and saves them to disk.
"""

import logging
from pathlib import Path
from typing import List

from ..errors import ReportWriteError
from ..models.patch import ApplySummary
from ..models.review import ReviewResponse, DocumentationResponse


logger = logging.getLogger(__name__)


LANGUAGE_BY_EXTENSION = {
    'py': 'python', 'js': 'javascript', 'jsx': 'javascript', 'mjs': 'javascript',
    'ts': 'typescript', 'tsx': 'typescript', 'java': 'java', 'go': 'go',
    'rs': 'rust', 'rb': 'ruby', 'php': 'php', 'cs': 'csharp', 'cpp': 'cpp',
    'c': 'c', 'h': 'c', 'kt': 'kotlin', 'swift': 'swift', 'sh': 'bash',
    'sql': 'sql', 'yaml': 'yaml', 'yml': 'yaml', 'json': 'json', 'html': 'html',
    'css': 'css',
}


def code_language(file_path: str) -> str:
    """Code fence language for a file, empty when unknown."""
    if '.' not in file_path:
        return ''
    return LANGUAGE_BY_EXTENSION.get(file_path.rsplit('.', 1)[-1].lower(), '')


class MarkdownFormatter:
    """
    Formats review and documentation results as markdown.
    """

    def __init__(self, example_language: str = ""):
        """
        Initialize markdown formatter.

        Args:
            example_language: Fence language for documentation code examples
        """
        self.example_language = example_language

    def format_review(self, review: ReviewResponse) -> str:
        """
        Render a review report.

        Args:
            review: Validated review response

        Returns:
            Markdown text
        """
        sections: List[str] = [f"# Code Review Summary\n\n{review.summary}\n\n"]

        if review.modifications:
            sections.append("# Suggested Code Modifications\n\n")
            for mod in review.modifications:
                sections.append(f"## {mod.file} ({mod.priority.value})\n\n")
                sections.append(f"```{code_language(mod.file)}\n")
                sections.append(f"Current Code:\n{mod.original}\n\n")
                sections.append(f"Suggested Improvement:\n{mod.suggested}\n")
                sections.append("```\n\n")
                sections.append(f"**Why:** {mod.explanation}\n\n")

        if review.issues:
            sections.append("# Issues to Address\n\n")
            for issue in review.issues:
                sections.append(f"## {issue.severity.upper()} Priority\n")
                sections.append(f"**Issue:** {issue.description}\n")
                sections.append(f"**Recommendation:** {issue.recommendation}\n\n")

        if review.testing:
            sections.append("# Testing Recommendations\n\n")
            for test in review.testing:
                sections.append(f"- {test}\n")

        return ''.join(sections)

    def format_apply_summary(self, summary: ApplySummary) -> str:
        """Render the outcome of applying modifications"""
        lines = [
            "# Applied Modifications\n",
            f"Applied: {summary.applied}, no-op: {summary.no_op}, failed: {summary.failed}\n",
        ]
        for result in summary.results:
            line = f"- `{result.file_path}`: {result.status.value}"
            if result.error:
                line += f" ({result.error})"
            if result.backup_path:
                line += f", backup at `{result.backup_path}`"
            lines.append(line)
        return '\n'.join(lines) + '\n'

    def format_documentation(self, documentation: DocumentationResponse) -> str:
        """
        Render change documentation.

        Args:
            documentation: Validated documentation response

        Returns:
            Markdown text
        """
        sections: List[str] = [f"# Change Documentation\n\n## Overview\n\n{documentation.summary}\n\n"]

        if documentation.technical_details:
            sections.append("## Technical Details\n\n")
            for detail in documentation.technical_details:
                sections.append(f"### {detail.feature}\n\n{detail.description}\n\n")
                if detail.code_example:
                    sections.append(f"```{self.example_language}\n{detail.code_example}\n```\n\n")

        if documentation.api_changes:
            sections.append("## API Changes\n\n")
            for change in documentation.api_changes:
                sections.append(f"### {change.type.value.upper()}\n")
                sections.append(f"{change.description}\n\n")
                sections.append(f"**Impact:** {change.impact}\n\n")

        if documentation.recommendations:
            sections.append("## Recommendations\n\n")
            for recommendation in documentation.recommendations:
                sections.append(f"- {recommendation}\n")

        return ''.join(sections)

    def save(self, content: str, output_path: str) -> str:
        """
        Write a report.

        Returns:
            Path written

        Raises:
            ReportWriteError: If the file cannot be written
        """
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise ReportWriteError(f"Failed to save report: {e}")

        logger.info(f"Report saved to {path}")
        return str(path)
