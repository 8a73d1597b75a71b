"""
Review Orchestrator

Main interface that drives the review process from diff extraction
through analysis, report writing and confirmed patch application.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional

from .config import AppConfig
from .git.backend import GitBackend
from .git.extractor import DiffExtractor
from .llm.analyzer import ChangeAnalyzer
from .llm.client import AnalysisClient
from .formatting.markdown import MarkdownFormatter
from .models.patch import ApplySummary
from .models.review import ReviewResponse, DocumentationResponse
from .patch.applier import PatchApplier


logger = logging.getLogger(__name__)

CONFIRM_QUESTION = "\nDo you want to apply these modifications? (Y/n) "

ConfirmFn = Callable[[str], bool]


def confirm_from_answer(answer: str) -> bool:
    """An answer confirms unless it is an explicit 'n'."""
    return answer.strip().lower() != 'n'


def decline(question: str) -> bool:
    return False


@dataclass
class ReviewRequest:
    """Request for a review of pending changes."""
    branch: str = "main"
    output_path: str = "review.md"
    apply_changes: bool = False
    generate_docs: bool = False
    backup_suffix: str = ".backup"


@dataclass
class DocumentationOutcome:
    """Result of documentation generation."""
    status: str  # 'completed', 'no_changes'
    documentation: Optional[DocumentationResponse] = None
    output_path: Optional[str] = None


@dataclass
class ReviewOutcome:
    """Result of a review run."""
    status: str  # 'completed', 'no_changes'
    review: Optional[ReviewResponse] = None
    report_path: Optional[str] = None
    apply_summary: Optional[ApplySummary] = None
    modifications_skipped: bool = False
    documentation: Optional[DocumentationOutcome] = None
    processing_time: float = 0.0
    metadata: Dict = field(default_factory=dict)

    def __post_init__(self):
        """Validate fields"""
        valid_statuses = {'completed', 'no_changes'}
        if self.status not in valid_statuses:
            raise ValueError(f"Invalid status: {self.status}")


class ReviewOrchestrator:
    """
    Orchestrates the review process:
    1. Extract the filtered diff of pending changes
    2. Ask the analysis service for a structured review
    3. Save the markdown report
    4. Apply proposed modifications, only after confirmation
    5. Optionally document the changes in CHANGES.md
    """

    def __init__(
        self,
        project_dir: str,
        config: AppConfig,
        extractor: Optional[DiffExtractor] = None,
        analyzer: Optional[ChangeAnalyzer] = None,
        applier: Optional[PatchApplier] = None,
        formatter: Optional[MarkdownFormatter] = None,
    ):
        """
        Initialize review orchestrator.

        Args:
            project_dir: Root of the project under review
            config: Application configuration
            extractor: Diff extractor (default: git backend on project_dir)
            analyzer: Change analyzer (default: analysis client from config)
            applier: Patch applier (default: rooted at project_dir)
            formatter: Markdown formatter
        """
        self.project_dir = str(Path(project_dir).resolve())
        self.config = config

        logger.info("Initializing review orchestrator components...")
        self.extractor = extractor or DiffExtractor(GitBackend(self.project_dir))
        self._client: Optional[AnalysisClient] = None
        if analyzer is None:
            self._client = AnalysisClient(config.llm)
            analyzer = ChangeAnalyzer(self._client)
        self.analyzer = analyzer
        self.applier = applier or PatchApplier(self.project_dir)
        self.formatter = formatter or MarkdownFormatter()

    def close(self) -> None:
        """Close the analysis client created by this orchestrator."""
        if self._client is not None:
            self._client.close()

    def _project_path(self, path: str) -> str:
        """Resolve a relative output path against the project root."""
        return str(Path(self.project_dir, path))

    async def review(self, request: ReviewRequest, confirm: ConfirmFn = decline) -> ReviewOutcome:
        """
        Review pending changes.

        Args:
            request: Review options
            confirm: Asked before any file is modified

        Returns:
            ReviewOutcome

        Raises:
            RetrievalFailure: If the diff cannot be read
            AnalysisCallFailure: If the analysis call fails
            AnalysisParseFailure: If the analysis answer is unusable
        """
        start_time = datetime.now()
        logger.info(f"Starting review against {request.branch}")

        diff_content = await self.extractor.get_diff(request.branch)
        if not diff_content:
            logger.info("No changes found to review")
            return ReviewOutcome(status="no_changes")

        review = await self.analyzer.generate_review(diff_content)

        report_path = self.formatter.save(
            self.formatter.format_review(review),
            self._project_path(request.output_path)
        )

        outcome = ReviewOutcome(status="completed", review=review, report_path=report_path)

        if request.apply_changes:
            if review.has_modifications:
                outcome.apply_summary = await self._apply_confirmed(review, request, confirm)
                outcome.modifications_skipped = outcome.apply_summary is None
            else:
                logger.info("No modifications suggested in the review")

        if request.generate_docs:
            outcome.documentation = await self.document(request.branch, diff_content)

        outcome.processing_time = (datetime.now() - start_time).total_seconds()
        outcome.metadata = self._create_metadata(diff_content, review, outcome.apply_summary)

        logger.info(f"Review completed ({outcome.processing_time:.2f}s)")
        return outcome

    async def _apply_confirmed(
        self,
        review: ReviewResponse,
        request: ReviewRequest,
        confirm: ConfirmFn
    ) -> Optional[ApplySummary]:
        """Show proposed modifications and apply them if confirmed."""
        logger.info("Found suggested modifications:")
        for index, mod in enumerate(review.modifications, start=1):
            logger.info(f"{index}. {mod.file} ({mod.priority.value})")
            logger.info(f"Original: {mod.original}")
            logger.info(f"Suggested: {mod.suggested}")

        if not confirm(CONFIRM_QUESTION):
            logger.info("Modifications skipped")
            return None

        summary = await self.applier.apply(review.modifications, backup_suffix=request.backup_suffix)
        for result in summary.results:
            if result.error:
                logger.error(f"{result.file_path}: {result.error}")
        return summary

    async def document(self, branch: str = "main", diff_content: Optional[str] = None) -> DocumentationOutcome:
        """
        Generate CHANGES.md from commit messages and the diff.

        Args:
            branch: Base branch for the commit log
            diff_content: Diff to document; extracted when not given

        Returns:
            DocumentationOutcome
        """
        if diff_content is None:
            diff_content = await self.extractor.get_diff(branch)
        if not diff_content:
            logger.info("No changes found to document")
            return DocumentationOutcome(status="no_changes")

        commit_messages = await self.extractor.get_commit_messages(branch)
        documentation = await self.analyzer.generate_documentation(diff_content, commit_messages)

        output_path = self.formatter.save(
            self.formatter.format_documentation(documentation),
            self._project_path(self.config.review.docs_path)
        )
        logger.info(f"Documentation saved to {output_path}")

        return DocumentationOutcome(status="completed", documentation=documentation, output_path=output_path)

    def _create_metadata(
        self,
        diff_content: str,
        review: ReviewResponse,
        apply_summary: Optional[ApplySummary]
    ) -> Dict:
        """Create metadata for the review outcome."""
        metadata = {
            'diff_stats': {
                'files_changed': diff_content.count('diff --git'),
                'diff_lines': len(diff_content.split('\n')),
            },
            'review_stats': {
                'modifications': len(review.modifications),
                'issues': len(review.issues),
                'testing': len(review.testing),
            },
            'model': self.config.llm.model,
        }
        if apply_summary is not None:
            metadata['apply_stats'] = {
                'applied': apply_summary.applied,
                'no_op': apply_summary.no_op,
                'failed': apply_summary.failed,
            }
        return metadata
