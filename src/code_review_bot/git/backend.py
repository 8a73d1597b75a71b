"""
Git Backend

Thin wrapper around GitPython exposing the diff and log queries
the review pipeline needs.
"""

import logging
from typing import List, Tuple

import git
from git.exc import GitError

from ..errors import RetrievalFailure


logger = logging.getLogger(__name__)


class GitBackend:
    """
    Revision-control collaborator for a single repository.

    Provides:
    - staged and unstaged diffs of the working tree
    - diff against a named branch
    - commit log since a named branch
    """

    def __init__(self, project_dir: str):
        """
        Initialize git backend.

        Args:
            project_dir: Path inside the repository working tree

        Raises:
            RetrievalFailure: If the path is not inside a git repository
        """
        self.project_dir = project_dir
        try:
            self.repo = git.Repo(project_dir, search_parent_directories=True)
        except (GitError, OSError) as e:
            raise RetrievalFailure(f"Not a git repository: {project_dir} ({e})")

    def _diff(self, *args: str) -> str:
        """Run `git diff` with arguments, translating git errors."""
        command = ' '.join(('git diff',) + args)
        logger.debug(f"Running {command}")
        try:
            return self.repo.git.diff(*args, strip_newline_in_stdout=False)
        except GitError as e:
            logger.error(f"{command} failed: {e}")
            raise RetrievalFailure(f"Failed to get diff: {e}", command=command)

    def staged_diff(self) -> str:
        """Diff of changes staged in the index"""
        return self._diff('--cached')

    def unstaged_diff(self) -> str:
        """Diff of working tree changes not yet staged"""
        return self._diff()

    def branch_diff(self, branch: str) -> str:
        """Diff of the working tree against `branch`"""
        return self._diff(branch)

    def commit_log(self, branch: str) -> List[Tuple[str, str]]:
        """
        Commits reachable from HEAD but not from `branch`.

        Args:
            branch: Branch the current work started from

        Returns:
            List of (hexsha, message) tuples, newest first
        """
        rev = f"{branch}..HEAD"
        logger.debug(f"Reading commit log {rev}")
        try:
            return [(commit.hexsha, commit.message.strip()) for commit in self.repo.iter_commits(rev)]
        except (GitError, ValueError) as e:
            logger.error(f"git log {rev} failed: {e}")
            raise RetrievalFailure(f"Failed to get commit messages: {e}", command=f"git log {rev}")
