"""
Command Line Interface

Reviews the pending changes of the repository in the current directory.

    code-review-bot --branch=main --output=review.md --apply --generate-docs
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from .api import ReviewOrchestrator, ReviewRequest, confirm_from_answer
from .config import AppConfig, ConfigManager
from .errors import CodeReviewBotError


logger = logging.getLogger(__name__)


def ask_for_confirmation(question: str) -> bool:
    """Prompt on stdin; anything but 'n' confirms."""
    try:
        answer = input(question)
    except EOFError:
        return False
    return confirm_from_answer(answer)


def build_parser(config: Optional[AppConfig] = None) -> argparse.ArgumentParser:
    defaults = config or AppConfig()
    parser = argparse.ArgumentParser(
        prog="code-review-bot",
        description="Review pending git changes with a language model",
    )
    parser.add_argument("--branch", default=defaults.git.default_branch,
                        help="base branch used when nothing is staged or modified")
    parser.add_argument("--output", default=defaults.review.output_path,
                        help="path of the markdown review report")
    parser.add_argument("--apply", action="store_true",
                        help="offer to apply the suggested modifications")
    parser.add_argument("--generate-docs", action="store_true",
                        help="write CHANGES.md documenting the changes")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--project-dir", default=None,
                        help="repository to review (default: current directory)")
    return parser


def load_config(config_path: Optional[str]) -> AppConfig:
    if config_path:
        return AppConfig.from_yaml(config_path)
    return AppConfig.from_env()


async def run(args: argparse.Namespace, config: AppConfig) -> int:
    project_dir = args.project_dir or os.getcwd()
    orchestrator = ReviewOrchestrator(project_dir, config)

    request = ReviewRequest(
        branch=args.branch,
        output_path=args.output,
        apply_changes=args.apply,
        generate_docs=args.generate_docs,
        backup_suffix=config.review.backup_suffix,
    )
    try:
        outcome = await orchestrator.review(request, confirm=ask_for_confirmation)
    finally:
        orchestrator.close()

    if outcome.status == "no_changes":
        logger.error("No changes found to review")
        return 1

    print(f"Review saved to {outcome.report_path}")

    if outcome.apply_summary is not None:
        print(orchestrator.formatter.format_apply_summary(outcome.apply_summary))
    elif outcome.modifications_skipped:
        print("Modifications skipped.")

    if outcome.documentation and outcome.documentation.output_path:
        print(f"Documentation saved to {outcome.documentation.output_path}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        ConfigManager(config)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Explicit flags win over configured defaults
    parser = build_parser(config)
    args = parser.parse_args(argv)

    try:
        return asyncio.run(run(args, config))
    except CodeReviewBotError as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
