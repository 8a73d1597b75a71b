"""
Change Analyzer

Sends diffs to the analysis service and turns the JSON answers into
validated review and documentation models.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import AnalysisParseFailure
from ..models.review import ReviewResponse, DocumentationResponse
from .client import AnalysisClient
from .prompts import PromptBuilder


logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


def parse_json_response(content: str) -> Dict[str, Any]:
    """
    Decode a JSON-object response.

    Raises:
        AnalysisParseFailure: If the content is not a JSON object
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise AnalysisParseFailure(f"Invalid JSON response from analysis service: {e}", content=content)

    if not isinstance(data, dict):
        raise AnalysisParseFailure(
            f"Expected a JSON object from analysis service, got {type(data).__name__}",
            content=content
        )
    return data


def validate_response(content: str, model: Type[ModelT]) -> ModelT:
    """Decode `content` and validate it against `model`."""
    data = parse_json_response(content)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise AnalysisParseFailure(
            f"Analysis response does not match the {model.__name__} schema: {e}",
            content=content
        )


class ChangeAnalyzer:
    """
    Generates reviews and documentation for a change set.
    """

    def __init__(self, client: AnalysisClient, prompt_builder: PromptBuilder = None):
        """
        Initialize change analyzer.

        Args:
            client: Analysis service client
            prompt_builder: Prompt builder (default PromptBuilder())
        """
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def generate_review(self, diff_content: str) -> ReviewResponse:
        """
        Generate a code review for a diff.

        Raises:
            AnalysisCallFailure: If the service call fails
            AnalysisParseFailure: If the answer is not a valid review
        """
        messages = self.prompt_builder.build_messages(
            PromptBuilder.REVIEW_SYSTEM_PROMPT,
            self.prompt_builder.build_review_prompt(diff_content),
        )
        content = await asyncio.to_thread(self.client.complete, messages)
        review = validate_response(content, ReviewResponse)

        logger.info(
            f"Review received: {len(review.modifications)} modifications, "
            f"{len(review.issues)} issues"
        )
        return review

    async def generate_documentation(self, diff_content: str, commit_messages: str) -> DocumentationResponse:
        """
        Generate change documentation for a diff and its commits.

        Raises:
            AnalysisCallFailure: If the service call fails
            AnalysisParseFailure: If the answer is not valid documentation
        """
        messages = self.prompt_builder.build_messages(
            PromptBuilder.DOCUMENTATION_SYSTEM_PROMPT,
            self.prompt_builder.build_documentation_prompt(diff_content, commit_messages),
        )
        content = await asyncio.to_thread(self.client.complete, messages)
        documentation = validate_response(content, DocumentationResponse)

        logger.info(f"Documentation received: {len(documentation.technical_details)} technical details")
        return documentation
