"""
Prompt Builder

Builds the review and documentation prompts sent to the analysis service.
Both prompts ask for a JSON object matching the schemas in models.review.
"""

import logging
from typing import Dict, List


logger = logging.getLogger(__name__)


class PromptBuilder:
    """
    Builds structured prompts for code review and change documentation.
    """

    REVIEW_SYSTEM_PROMPT = (
        "You are an experienced code reviewer focusing on code quality, security, "
        "and best practices. Provide responses in valid JSON format without markdown formatting."
    )

    DOCUMENTATION_SYSTEM_PROMPT = (
        "You are a technical documentation expert who creates clear, comprehensive "
        "documentation from code changes and commit messages."
    )

    REVIEW_SCHEMA = """{
    "summary": "Brief description of changes",
    "modifications": [
        {
            "file": "filename",
            "original": "original code snippet",
            "suggested": "improved code",
            "explanation": "why this improvement helps",
            "priority": "high|medium"
        }
    ],
    "issues": [
        {
            "description": "issue description",
            "severity": "high|medium",
            "recommendation": "how to fix"
        }
    ],
    "testing": ["key test scenarios"]
}"""

    DOCUMENTATION_SCHEMA = """{
    "summary": "Overview of changes",
    "technicalDetails": [
        {
            "feature": "feature name",
            "description": "detailed explanation",
            "codeExample": "example code if applicable"
        }
    ],
    "apiChanges": [
        {
            "type": "new|modified|deprecated",
            "description": "description of the change",
            "impact": "impact on existing code"
        }
    ],
    "recommendations": [
        "usage recommendations or migration notes"
    ]
}"""

    def build_review_prompt(self, diff_content: str) -> str:
        """
        Build the user prompt for a code review.

        Args:
            diff_content: Filtered unified diff text

        Returns:
            Prompt text
        """
        sections = [
            "As a code reviewer, analyze the following code changes and provide:",
            "1. A summary of the changes",
            "2. Code improvements with specific suggestions",
            "3. Important issues that need addressing",
            "",
            "For any code that needs improvement, provide:",
            "- The exact code snippet that needs changing, copied verbatim from the file",
            "- The improved version of the code",
            "- A brief explanation of why the change helps",
            "",
            "Focus only on significant improvements that matter for correctness, "
            "performance, security and maintainability.",
            "Skip minor style issues or subjective preferences.",
            "",
            "Here are the code changes (in diff format):",
            "",
            diff_content,
            "",
            "Please format your response as JSON with the following structure:",
            self.REVIEW_SCHEMA,
        ]
        return '\n'.join(sections)

    def build_documentation_prompt(self, diff_content: str, commit_messages: str) -> str:
        """
        Build the user prompt for change documentation.

        Args:
            diff_content: Unified diff text
            commit_messages: One commit per line

        Returns:
            Prompt text
        """
        sections = [
            "As a technical documentation writer, analyze the following code changes "
            "and commit messages to create comprehensive documentation:",
            "",
            "1. Provide a high-level summary of the changes",
            "2. Document the technical implementation details",
            "3. List any important API changes or new features",
            "4. Include relevant code examples",
            "",
            "Changes:",
            diff_content,
            "",
            "Commit Messages:",
            commit_messages or "(no commits)",
            "",
            "Please format your response as JSON with the following structure:",
            self.DOCUMENTATION_SCHEMA,
        ]
        return '\n'.join(sections)

    def build_messages(self, system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
        """Chat messages for a system + user exchange"""
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
