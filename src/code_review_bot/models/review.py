"""
Review Data Models

Validated forms of the two JSON schemas returned by the analysis service:
code reviews (with proposed modifications) and change documentation.
"""

import logging
from enum import Enum
from typing import Any, List, Optional, Type
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)


class Priority(str, Enum):
    """Priority of a proposed modification"""
    HIGH = "high"
    MEDIUM = "medium"


class APIChangeType(str, Enum):
    """Kind of API change in generated documentation"""
    NEW = "new"
    MODIFIED = "modified"
    DEPRECATED = "deprecated"


class ModificationRequest(BaseModel):
    """One model-proposed edit: replace `original` in `file` with `suggested`"""
    file: str
    original: str = ""
    suggested: str = ""
    explanation: str = ""
    priority: Priority = Priority.MEDIUM

    @field_validator('file')
    @classmethod
    def validate_file(cls, v):
        if not v or not v.strip():
            raise ValueError('file cannot be empty')
        return v.strip()

    @field_validator('original', 'suggested', 'explanation', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator('priority', mode='before')
    @classmethod
    def normalize_priority(cls, v):
        value = str(v).strip().lower() if v is not None else ""
        if value not in {p.value for p in Priority}:
            return Priority.MEDIUM
        return value


class ReviewIssue(BaseModel):
    """An issue the reviewer wants addressed"""
    description: str
    severity: str = "medium"
    recommendation: str = ""

    @field_validator('severity', mode='before')
    @classmethod
    def normalize_severity(cls, v):
        if v is None:
            return "medium"
        return str(v).strip().lower()


def valid_entries(entries: Any, model: Type[BaseModel]) -> Any:
    """
    Validate list entries one by one, dropping the ones that do not fit.

    Args:
        entries: Raw list from the analysis response
        model: Model each entry must validate against

    Returns:
        Validated entries, or `entries` unchanged when it is not a list
    """
    if entries is None:
        return []
    if not isinstance(entries, list):
        return entries

    valid = []
    for index, entry in enumerate(entries):
        try:
            valid.append(model.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {model.__name__} at index {index}: {e}")
    return valid


class ReviewResponse(BaseModel):
    """Structured code review"""
    summary: str = ""
    modifications: List[ModificationRequest] = []
    issues: List[ReviewIssue] = []
    testing: List[str] = []

    @field_validator('modifications', mode='before')
    @classmethod
    def drop_invalid_modifications(cls, v):
        return valid_entries(v, ModificationRequest)

    @field_validator('issues', mode='before')
    @classmethod
    def drop_invalid_issues(cls, v):
        return valid_entries(v, ReviewIssue)

    @field_validator('testing', mode='before')
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v

    @property
    def has_modifications(self) -> bool:
        return len(self.modifications) > 0


class TechnicalDetail(BaseModel):
    """Documented feature of a change set"""
    model_config = ConfigDict(populate_by_name=True)

    feature: str
    description: str = ""
    code_example: Optional[str] = Field(default=None, alias="codeExample")


class APIChange(BaseModel):
    """Documented API change"""
    type: APIChangeType
    description: str = ""
    impact: str = ""

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class DocumentationResponse(BaseModel):
    """Structured change documentation"""
    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    technical_details: List[TechnicalDetail] = Field(default=[], alias="technicalDetails")
    api_changes: List[APIChange] = Field(default=[], alias="apiChanges")
    recommendations: List[str] = []

    @field_validator('technical_details', 'api_changes', 'recommendations', mode='before')
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v
