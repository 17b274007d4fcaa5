"""Sanitising and validation of untrusted LLM responses.

Every parser here returns an empty or neutral value on malformed input;
none of them raises.
"""

import json
import re
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from logger import get_logger

logger = get_logger()

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)


class CategorizationItem(BaseModel):
    """One transaction classification returned by the model."""

    id: str
    category: Optional[str] = None
    nature: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, (int, float)) else value


class SummaryNumbers(BaseModel):
    total_income: float = 0.0
    total_expense: float = 0.0
    balance: float = 0.0


class SummaryCategory(BaseModel):
    category: str
    amount: float = 0.0
    percent_of_expenses: float = 0.0


class AssistantSummary(BaseModel):
    """Monthly summary written by the model, including its commentary."""

    period_label: str = ""
    numbers: SummaryNumbers = Field(default_factory=SummaryNumbers)
    categories: List[SummaryCategory] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    summary_text: str = ""


def strip_json_fences(text: Optional[str]) -> str:
    """Remove markdown code fences around a JSON answer."""
    if not text:
        return ""
    match = _FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text.replace("```json", "").replace("```", "").strip()


def parse_json(text: Optional[str]) -> Optional[Any]:
    """Parse a possibly fenced JSON answer, returning None when it is not JSON."""
    cleaned = strip_json_fences(text)
    if not cleaned:
        return None
    try:
        return json.loads(cleaned)
    except ValueError as e:
        logger.error(f"Failed to parse LLM response as JSON: {e}")
        return None


def parse_categorizations(text: Optional[str]) -> List[CategorizationItem]:
    """Parse a CATEGORIZE_TRANSACTIONS answer.

    Items that do not validate are skipped; anything other than a JSON
    array yields an empty list.
    """
    data = parse_json(text)
    if not isinstance(data, list):
        if data is not None:
            logger.error("Categorization response is not a JSON array")
        return []

    items = []
    for raw in data:
        try:
            items.append(CategorizationItem.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping invalid categorization item: {e}")
    return items


def parse_summary(text: Optional[str]) -> Optional[AssistantSummary]:
    """Parse a SUMMARY_MONTH answer, or None if it is malformed."""
    data = parse_json(text)
    if not isinstance(data, dict):
        return None
    try:
        return AssistantSummary.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid summary response: {e}")
        return None
