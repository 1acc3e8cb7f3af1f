"""Survey definition access helpers.

Coerces caller-supplied question collections into ``Question`` models and
provides id/index lookups. A missing or non-list question collection is the
one input the engine refuses outright: it raises ``SurveyDefinitionError``.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence
import logging

from pydantic import ValidationError as PydanticValidationError

from survey_flow.models.survey import Question, QuestionGroup


logger = logging.getLogger(__name__)


class SurveyDefinitionError(ValueError):
    """Raised when the engine is handed a survey it cannot navigate."""

    def __init__(self, message: str, code: str = "SURVEY_DEFINITION_INVALID") -> None:
        super().__init__(message)
        self.code = code


def ensure_questions(questions: Any) -> List[Question]:
    """Return ``questions`` as a list of ``Question`` models.

    Accepts a list/tuple of ``Question`` instances or of their JSON dicts.
    Raises SurveyDefinitionError for None, non-sequences, or entries that do
    not validate.
    """
    if questions is None:
        raise SurveyDefinitionError("question collection is missing", code="SURVEY_QUESTIONS_MISSING")
    if not isinstance(questions, (list, tuple)):
        raise SurveyDefinitionError(
            f"question collection must be a list, got {type(questions).__name__}",
            code="SURVEY_QUESTIONS_NOT_LIST",
        )
    if all(isinstance(q, Question) for q in questions):
        return list(questions)
    out: List[Question] = []
    for position, item in enumerate(questions):
        if isinstance(item, Question):
            out.append(item)
            continue
        try:
            out.append(Question.model_validate(item))
        except PydanticValidationError as e:
            logger.error("survey_question_invalid position=%s errors=%s", position, e.error_count())
            raise SurveyDefinitionError(f"question at position {position} is invalid: {e}") from e
    return out


def ensure_groups(groups: Optional[Iterable[Any]]) -> List[QuestionGroup]:
    """Coerce an optional group collection; None means the survey has no groups."""
    if groups is None:
        return []
    out: List[QuestionGroup] = []
    for item in groups:
        if isinstance(item, QuestionGroup):
            out.append(item)
            continue
        try:
            out.append(QuestionGroup.model_validate(item))
        except PydanticValidationError as e:
            raise SurveyDefinitionError(f"question group is invalid: {e}") from e
    return out


def find_question(questions: Sequence[Question], question_id: Optional[str]) -> Optional[Question]:
    if not question_id:
        return None
    for question in questions:
        if question.id == question_id:
            return question
    return None


def find_question_index(questions: Sequence[Question], question_id: Optional[str]) -> Optional[int]:
    """Index of ``question_id`` in presentation order, or None when absent."""
    if not question_id:
        return None
    for index, question in enumerate(questions):
        if question.id == question_id:
            return index
    return None


def find_group(groups: Sequence[QuestionGroup], group_id: Optional[str]) -> Optional[QuestionGroup]:
    if not group_id:
        return None
    for group in groups:
        if group.id == group_id:
            return group
    return None


__all__ = [
    "SurveyDefinitionError",
    "ensure_questions",
    "ensure_groups",
    "find_question",
    "find_question_index",
    "find_group",
]
