"""Display-condition evaluation for questions and question groups.

Centralizes the visibility decision used by navigation and by the visibility
routes. Nothing here is cached: every call recomputes from the answer
snapshot it is given, so changing an earlier answer re-shows or re-hides
dependent questions on the next call.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Union
import logging

from survey_flow.models.question_kind import LogicType
from survey_flow.models.survey import DisplayConditionGroup, Question, QuestionGroup
from survey_flow.logic.condition_eval import evaluate_condition
from survey_flow.logic.survey_definition import (
    ensure_groups,
    ensure_questions,
    find_group,
    find_question_index,
)

logger = logging.getLogger(__name__)


def combine_results(logic_type: str, results: Iterable[bool]) -> bool:
    """Combine sibling condition results by the group-level logic type.

    AND: all true (vacuously true). OR: at least one true. NOT: none true.
    Unknown logic types fail closed.
    """
    values = list(results)
    if logic_type == LogicType.AND:
        return all(values)
    if logic_type == LogicType.OR:
        return any(values)
    if logic_type == LogicType.NOT:
        return not any(values)
    logger.warning("display_condition_logic_unknown logic_type=%s", logic_type)
    return False


def evaluate_display_condition(
    display_condition: Optional[DisplayConditionGroup],
    answers: Any,
    questions: Sequence[Question],
    owner_index: Optional[int] = None,
) -> bool:
    """Evaluate a condition group; None means always visible.

    When ``owner_index`` is given, a condition whose source is not strictly
    earlier than the owner is an authoring error and evaluates to False.
    """
    if display_condition is None:
        return True
    results: List[bool] = []
    for condition in display_condition.conditions:
        if not condition.is_enabled:
            continue
        if owner_index is not None:
            source_index = find_question_index(questions, condition.source_question_id)
            if source_index is not None and source_index >= owner_index:
                logger.warning(
                    "condition_forward_reference condition=%s source=%s owner_index=%s",
                    condition.id,
                    condition.source_question_id,
                    owner_index,
                )
                results.append(False)
                continue
        results.append(evaluate_condition(condition, answers, questions))
    return combine_results(display_condition.logic_type, results)


def is_group_visible(
    group: QuestionGroup,
    answers: Any,
    questions: Sequence[Question],
    groups: Sequence[QuestionGroup],
    _seen: Optional[Set[str]] = None,
) -> bool:
    """Visible when every ancestor group is visible and its own condition holds."""
    seen = set(_seen or ())
    if group.id in seen:
        logger.warning("group_parent_cycle group=%s", group.id)
        return False
    seen.add(group.id)
    if group.parent_group_id:
        parent = find_group(groups, group.parent_group_id)
        if parent is not None and not is_group_visible(parent, answers, questions, groups, seen):
            return False
    return evaluate_display_condition(group.display_condition, answers, questions)


def is_question_visible(
    question: Question,
    answers: Any,
    questions: Sequence[Question],
    groups: Sequence[QuestionGroup] = (),
) -> bool:
    if question.group_id and groups:
        group = find_group(groups, question.group_id)
        if group is not None and not is_group_visible(group, answers, questions, groups):
            return False
    owner_index = find_question_index(questions, question.id)
    return evaluate_display_condition(question.display_condition, answers, questions, owner_index)


def is_visible(
    owner: Union[Question, QuestionGroup],
    answers: Any,
    questions: Any,
    groups: Optional[Iterable[Any]] = None,
) -> bool:
    """Return whether a question or group is currently visible."""
    qs = ensure_questions(questions)
    gs = ensure_groups(groups)
    if isinstance(owner, QuestionGroup):
        return is_group_visible(owner, answers, qs, gs)
    return is_question_visible(owner, answers, qs, gs)


def visibility_map(
    questions: Any,
    answers: Any,
    groups: Optional[Iterable[Any]] = None,
) -> Dict[str, bool]:
    """Visibility of every question, keyed by question id, in presentation order."""
    qs = ensure_questions(questions)
    gs = ensure_groups(groups)
    return {q.id: is_question_visible(q, answers, qs, gs) for q in qs}


def compute_visible_set(
    questions: Any,
    answers: Any,
    groups: Optional[Iterable[Any]] = None,
) -> Set[str]:
    """Compute the set of currently visible question ids."""
    return {qid for qid, visible in visibility_map(questions, answers, groups).items() if visible}


__all__ = [
    "combine_results",
    "evaluate_display_condition",
    "is_group_visible",
    "is_question_visible",
    "is_visible",
    "visibility_map",
    "compute_visible_set",
]
