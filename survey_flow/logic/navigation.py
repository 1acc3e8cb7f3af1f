"""Navigation between questions.

Stateless driver over ``(questions, answers, index)``. Each call recomputes
visibility, table validation and branch rules from the snapshot it is given,
so backward/forward navigation after an answer change is always consistent
with the current answers.

States are ``AtQuestion(index)`` and ``Ended(reason)``. Advancing from ``i``:

1. table validation rules on question ``i`` (an ``end`` rule ends the survey;
   a ``goto`` rule redirects);
2. the branch rule of the selected option(s);
3. skip forward past invisible questions; running off the end completes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence
import logging

from survey_flow.models.navigation import (
    AtQuestion,
    BranchDecision,
    BranchKind,
    Ended,
    EndReason,
    NavigationState,
    Progress,
)
from survey_flow.models.survey import Question, QuestionGroup
from survey_flow.logic.branching import resolve_branch
from survey_flow.logic.survey_definition import (
    ensure_groups,
    ensure_questions,
    find_question_index,
)
from survey_flow.logic.table_validation import validation_branch
from survey_flow.logic.visibility_rules import is_question_visible

logger = logging.getLogger(__name__)


def _answer_for(answers: Any, question: Question) -> Any:
    if isinstance(answers, Mapping):
        return answers.get(question.id)
    return None


def _index_in_range(questions: Sequence[Question], index: Any) -> bool:
    if isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(questions):
        return True
    logger.warning("navigation_index_out_of_range index=%r count=%s", index, len(questions))
    return False


def next_visible_index(
    questions: Sequence[Question],
    start: int,
    answers: Any,
    groups: Sequence[QuestionGroup] = (),
) -> Optional[int]:
    """First index >= ``start`` whose question is visible, or None."""
    for index in range(max(start, 0), len(questions)):
        if is_question_visible(questions[index], answers, questions, groups):
            return index
    return None


def _decide(question: Question, answers: Any) -> BranchDecision:
    answer = _answer_for(answers, question)
    decision = validation_branch(question, answer)
    if decision is not None:
        return decision
    return resolve_branch(question, answer)


def _candidate_index(questions: Sequence[Question], index: int, decision: BranchDecision) -> int:
    if decision.kind != BranchKind.GOTO:
        return index + 1
    target = find_question_index(questions, decision.target_question_id)
    if target is None:
        logger.warning(
            "branch_target_missing question=%s target=%s rule=%s",
            questions[index].id,
            decision.target_question_id,
            decision.rule_id,
        )
        return index + 1
    return target


def initial_state(questions: Any, answers: Any, groups: Optional[Iterable[Any]] = None) -> NavigationState:
    """``AtQuestion`` of the first visible question (normally index 0)."""
    qs = ensure_questions(questions)
    gs = ensure_groups(groups)
    first = next_visible_index(qs, 0, answers, gs)
    if first is None:
        return Ended(EndReason.COMPLETED)
    return AtQuestion(first)


def advance(
    questions: Any,
    index: int,
    answers: Any,
    groups: Optional[Iterable[Any]] = None,
) -> NavigationState:
    """Compute the state after answering the question at ``index``."""
    qs = ensure_questions(questions)
    gs = ensure_groups(groups)
    if not _index_in_range(qs, index):
        return Ended(EndReason.COMPLETED)
    question = qs[index]
    decision = _decide(question, answers)
    if decision.kind == BranchKind.END:
        reason = EndReason.VALIDATION_END if decision.source == "validation" else EndReason.BRANCH_END
        logger.info("navigation_end question=%s reason=%s rule=%s", question.id, reason, decision.rule_id)
        return Ended(reason)
    candidate = _candidate_index(qs, index, decision)
    landed = next_visible_index(qs, candidate, answers, gs)
    if landed is None:
        return Ended(EndReason.COMPLETED)
    return AtQuestion(landed)


def retreat(
    questions: Any,
    index: int,
    answers: Any,
    groups: Optional[Iterable[Any]] = None,
) -> NavigationState:
    """Nearest earlier visible question; stays put when there is none.

    An index outside the list retreats to the last visible question.
    """
    qs = ensure_questions(questions)
    gs = ensure_groups(groups)
    if not _index_in_range(qs, index):
        last = next((i for i in range(len(qs) - 1, -1, -1) if is_question_visible(qs[i], answers, qs, gs)), None)
        return Ended(EndReason.COMPLETED) if last is None else AtQuestion(last)
    for candidate in range(index - 1, -1, -1):
        if is_question_visible(qs[candidate], answers, qs, gs):
            return AtQuestion(candidate)
    return AtQuestion(index)


def progress(
    questions: Any,
    index: int,
    answers: Any,
    groups: Optional[Iterable[Any]] = None,
) -> Progress:
    """Position of ``index`` among currently visible questions (1-based)."""
    qs = ensure_questions(questions)
    gs = ensure_groups(groups)
    visible: List[int] = [i for i, q in enumerate(qs) if is_question_visible(q, answers, qs, gs)]
    if not _index_in_range(qs, index):
        return Progress(position=0, total_visible=len(visible))
    position = sum(1 for i in visible if i <= index)
    return Progress(position=position, total_visible=len(visible))


__all__ = [
    "next_visible_index",
    "initial_state",
    "advance",
    "retreat",
    "progress",
]
