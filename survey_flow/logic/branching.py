"""Per-option branch rule resolution.

Looks up the branch rule attached to the option(s) a respondent selected and
turns it into a ``BranchDecision``. Multi-select ambiguity is settled by
declared option order: the first selected option carrying a rule wins,
regardless of the order selections appear in the answer.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Optional
import logging

from survey_flow.models.answers import MultiAnswer, TableAnswer
from survey_flow.models.navigation import SEQUENTIAL, BranchDecision, BranchKind
from survey_flow.models.question_kind import BranchAction, CellType, QuestionType
from survey_flow.models.survey import BranchRule, Option, Question
from survey_flow.logic.answer_canonical import (
    answer_tokens,
    canonical_keys,
    cell_value,
    coerce_answer,
)

logger = logging.getLogger(__name__)


def decision_from_rule(rule: BranchRule) -> BranchDecision:
    """Translate a stored branch rule into a decision."""
    if rule.action == BranchAction.END:
        return BranchDecision(kind=BranchKind.END, rule_id=rule.id, source="option")
    if rule.action == BranchAction.GOTO and rule.target_question_id:
        return BranchDecision(
            kind=BranchKind.GOTO,
            target_question_id=rule.target_question_id,
            rule_id=rule.id,
            source="option",
        )
    logger.warning("branch_rule_unusable rule=%s action=%s", rule.id, rule.action)
    return SEQUENTIAL


def first_rule(options: Iterable[Option], selected: FrozenSet[str]) -> Optional[BranchRule]:
    """First option in declared order that is selected and carries a rule."""
    if not selected:
        return None
    for option in options:
        if option.branch_rule is not None and option.value in selected:
            return option.branch_rule
    return None


def _single_choice_rule(options: Iterable[Option], raw: Any) -> Optional[BranchRule]:
    answer = coerce_answer(raw)
    if isinstance(answer, (MultiAnswer, TableAnswer)):
        return None
    opts = list(options)
    return first_rule(opts, canonical_keys(opts, answer_tokens(answer)))


def _multi_choice_rule(options: Iterable[Option], raw: Any) -> Optional[BranchRule]:
    answer = coerce_answer(raw)
    if isinstance(answer, TableAnswer):
        return None
    opts = list(options)
    return first_rule(opts, canonical_keys(opts, answer_tokens(answer)))


def _table_rule(question: Question, raw: Any) -> Optional[BranchRule]:
    if not isinstance(coerce_answer(raw), TableAnswer):
        return None
    for row in question.rows:
        for column_index, cell in enumerate(row.cells):
            if cell.is_hidden or cell.type not in (CellType.RADIO, CellType.SELECT, CellType.CHECKBOX):
                continue
            options = cell.choice_options()
            if not any(o.branch_rule is not None for o in options):
                continue
            rule = first_rule(options, cell_value(question, row, column_index, raw))
            if rule is not None:
                return rule
    return None


def find_branch_rule(question: Question, raw: Any) -> Optional[BranchRule]:
    """Return the branch rule selected by ``raw``, if any."""
    if question.type in QuestionType.SINGLE_CHOICE:
        return _single_choice_rule(question.options or [], raw)
    if question.type in QuestionType.MULTI_CHOICE:
        return _multi_choice_rule(question.options or [], raw)
    if question.type == QuestionType.TABLE:
        return _table_rule(question, raw)
    return None


def resolve_branch(question: Question, raw: Any) -> BranchDecision:
    """Resolve sequential / goto / end for the question's current answer."""
    rule = find_branch_rule(question, raw)
    if rule is None:
        return SEQUENTIAL
    return decision_from_rule(rule)


__all__ = [
    "decision_from_rule",
    "first_rule",
    "find_branch_rule",
    "resolve_branch",
]
