"""Table validation rules: answer patterns that end (or redirect) a survey.

The canonical rule is ``exclusive-check``: it fires when the rows checked in
the configured column are exactly the flagged rows, e.g. a respondent who
owns only an analogue TV is screened out.
"""

from __future__ import annotations

from typing import Any, List, Optional
import logging

from survey_flow.models.navigation import BranchDecision, BranchKind
from survey_flow.models.question_kind import BranchAction, CellType, QuestionType, ValidationType
from survey_flow.models.survey import Question, Row, TableValidationRule
from survey_flow.logic.answer_canonical import cell_value
from survey_flow.logic.condition_eval import additional_satisfied, column_in_range, row_checked

logger = logging.getLogger(__name__)


def effective_column(row: Row, column_index: Optional[int]) -> Optional[int]:
    """Column to inspect for ``row``.

    A rule pointing at a label column (text/image/video) is read from the
    row's first interactive cell instead.
    """
    if column_index is None or column_index < 0 or column_index >= len(row.cells):
        return column_index
    if row.cells[column_index].type not in CellType.NON_INTERACTIVE:
        return column_index
    for i, cell in enumerate(row.cells):
        if cell.type in CellType.INTERACTIVE:
            return i
    return column_index


def _checked_rows(
    table: Question,
    column_index: Optional[int],
    answer: Any,
    row_ids: Optional[List[str]] = None,
    expected_values: Optional[List[str]] = None,
) -> List[str]:
    wanted = set(row_ids) if row_ids is not None else None
    out: List[str] = []
    for row in table.rows:
        if wanted is not None and row.id not in wanted:
            continue
        if row_checked(table, row, effective_column(row, column_index), answer, expected_values):
            out.append(row.id)
    return out


def table_checked_rows(table: Question, column_index: Optional[int], answer: Any) -> List[str]:
    """Every row in the table currently checked at ``column_index``."""
    return _checked_rows(table, column_index, answer)


def rule_satisfied(rule: TableValidationRule, table: Question, answer: Any) -> bool:
    """Whether the rule's answer pattern is present. Never raises."""
    if table.type != QuestionType.TABLE:
        return False
    cond = rule.conditions
    if not column_in_range(table, cond.cell_column_index):
        logger.warning(
            "validation_column_out_of_range rule=%s table=%s column=%s",
            rule.id,
            table.id,
            cond.cell_column_index,
        )
        return False
    listed = list(cond.row_ids)
    if rule.type == ValidationType.EXCLUSIVE_CHECK:
        checked_all = table_checked_rows(table, cond.cell_column_index, answer)
        satisfied = bool(checked_all) and set(checked_all) == set(listed)
        main_checked = [rid for rid in checked_all if rid in set(listed)]
    else:
        main_checked = _checked_rows(table, cond.cell_column_index, answer, listed, cond.expected_values)
        if rule.type == ValidationType.ANY_OF:
            satisfied = len(main_checked) > 0
        elif rule.type in (ValidationType.ALL_OF, ValidationType.REQUIRED_COMBINATION):
            satisfied = bool(listed) and set(listed) <= set(main_checked)
        elif rule.type == ValidationType.NONE_OF:
            satisfied = len(main_checked) == 0
        else:
            logger.warning("validation_type_unknown rule=%s type=%s", rule.id, rule.type)
            return False
    if not satisfied or rule.additional_conditions is None:
        return satisfied
    return additional_satisfied(table, rule.additional_conditions, main_checked, answer)


def should_terminate(rule: TableValidationRule, table: Question, answer: Any) -> bool:
    """True when an ``end`` rule fires for the table's current answer."""
    return rule.action == BranchAction.END and rule_satisfied(rule, table, answer)


def _mapped_target(rule: TableValidationRule, table: Question, answer: Any) -> Optional[str]:
    """Resolve ``targetQuestionMap`` from the value chosen at the secondary column."""
    additional = rule.additional_conditions
    if not rule.target_question_map or additional is None:
        return None
    allowed = set(additional.row_ids) if additional.row_ids else None
    for row in table.rows:
        if allowed is not None and row.id not in allowed:
            continue
        for value in sorted(cell_value(table, row, additional.cell_column_index, answer)):
            target = rule.target_question_map.get(value)
            if target:
                return target
    return None


def validation_branch(table: Question, answer: Any) -> Optional[BranchDecision]:
    """Branch decision produced by the table's validation rules, if any.

    An ``end`` rule that fires always wins; otherwise the first satisfied
    ``goto`` rule in declared order redirects.
    """
    rules = table.table_validation_rules or []
    if table.type != QuestionType.TABLE or not rules:
        return None
    for rule in rules:
        if should_terminate(rule, table, answer):
            logger.info("validation_rule_end rule=%s table=%s", rule.id, table.id)
            return BranchDecision(kind=BranchKind.END, rule_id=rule.id, source="validation")
    for rule in rules:
        if rule.action != BranchAction.GOTO or not rule_satisfied(rule, table, answer):
            continue
        target = _mapped_target(rule, table, answer) or rule.target_question_id
        if not target:
            logger.warning("validation_rule_goto_without_target rule=%s table=%s", rule.id, table.id)
            continue
        return BranchDecision(
            kind=BranchKind.GOTO,
            target_question_id=target,
            rule_id=rule.id,
            source="validation",
        )
    return None


__all__ = [
    "effective_column",
    "table_checked_rows",
    "rule_satisfied",
    "should_terminate",
    "validation_branch",
]
