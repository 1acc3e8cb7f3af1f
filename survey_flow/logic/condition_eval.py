"""Evaluation of a single display condition against an answer snapshot.

Conditions fail closed: an unknown source question, a table check against a
non-table source, a column index outside the table, or a missing
``tableConditions`` block all evaluate to False and are logged, so a
misconfigured condition can never reveal a question by accident.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional, Sequence
import logging

from survey_flow.models.question_kind import CellCheckType, ConditionType, QuestionType
from survey_flow.models.survey import AdditionalConditions, Condition, Question, Row, TableConditions
from survey_flow.logic.answer_canonical import canonical_keys, cell_check, selected_values
from survey_flow.logic.survey_definition import find_question


logger = logging.getLogger(__name__)


def column_count(table: Question) -> int:
    """Number of addressable columns: declared columns, else the widest row."""
    if table.table_columns:
        return len(table.table_columns)
    return max((len(row.cells) for row in table.rows), default=0)


def column_in_range(table: Question, column_index: Optional[int]) -> bool:
    if column_index is None:
        return True
    return 0 <= column_index < column_count(table)


def row_checked(
    table: Question,
    row: Row,
    column_index: Optional[int],
    raw_answer: Any,
    expected_values: Optional[List[str]] = None,
) -> bool:
    """Whether ``row`` is checked at ``column_index`` (any cell when None)."""
    if column_index is None:
        return any(
            cell_check(table, row, i, raw_answer, expected_values)
            for i in range(len(row.cells))
        )
    return cell_check(table, row, column_index, raw_answer, expected_values)


def checked_rows(table: Question, conditions: TableConditions, raw_answer: Any) -> List[str]:
    """Listed row ids that are checked, in table order."""
    wanted = set(conditions.row_ids)
    out: List[str] = []
    for row in table.rows:
        if row.id not in wanted:
            continue
        if row_checked(table, row, conditions.cell_column_index, raw_answer, conditions.expected_values):
            out.append(row.id)
    return out


def combine_check(check_type: str, listed: Sequence[str], checked: Sequence[str]) -> bool:
    """Apply any/all/none to the listed rows. Unknown check types fail closed."""
    if check_type == CellCheckType.ANY:
        return len(checked) > 0
    if check_type == CellCheckType.ALL:
        return len(listed) > 0 and set(listed) <= set(checked)
    if check_type == CellCheckType.NONE:
        return len(checked) == 0
    logger.warning("condition_check_type_unknown check_type=%s", check_type)
    return False


def additional_satisfied(
    table: Question,
    additional: AdditionalConditions,
    main_checked: Sequence[str],
    raw_answer: Any,
) -> bool:
    """True when some main-checked row is also checked at the secondary column."""
    if not column_in_range(table, additional.cell_column_index):
        logger.warning(
            "additional_condition_column_out_of_range table=%s column=%s",
            table.id,
            additional.cell_column_index,
        )
        return False
    candidates = list(main_checked)
    if additional.row_ids:
        allowed = set(additional.row_ids)
        candidates = [rid for rid in candidates if rid in allowed]
    for row_id in candidates:
        row = table.find_row(row_id)
        if row is None:
            continue
        if cell_check(table, row, additional.cell_column_index, raw_answer, additional.expected_values):
            return True
    return False


def _value_match(condition: Condition, source: Question, raw_answer: Any) -> bool:
    required = condition.required_values or []
    if not required:
        return False
    selected = selected_values(source, raw_answer)
    if not selected:
        return False
    return bool(selected & canonical_keys(source.options, required))


def _table_cell_check(condition: Condition, source: Question, raw_answer: Any) -> bool:
    if source.type != QuestionType.TABLE:
        logger.warning(
            "condition_source_not_table condition=%s source=%s type=%s",
            condition.id,
            source.id,
            source.type,
        )
        return False
    tc = condition.table_conditions
    if tc is None:
        logger.warning("condition_table_conditions_missing condition=%s", condition.id)
        return False
    if not column_in_range(source, tc.cell_column_index):
        logger.warning(
            "condition_column_out_of_range condition=%s source=%s column=%s",
            condition.id,
            source.id,
            tc.cell_column_index,
        )
        return False
    rows = checked_rows(source, tc, raw_answer)
    satisfied = combine_check(tc.check_type, tc.row_ids, rows)
    if not satisfied or condition.additional_conditions is None:
        return satisfied
    return additional_satisfied(source, condition.additional_conditions, rows, raw_answer)


def evaluate_condition(condition: Condition, answers: Any, questions: Sequence[Question]) -> bool:
    """Evaluate one condition. Never raises; misconfiguration yields False."""
    if not condition.is_enabled:
        return False
    source = find_question(questions, condition.source_question_id)
    if source is None:
        logger.warning(
            "condition_source_missing condition=%s source=%s",
            condition.id,
            condition.source_question_id,
        )
        return False
    raw_answer = answers.get(source.id) if isinstance(answers, Mapping) else None
    if condition.condition_type == ConditionType.VALUE_MATCH:
        return _value_match(condition, source, raw_answer)
    if condition.condition_type == ConditionType.TABLE_CELL_CHECK:
        return _table_cell_check(condition, source, raw_answer)
    logger.warning(
        "condition_type_unknown condition=%s type=%s",
        condition.id,
        condition.condition_type,
    )
    return False


__all__ = [
    "column_count",
    "column_in_range",
    "row_checked",
    "checked_rows",
    "combine_check",
    "additional_satisfied",
    "evaluate_condition",
]
