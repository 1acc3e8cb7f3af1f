"""Authoring checks for survey definitions.

Reports the mistakes the engine silently tolerates at response time
(dangling references, forward conditions, out-of-range columns, per-condition
logic diverging from its group). Warnings are informational: they never
change how a survey evaluates.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence

from survey_flow.models.question_kind import BranchAction, ConditionType, QuestionType
from survey_flow.models.survey import (
    BranchRule,
    Condition,
    DisplayConditionGroup,
    Option,
    Question,
    Survey,
)
from survey_flow.logic.condition_eval import column_count


@dataclass(frozen=True)
class AuthoringWarning:
    code: str
    owner_id: str
    detail: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


def _question_options(question: Question) -> List[Option]:
    options = list(question.options or [])
    for row in question.rows:
        for cell in row.cells:
            options.extend(cell.choice_options())
    return options


def _check_branch_rule(
    rule: BranchRule,
    owner: Question,
    positions: Dict[str, int],
    out: List[AuthoringWarning],
) -> None:
    if rule.action != BranchAction.GOTO:
        return
    if not rule.target_question_id:
        out.append(AuthoringWarning("branch_goto_without_target", owner.id, f"rule {rule.id} has no target"))
        return
    target = positions.get(rule.target_question_id)
    if target is None:
        out.append(
            AuthoringWarning(
                "branch_target_unknown",
                owner.id,
                f"rule {rule.id} targets unknown question {rule.target_question_id}",
            )
        )
    elif target <= positions[owner.id]:
        out.append(
            AuthoringWarning(
                "branch_target_not_forward",
                owner.id,
                f"rule {rule.id} targets {rule.target_question_id}, which does not come later",
            )
        )


def _check_condition(
    condition: Condition,
    group: DisplayConditionGroup,
    owner_id: str,
    owner_position: Optional[int],
    questions: Sequence[Question],
    positions: Dict[str, int],
    out: List[AuthoringWarning],
) -> None:
    if len(group.conditions) > 1 and condition.logic_type != group.logic_type:
        out.append(
            AuthoringWarning(
                "divergent_condition_logic",
                owner_id,
                f"condition {condition.id} declares {condition.logic_type} but its group combines with {group.logic_type}",
            )
        )
    source_position = positions.get(condition.source_question_id)
    if source_position is None:
        out.append(
            AuthoringWarning(
                "condition_source_unknown",
                owner_id,
                f"condition {condition.id} references unknown question {condition.source_question_id}",
            )
        )
        return
    if owner_position is not None and source_position >= owner_position:
        out.append(
            AuthoringWarning(
                "condition_source_forward",
                owner_id,
                f"condition {condition.id} references {condition.source_question_id}, which is not earlier",
            )
        )
    if condition.condition_type != ConditionType.TABLE_CELL_CHECK:
        return
    source = questions[source_position]
    tc = condition.table_conditions
    if source.type != QuestionType.TABLE or tc is None:
        out.append(
            AuthoringWarning(
                "table_condition_invalid",
                owner_id,
                f"condition {condition.id} needs a table source and tableConditions",
            )
        )
        return
    if tc.cell_column_index is not None and not 0 <= tc.cell_column_index < column_count(source):
        out.append(
            AuthoringWarning(
                "column_index_out_of_range",
                owner_id,
                f"condition {condition.id} column {tc.cell_column_index} is outside table {source.id}",
            )
        )
    known_rows = {row.id for row in source.rows}
    for row_id in tc.row_ids:
        if row_id not in known_rows:
            out.append(
                AuthoringWarning(
                    "table_row_unknown",
                    owner_id,
                    f"condition {condition.id} references row {row_id} missing from {source.id}",
                )
            )


def lint_survey(survey: Survey) -> List[AuthoringWarning]:
    """Collect authoring warnings for ``survey`` in presentation order."""
    questions = survey.questions
    positions = {q.id: i for i, q in enumerate(questions)}
    out: List[AuthoringWarning] = []
    for index, question in enumerate(questions):
        for option in _question_options(question):
            if option.branch_rule is not None:
                _check_branch_rule(option.branch_rule, question, positions, out)
        for rule in question.table_validation_rules or []:
            if rule.action == BranchAction.GOTO:
                _check_branch_rule(
                    BranchRule(id=rule.id, action=rule.action, target_question_id=rule.target_question_id),
                    question,
                    positions,
                    out,
                )
            column = rule.conditions.cell_column_index
            if column is not None and not 0 <= column < column_count(question):
                out.append(
                    AuthoringWarning(
                        "column_index_out_of_range",
                        question.id,
                        f"validation rule {rule.id} column {column} is outside the table",
                    )
                )
        group = question.display_condition
        if group is not None:
            for condition in group.conditions:
                _check_condition(condition, group, question.id, index, questions, positions, out)
    for survey_group in survey.groups or []:
        if survey_group.display_condition is None:
            continue
        for condition in survey_group.display_condition.conditions:
            _check_condition(
                condition,
                survey_group.display_condition,
                survey_group.id,
                None,
                questions,
                positions,
                out,
            )
    return out


__all__ = ["AuthoringWarning", "lint_survey"]
