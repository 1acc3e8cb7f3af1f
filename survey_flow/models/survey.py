"""Pydantic models for the persisted survey definition.

Field names are snake_case in Python and camelCase on the wire. Unknown keys
are kept (``extra="allow"``) so a definition dumped with
``model_dump(by_alias=True, exclude_unset=True)`` matches what was stored.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from survey_flow.models.question_kind import (
    BranchAction,
    CellCheckType,
    CellType,
    LogicType,
)


class SurveyModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict:
        """Dump to the stored JSON shape (camelCase, only fields that were set)."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class BranchRule(SurveyModel):
    id: str
    value: str = ""
    action: str = BranchAction.GOTO
    target_question_id: Optional[str] = None


class Option(SurveyModel):
    id: str
    label: str = ""
    value: str = ""
    has_other: Optional[bool] = None
    branch_rule: Optional[BranchRule] = None


class Column(SurveyModel):
    id: str
    label: str = ""
    width: Optional[float] = None
    min_width: Optional[float] = None


class Cell(SurveyModel):
    id: str
    type: str = CellType.TEXT
    content: str = ""
    checkbox_options: Optional[List[Option]] = None
    radio_options: Optional[List[Option]] = None
    select_options: Optional[List[Option]] = None
    rowspan: Optional[int] = Field(default=None, ge=1)
    colspan: Optional[int] = Field(default=None, ge=1)
    is_hidden: Optional[bool] = None

    def choice_options(self) -> List[Option]:
        """Return the option list that belongs to this cell's type."""
        if self.type == CellType.CHECKBOX:
            return list(self.checkbox_options or [])
        if self.type == CellType.RADIO:
            return list(self.radio_options or [])
        if self.type == CellType.SELECT:
            return list(self.select_options or [])
        return []

    @property
    def span(self) -> int:
        return self.rowspan if self.rowspan and self.rowspan > 1 else 1


class Row(SurveyModel):
    id: str
    label: str = ""
    cells: List[Cell] = Field(default_factory=list)
    height: Optional[float] = None
    min_height: Optional[float] = None


class TableConditions(SurveyModel):
    row_ids: List[str] = Field(default_factory=list)
    cell_column_index: Optional[int] = None
    check_type: str = CellCheckType.ANY
    expected_values: Optional[List[str]] = None


class AdditionalConditions(SurveyModel):
    """Secondary same-row check layered on top of a table condition or rule."""

    cell_column_index: int
    check_type: Optional[str] = None
    row_ids: Optional[List[str]] = None
    expected_values: Optional[List[str]] = None


class Condition(SurveyModel):
    id: str
    source_question_id: str
    condition_type: str
    # Stored for round-trip only; sibling conditions combine by the group's logic_type.
    logic_type: str = LogicType.AND
    table_conditions: Optional[TableConditions] = None
    required_values: Optional[List[str]] = None
    additional_conditions: Optional[AdditionalConditions] = None
    enabled: Optional[bool] = None
    name: Optional[str] = None

    @property
    def is_enabled(self) -> bool:
        return self.enabled is not False


class DisplayConditionGroup(SurveyModel):
    logic_type: str = LogicType.AND
    conditions: List[Condition] = Field(default_factory=list)


class ValidationConditions(SurveyModel):
    check_type: str = CellType.CHECKBOX
    row_ids: List[str] = Field(default_factory=list)
    cell_column_index: Optional[int] = None
    expected_values: Optional[List[str]] = None


class TableValidationRule(SurveyModel):
    id: str
    type: str
    conditions: ValidationConditions
    action: str = BranchAction.END
    target_question_id: Optional[str] = None
    target_question_map: Optional[Dict[str, str]] = None
    additional_conditions: Optional[AdditionalConditions] = None
    description: Optional[str] = None
    error_message: Optional[str] = None


class Question(SurveyModel):
    id: str
    type: str
    title: str = ""
    description: Optional[str] = None
    required: bool = False
    order: int = 0
    group_id: Optional[str] = None
    options: Optional[List[Option]] = None
    allow_other_option: Optional[bool] = None
    table_title: Optional[str] = None
    table_columns: Optional[List[Column]] = None
    table_rows_data: Optional[List[Row]] = None
    table_validation_rules: Optional[List[TableValidationRule]] = None
    display_condition: Optional[DisplayConditionGroup] = None
    notice_content: Optional[str] = None
    requires_acknowledgment: Optional[bool] = None

    @property
    def rows(self) -> List[Row]:
        return list(self.table_rows_data or [])

    @property
    def columns(self) -> List[Column]:
        return list(self.table_columns or [])

    def find_row(self, row_id: str) -> Optional[Row]:
        for row in self.table_rows_data or []:
            if row.id == row_id:
                return row
        return None


class QuestionGroup(SurveyModel):
    id: str
    survey_id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    order: int = 0
    parent_group_id: Optional[str] = None
    display_condition: Optional[DisplayConditionGroup] = None


class Survey(SurveyModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    groups: Optional[List[QuestionGroup]] = None


__all__ = [
    "SurveyModel",
    "BranchRule",
    "Option",
    "Column",
    "Cell",
    "Row",
    "TableConditions",
    "AdditionalConditions",
    "Condition",
    "DisplayConditionGroup",
    "ValidationConditions",
    "TableValidationRule",
    "Question",
    "QuestionGroup",
    "Survey",
]
