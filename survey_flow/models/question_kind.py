"""Constant containers for the closed tag sets of a survey definition.

Plain classes rather than Enums: stored JSON carries the raw strings and the
engine compares against them directly, tolerating values it does not know.
"""

from __future__ import annotations


class QuestionType:
    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SELECT = "select"
    MULTISELECT = "multiselect"
    TABLE = "table"
    NOTICE = "notice"

    SINGLE_CHOICE = frozenset({RADIO, SELECT})
    MULTI_CHOICE = frozenset({CHECKBOX, MULTISELECT})


class CellType:
    TEXT = "text"
    INPUT = "input"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    IMAGE = "image"
    VIDEO = "video"

    NON_INTERACTIVE = frozenset({TEXT, IMAGE, VIDEO})
    INTERACTIVE = frozenset({CHECKBOX, RADIO, SELECT, INPUT})


class LogicType:
    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class ConditionType:
    VALUE_MATCH = "value-match"
    TABLE_CELL_CHECK = "table-cell-check"


class CellCheckType:
    ANY = "any"
    ALL = "all"
    NONE = "none"


class ValidationType:
    EXCLUSIVE_CHECK = "exclusive-check"
    ANY_OF = "any-of"
    ALL_OF = "all-of"
    NONE_OF = "none-of"
    REQUIRED_COMBINATION = "required-combination"


class BranchAction:
    GOTO = "goto"
    END = "end"


__all__ = [
    "QuestionType",
    "CellType",
    "LogicType",
    "ConditionType",
    "CellCheckType",
    "ValidationType",
    "BranchAction",
]
