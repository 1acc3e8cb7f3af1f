"""Canonicalization helpers for respondent answers.

The single coercion boundary between raw persisted answers and the engine:
``coerce_answer`` maps raw JSON onto the closed answer union, and the
``selected_values`` / ``cell_value`` accessors turn an answer into the set of
canonical option keys used for every comparison.

An option's ``id`` and ``value`` share one namespace: a token equal to either
resolves to the option and is canonicalised to its ``value``. Tokens that
match no option (free text, "other" input) are kept verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple
import logging

from survey_flow.models.answers import (
    NO_ANSWER,
    Answer,
    MultiAnswer,
    OtherAnswer,
    ScalarAnswer,
    TableAnswer,
)
from survey_flow.models.question_kind import CellType, QuestionType
from survey_flow.models.survey import Cell, Option, Question, Row
from survey_flow.logic.table_merge import anchor_cell, cell_at


logger = logging.getLogger(__name__)

EMPTY: FrozenSet[str] = frozenset()


def canonicalize_scalar(value: object) -> Optional[str]:
    """Return a stable string for a scalar answer, or None when blank.

    - Booleans -> "true" / "false"
    - Numbers  -> integer form when integral, else decimal string
    - Text     -> as-is string; whitespace-only counts as no answer
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        f = float(value)
        if f.is_integer():
            return str(int(f))
        return str(f)
    if isinstance(value, str):
        return value if value.strip() else None
    return None


def _choice_item(raw: Any) -> Optional[Answer]:
    if isinstance(raw, Mapping):
        if "optionId" in raw:
            option_id = canonicalize_scalar(raw.get("optionId"))
            if option_id is None:
                return None
            other = raw.get("otherValue", raw.get("inputValue"))
            return OtherAnswer(option_id=option_id, other_value=other if isinstance(other, str) else None)
        if "selectedValue" in raw:
            selected = canonicalize_scalar(raw.get("selectedValue"))
            if selected is None:
                return None
            other = raw.get("otherValue", raw.get("inputValue"))
            return OtherAnswer(option_id=selected, other_value=other if isinstance(other, str) else None)
        return None
    token = canonicalize_scalar(raw)
    return ScalarAnswer(token) if token is not None else None


def coerce_answer(raw: Any) -> Answer:
    """Map a raw answer onto the answer union. Never raises."""
    if raw is None:
        return NO_ANSWER
    if isinstance(raw, Mapping):
        item = _choice_item(raw)
        if item is not None:
            return item
        if "optionId" in raw or "selectedValue" in raw:
            return NO_ANSWER
        return TableAnswer(entries=dict(raw))
    if isinstance(raw, (list, tuple)):
        items = []
        for element in raw:
            item = _choice_item(element)
            if item is not None:
                items.append(item)
        if not items:
            return NO_ANSWER
        return MultiAnswer(items=tuple(items))
    item = _choice_item(raw)
    if item is None:
        logger.debug("answer_shape_unrecognised type=%s", type(raw).__name__)
        return NO_ANSWER
    return item


def answer_tokens(answer: Answer) -> Tuple[str, ...]:
    """Raw selection tokens of a non-table answer, in answer order."""
    if isinstance(answer, ScalarAnswer):
        return (answer.value,)
    if isinstance(answer, OtherAnswer):
        return (answer.option_id,)
    if isinstance(answer, MultiAnswer):
        return tuple(token for item in answer.items for token in answer_tokens(item))
    return ()


def _option_index(options: Iterable[Option]) -> Dict[str, str]:
    index: Dict[str, str] = {}
    for option in options:
        index.setdefault(option.id, option.value)
    # Values take precedence over ids when the two collide across options.
    for option in options:
        index[option.value] = option.value
    return index


def canonical_keys(options: Optional[Iterable[Option]], tokens: Iterable[str]) -> FrozenSet[str]:
    """Canonicalise tokens against an option list (id or value -> value)."""
    opts = list(options or [])
    if not opts:
        return frozenset(t for t in tokens if t)
    index = _option_index(opts)
    return frozenset(index.get(t, t) for t in tokens if t)


def selected_values(question: Question, raw: Any) -> FrozenSet[str]:
    """Canonical keys selected for ``question``; empty for missing answers.

    Table questions have no single selection; use ``cell_value`` instead.
    """
    answer = coerce_answer(raw)
    if isinstance(answer, TableAnswer):
        return EMPTY
    tokens = answer_tokens(answer)
    if not tokens:
        return EMPTY
    if question.type in (QuestionType.TEXT, QuestionType.TEXTAREA):
        return frozenset(tokens)
    return canonical_keys(question.options, tokens)


def _lookup_cell_raw(table: Question, row: Row, cell: Cell, column_index: int, entries: Mapping[str, Any]) -> Any:
    if cell.id in entries:
        return entries[cell.id]
    nested = entries.get(row.id)
    if isinstance(nested, Mapping):
        columns = table.columns
        if 0 <= column_index < len(columns):
            return nested.get(columns[column_index].id)
    return None


def resolve_cell(table: Question, row: Row, column_index: Optional[int]) -> Optional[Tuple[Row, Cell]]:
    """Return the (row, cell) whose stored answer applies at the coordinate.

    A hidden cell reads the anchor of its merge group, so an answer given on
    a merged cell counts for every row the merge covers.
    """
    cell = cell_at(row, column_index)
    if cell is None:
        return None
    if cell.is_hidden:
        anchored = anchor_cell(table, row.id, column_index)
        if anchored is not None:
            return anchored
    return row, cell


def cell_value(table: Question, row: Row, column_index: Optional[int], raw_table_answer: Any) -> FrozenSet[str]:
    """Canonical keys stored for the cell at (row, column_index).

    Looks up by cell id first, then by ``answer[row.id][column.id]``.
    """
    answer = coerce_answer(raw_table_answer)
    if not isinstance(answer, TableAnswer):
        return EMPTY
    resolved = resolve_cell(table, row, column_index)
    if resolved is None:
        return EMPTY
    source_row, cell = resolved
    raw = _lookup_cell_raw(table, source_row, cell, column_index, answer.entries)  # type: ignore[arg-type]
    if cell.type == CellType.INPUT:
        text = canonicalize_scalar(raw) if not isinstance(raw, Mapping) else None
        return frozenset({text.strip()}) if text else EMPTY
    tokens = answer_tokens(coerce_answer(raw))
    return canonical_keys(cell.choice_options(), tokens)


def cell_check(
    table: Question,
    row: Row,
    column_index: Optional[int],
    raw_table_answer: Any,
    expected_values: Optional[Iterable[str]] = None,
) -> bool:
    """True when the cell holds a selection (matching ``expected_values`` if given)."""
    values = cell_value(table, row, column_index, raw_table_answer)
    if not values:
        return False
    expected = list(expected_values or [])
    if not expected:
        return True
    resolved = resolve_cell(table, row, column_index)
    options = resolved[1].choice_options() if resolved else []
    return bool(values & canonical_keys(options, expected))


__all__ = [
    "canonicalize_scalar",
    "coerce_answer",
    "answer_tokens",
    "canonical_keys",
    "selected_values",
    "resolve_cell",
    "cell_value",
    "cell_check",
]
