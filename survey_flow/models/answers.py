"""Closed union of answer shapes.

Raw answers arrive as whatever the response layer persisted: a bare string,
an ``{optionId, otherValue}`` object, a list of either, or a table mapping.
``survey_flow.logic.answer_canonical.coerce_answer`` is the only place that
looks at raw JSON shape; everything downstream works on these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class NoAnswer:
    pass


@dataclass(frozen=True)
class ScalarAnswer:
    value: str


@dataclass(frozen=True)
class OtherAnswer:
    option_id: str
    other_value: Optional[str] = None


@dataclass(frozen=True)
class MultiAnswer:
    items: Tuple[Union[ScalarAnswer, OtherAnswer], ...] = ()


@dataclass(frozen=True)
class TableAnswer:
    # Keyed by cell id (flat) or by row id -> {column id: value} (legacy).
    entries: Mapping[str, Any] = field(default_factory=dict)


Answer = Union[NoAnswer, ScalarAnswer, OtherAnswer, MultiAnswer, TableAnswer]

NO_ANSWER = NoAnswer()


__all__ = [
    "Answer",
    "NoAnswer",
    "ScalarAnswer",
    "OtherAnswer",
    "MultiAnswer",
    "TableAnswer",
    "NO_ANSWER",
]
