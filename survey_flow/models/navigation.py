"""Result types produced by the flow engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


class BranchKind:
    SEQUENTIAL = "sequential"
    GOTO = "goto"
    END = "end"


class EndReason:
    COMPLETED = "completed"
    BRANCH_END = "branch_end"
    VALIDATION_END = "validation_end"


@dataclass(frozen=True)
class BranchDecision:
    kind: str = BranchKind.SEQUENTIAL
    target_question_id: Optional[str] = None
    rule_id: Optional[str] = None
    # "option" for per-option branch rules, "validation" for table rules
    source: Optional[str] = None

    @property
    def is_sequential(self) -> bool:
        return self.kind == BranchKind.SEQUENTIAL


SEQUENTIAL = BranchDecision()


@dataclass(frozen=True)
class AtQuestion:
    index: int


@dataclass(frozen=True)
class Ended:
    reason: str = EndReason.COMPLETED

    @property
    def completed_early(self) -> bool:
        return self.reason != EndReason.COMPLETED


NavigationState = Union[AtQuestion, Ended]


@dataclass(frozen=True)
class Progress:
    position: int
    total_visible: int


__all__ = [
    "BranchKind",
    "EndReason",
    "BranchDecision",
    "SEQUENTIAL",
    "AtQuestion",
    "Ended",
    "NavigationState",
    "Progress",
]
