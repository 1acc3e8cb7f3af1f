"""Helpers to compute visibility deltas and suppressed answers.

When a respondent changes an earlier answer, callers compare visibility
before and after the change to re-show or re-hide dependent questions. The
engine never prunes answers itself; answers belonging to newly hidden
questions are reported as suppressed so the response layer can decide.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable, List, Optional, Tuple

from survey_flow.logic.visibility_rules import compute_visible_set


def compute_visibility_delta(
    pre_visible: Iterable[str],
    post_visible: Iterable[str],
    has_answer: Callable[[str], bool],
) -> Tuple[List[str], List[str], List[str]]:
    """Compute visibility delta and suppressed answers.

    - now_visible: questions newly visible (in post but not in pre)
    - now_hidden: questions newly hidden (in pre but not in post)
    - suppressed_answers: subset of now_hidden that currently have answers

    Exceptions raised by ``has_answer`` propagate to the caller.
    """
    pre_set = {str(qid) for qid in pre_visible if qid}
    post_set = {str(qid) for qid in post_visible if qid}
    now_visible = sorted(post_set - pre_set)
    now_hidden = sorted(pre_set - post_set)
    suppressed_answers = [qid for qid in now_hidden if has_answer(qid)]
    return now_visible, now_hidden, suppressed_answers


def _answered(answers: Any) -> Callable[[str], bool]:
    def probe(question_id: str) -> bool:
        if not isinstance(answers, Mapping):
            return False
        value = answers.get(question_id)
        return value not in (None, "", [], {})

    return probe


def delta_between_answers(
    questions: Any,
    previous_answers: Any,
    current_answers: Any,
    groups: Optional[Iterable[Any]] = None,
) -> Tuple[List[str], List[str], List[str]]:
    """Visibility delta caused by moving from ``previous_answers`` to ``current_answers``."""
    group_list = list(groups) if groups is not None else None
    pre = compute_visible_set(questions, previous_answers, group_list)
    post = compute_visible_set(questions, current_answers, group_list)
    return compute_visibility_delta(pre, post, _answered(current_answers))


__all__ = ["compute_visibility_delta", "delta_between_answers"]
