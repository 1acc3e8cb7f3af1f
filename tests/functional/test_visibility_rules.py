"""Display-condition engine: questions, groups, and the reveal invariants."""

from __future__ import annotations

import copy
import random

import pytest

from survey_flow.logic.survey_definition import SurveyDefinitionError
from survey_flow.logic.visibility_rules import (
    combine_results,
    compute_visible_set,
    is_visible,
    visibility_map,
)
from survey_flow.models.survey import Question, QuestionGroup


def _question(qid, display_condition=None, **extra):
    data = {"id": qid, "type": "text", **extra}
    if display_condition is not None:
        data["displayCondition"] = display_condition
    return data


def _gender_is(value, cid="cond-gender", **extra):
    return {
        "id": cid,
        "sourceQuestionId": "question-gender",
        "conditionType": "value-match",
        "requiredValues": [value],
        **extra,
    }


def test_question_without_condition_is_visible(tv_questions):
    assert is_visible(tv_questions[0], {}, tv_questions) is True


def test_a8_follows_digital_or_uhd_ownership(tv_questions, tv_check):
    a8 = tv_questions[2]
    assert is_visible(a8, {"question-17": tv_check("row-digital-tv")}, tv_questions)
    assert is_visible(a8, {"question-17": tv_check("row-uhd-tv")}, tv_questions)
    assert not is_visible(a8, {"question-17": tv_check("row-analog-tv")}, tv_questions)
    assert not is_visible(a8, {}, tv_questions)


# Scenario C: OR group over digital ownership and gender
def test_or_group(tv_questions, tv_check):
    a10 = tv_questions[4]
    assert is_visible(a10, {"question-gender": "male"}, tv_questions) is False
    assert is_visible(a10, {"question-gender": "female"}, tv_questions) is True
    assert is_visible(a10, {"question-17": tv_check("row-digital-tv")}, tv_questions) is True


def test_group_logic_wins_over_per_condition_logic(tv_questions):
    # both conditions say OR but the group combines with AND
    questions = [
        tv_questions[0],
        _question(
            "q-target",
            {
                "logicType": "AND",
                "conditions": [
                    _gender_is("female", "c1", logicType="OR"),
                    _gender_is("male", "c2", logicType="OR"),
                ],
            },
        ),
    ]
    answers = {"question-gender": "female"}
    assert visibility_map(questions, answers)["q-target"] is False


def test_not_group_hides_when_any_condition_holds(tv_questions):
    questions = [tv_questions[0], _question("q-not", {"logicType": "NOT", "conditions": [_gender_is("female")]})]
    assert visibility_map(questions, {"question-gender": "female"})["q-not"] is False
    assert visibility_map(questions, {"question-gender": "male"})["q-not"] is True


def test_empty_and_disabled_condition_lists(tv_questions):
    questions = [
        tv_questions[0],
        _question("q-and", {"logicType": "AND", "conditions": []}),
        _question("q-or", {"logicType": "OR", "conditions": []}),
        _question("q-disabled", {"logicType": "AND", "conditions": [_gender_is("female", enabled=False)]}),
        _question("q-unknown-logic", {"logicType": "XOR", "conditions": [_gender_is("male")]}),
    ]
    result = visibility_map(questions, {"question-gender": "male"})
    assert result == {
        "question-gender": True,
        "q-and": True,
        "q-or": False,
        "q-disabled": True,
        "q-unknown-logic": False,
    }


def test_forward_reference_evaluates_false(tv_questions):
    questions = [
        _question("q-early", {"logicType": "AND", "conditions": [_gender_is("female")]}),
        tv_questions[0],
    ]
    assert visibility_map(questions, {"question-gender": "female"})["q-early"] is False


def test_hidden_parent_group_hides_nested_questions(tv_questions):
    parent = QuestionGroup.model_validate(
        {
            "id": "g-parent",
            "name": "Women only",
            "displayCondition": {"logicType": "AND", "conditions": [_gender_is("female")]},
        }
    )
    # models and raw dicts are both accepted
    groups = [parent, {"id": "g-child", "name": "Follow-up", "parentGroupId": "g-parent"}]
    questions = [tv_questions[0], _question("q-nested", groupId="g-child")]
    assert visibility_map(questions, {"question-gender": "male"}, groups)["q-nested"] is False
    assert visibility_map(questions, {"question-gender": "female"}, groups)["q-nested"] is True
    assert is_visible(groups[0], {"question-gender": "female"}, questions, groups) is True


def test_group_parent_cycle_is_hidden(tv_questions):
    groups = [
        {"id": "g1", "parentGroupId": "g2"},
        {"id": "g2", "parentGroupId": "g1"},
    ]
    questions = [tv_questions[0], _question("q-cyclic", groupId="g1")]
    assert visibility_map(questions, {}, groups)["q-cyclic"] is False


def test_unknown_group_id_is_ignored(tv_questions):
    questions = [tv_questions[0], _question("q-orphan", groupId="g-missing")]
    assert visibility_map(questions, {}, [{"id": "g-other"}])["q-orphan"] is True


def test_visibility_map_keeps_presentation_order(tv_questions, tv_check):
    answers = {"question-gender": "male", "question-17": tv_check("row-digital-tv")}
    result = visibility_map(tv_questions, answers)
    assert list(result) == [q.id for q in tv_questions]
    assert compute_visible_set(tv_questions, answers) == {
        "question-gender",
        "question-17",
        "question-a8",
        "question-a10",
        "question-closing",
    }


def test_missing_question_collection_raises():
    with pytest.raises(SurveyDefinitionError) as exc:
        visibility_map(None, {})
    assert exc.value.code == "SURVEY_QUESTIONS_MISSING"


def test_combine_results():
    assert combine_results("AND", []) is True
    assert combine_results("OR", []) is False
    assert combine_results("NOT", [False, False]) is True
    assert combine_results("bogus", [True]) is False


# Randomised checks over generated condition trees.

_RADIO = {
    "id": "src-radio",
    "type": "radio",
    "options": [{"id": f"r-{v}", "label": v, "value": v} for v in "abc"],
}
_CHECKBOX = {
    "id": "src-check",
    "type": "checkbox",
    "options": [{"id": f"c-{v}", "label": v, "value": v} for v in "xyz"],
}
_TABLE = {
    "id": "src-table",
    "type": "table",
    "tableColumns": [{"id": "col-0"}, {"id": "col-1"}],
    "tableRowsData": [
        {
            "id": f"tr{n}",
            "cells": [
                {"id": f"tr{n}-box", "type": "checkbox", "checkboxOptions": [{"id": f"tr{n}-on", "value": "on"}]},
                {"id": f"tr{n}-label", "type": "text", "content": f"Row {n}"},
            ],
        }
        for n in range(4)
    ],
}


def _random_condition(rng: random.Random, n: int) -> dict:
    kind = rng.choice(["radio", "check", "table"])
    if kind == "radio":
        required = rng.sample(["a", "b", "c", "r-a", "r-b"], rng.randint(1, 2))
        return {"id": f"c{n}", "sourceQuestionId": "src-radio", "conditionType": "value-match", "requiredValues": required}
    if kind == "check":
        required = rng.sample(["x", "y", "z", "c-z"], rng.randint(1, 2))
        return {"id": f"c{n}", "sourceQuestionId": "src-check", "conditionType": "value-match", "requiredValues": required}
    rows = rng.sample([f"tr{i}" for i in range(4)], rng.randint(1, 3))
    return {
        "id": f"c{n}",
        "sourceQuestionId": "src-table",
        "conditionType": "table-cell-check",
        "tableConditions": {"rowIds": rows, "cellColumnIndex": 0, "checkType": rng.choice(["any", "all"])},
    }


def _random_survey(rng: random.Random) -> list:
    questions = [copy.deepcopy(_RADIO), copy.deepcopy(_CHECKBOX), copy.deepcopy(_TABLE)]
    for i in range(8):
        if rng.random() < 0.15:
            questions.append(_question(f"target-{i}"))
            continue
        conditions = [_random_condition(rng, j) for j in range(rng.randint(1, 3))]
        questions.append(_question(f"target-{i}", {"logicType": rng.choice(["AND", "OR"]), "conditions": conditions}))
    return questions


def _random_answers(rng: random.Random) -> dict:
    table = {}
    for n in range(4):
        if rng.random() < 0.5:
            table[f"tr{n}-box"] = [rng.choice([f"tr{n}-on", "on"])]
    return {
        "src-radio": rng.choice(["a", "b", "c", "r-a", "r-c"]),
        "src-check": rng.sample(["x", "y", "z", "c-x", "c-z"], rng.randint(1, 3)),
        "src-table": table,
    }


@pytest.mark.parametrize("seed", range(25))
def test_visibility_is_idempotent_and_pure(seed):
    rng = random.Random(seed)
    questions = [Question.model_validate(q) for q in _random_survey(rng)]
    answers = _random_answers(rng)
    snapshot = copy.deepcopy(answers)
    first = visibility_map(questions, answers)
    second = visibility_map(questions, answers)
    assert first == second
    assert answers == snapshot
    for question in questions:
        assert is_visible(question, answers, questions) == is_visible(question, answers, questions)


@pytest.mark.parametrize("seed", range(25))
def test_adding_an_answer_never_hides_a_visible_question(seed):
    rng = random.Random(1000 + seed)
    questions = [Question.model_validate(q) for q in _random_survey(rng)]
    full = _random_answers(rng)
    keys = list(full)
    rng.shuffle(keys)
    answers: dict = {}
    for key in keys:
        before = compute_visible_set(questions, answers)
        answers[key] = full[key]
        after = compute_visible_set(questions, answers)
        assert before <= after, (seed, key, before - after)
