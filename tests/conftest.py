"""Shared fixtures: the TV-ownership survey and a merged-cell table.

The TV survey mirrors the platform's reference example: a table question
("question-17") with one ownership checkbox per TV kind, an exclusive-check
rule that screens out analogue-only households, and follow-up questions
shown only to digital or UHD owners.
"""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from survey_flow.config import AppConfig
from survey_flow.logic import inmemory_state
from survey_flow.logic.events import get_buffered_events
from survey_flow.main import create_app
from survey_flow.models.survey import Question, Survey


OWNED = "보유"

# row id -> (checkbox cell id, option id)
TV_CHECK_CELLS = {
    "row-digital-tv": ("cell-dtv-check", "dtv-own"),
    "row-uhd-tv": ("cell-uhd-check", "uhd-own"),
    "row-analog-tv": ("cell-analog-check", "analog-own"),
}


def _tv_row(row_id: str, label: str, prefix: str) -> Dict[str, Any]:
    cell_id, option_id = TV_CHECK_CELLS[row_id]
    return {
        "id": row_id,
        "label": label,
        "height": 60,
        "minHeight": 40,
        "cells": [
            {
                "id": cell_id,
                "type": "checkbox",
                "content": "",
                "checkboxOptions": [{"id": option_id, "label": OWNED, "value": OWNED}],
            },
            {"id": f"cell-{prefix}-desc", "type": "text", "content": label},
            {
                "id": f"cell-{prefix}-count",
                "type": "input",
                "content": "",
                "placeholder": "count",
                "inputMaxLength": 3,
            },
        ],
    }


GENDER_QUESTION = {
    "id": "question-gender",
    "type": "radio",
    "title": "Gender",
    "required": True,
    "order": 1,
    "options": [
        {"id": "opt-male", "label": "Male", "value": "male"},
        {"id": "opt-female", "label": "Female", "value": "female"},
    ],
}

TV_TABLE_QUESTION = {
    "id": "question-17",
    "type": "table",
    "title": "Which kinds of TV does your household own?",
    "required": True,
    "order": 17,
    "tableTitle": "",
    "tableColumns": [
        {"id": "col-1", "label": "Owned", "width": 200},
        {"id": "col-2", "label": "TV kind", "width": 750},
        {"id": "col-3", "label": "Count", "width": 150},
    ],
    "tableRowsData": [
        _tv_row("row-digital-tv", "Digital TV", "dtv"),
        _tv_row("row-uhd-tv", "UHD TV", "uhd"),
        _tv_row("row-analog-tv", "Analogue TV", "analog"),
    ],
    "tableValidationRules": [
        {
            "id": "rule-analog-only",
            "type": "exclusive-check",
            "description": "Stop when only an analogue TV is owned",
            "conditions": {
                "checkType": "checkbox",
                "rowIds": ["row-analog-tv"],
                "cellColumnIndex": 0,
            },
            "action": "end",
        }
    ],
}

DIGITAL_OR_UHD = {
    "id": "cond-has-digital-or-uhd",
    "sourceQuestionId": "question-17",
    "conditionType": "table-cell-check",
    "tableConditions": {
        "rowIds": ["row-digital-tv", "row-uhd-tv"],
        "cellColumnIndex": 0,
        "checkType": "any",
    },
    "logicType": "AND",
}

A8_QUESTION = {
    "id": "question-a8",
    "type": "radio",
    "title": "A8. How satisfied are you with your digital or UHD TV?",
    "required": True,
    "order": 18,
    "options": [
        {"id": "opt-1", "label": "Very satisfied", "value": "very-satisfied"},
        {"id": "opt-2", "label": "Satisfied", "value": "satisfied"},
        {"id": "opt-3", "label": "Neutral", "value": "neutral"},
        {"id": "opt-4", "label": "Dissatisfied", "value": "dissatisfied"},
        {"id": "opt-5", "label": "Very dissatisfied", "value": "very-dissatisfied"},
    ],
    "displayCondition": {"conditions": [DIGITAL_OR_UHD], "logicType": "AND"},
}

A9_QUESTION = {
    "id": "question-a9",
    "type": "textarea",
    "title": "A9. Do you notice a picture quality difference between the two?",
    "required": False,
    "order": 19,
    "displayCondition": {
        "conditions": [
            {
                "id": "cond-has-both",
                "sourceQuestionId": "question-17",
                "conditionType": "table-cell-check",
                "tableConditions": {
                    "rowIds": ["row-digital-tv", "row-uhd-tv"],
                    "cellColumnIndex": 0,
                    "checkType": "all",
                },
                "logicType": "AND",
            }
        ],
        "logicType": "AND",
    },
}

A10_QUESTION = {
    "id": "question-a10",
    "type": "text",
    "title": "A10. Which channel do you watch most?",
    "order": 20,
    "displayCondition": {
        "conditions": [
            {
                "id": "cond-digital-tv-any",
                "sourceQuestionId": "question-17",
                "conditionType": "table-cell-check",
                "tableConditions": {"rowIds": ["row-digital-tv"], "cellColumnIndex": 0, "checkType": "any"},
                "logicType": "OR",
            },
            {
                "id": "cond-gender-is-female",
                "sourceQuestionId": "question-gender",
                "conditionType": "value-match",
                "requiredValues": ["female"],
                "logicType": "OR",
            },
        ],
        "logicType": "OR",
    },
}

CLOSING_QUESTION = {
    "id": "question-closing",
    "type": "notice",
    "title": "Thank you",
    "order": 21,
    "noticeContent": "<p>Thank you for taking part.</p>",
    "requiresAcknowledgment": False,
}

TV_SURVEY = {
    "id": "survey-tv",
    "title": "TV ownership",
    "description": "Household media survey",
    "questions": [
        GENDER_QUESTION,
        TV_TABLE_QUESTION,
        A8_QUESTION,
        A9_QUESTION,
        A10_QUESTION,
        CLOSING_QUESTION,
    ],
}

# Column 0 of rows 3-4 merged: row3 anchors with rowspan 2, row4 is covered.
MERGED_TABLE = {
    "id": "question-merged",
    "type": "table",
    "order": 1,
    "tableColumns": [{"id": "col-a", "label": "Group"}, {"id": "col-b", "label": "Item"}],
    "tableRowsData": [
        {
            "id": f"row{n}",
            "label": f"Row {n}",
            "cells": [
                {
                    "id": f"r{n}-group",
                    "type": "checkbox",
                    "checkboxOptions": [{"id": f"r{n}-yes", "label": "Yes", "value": "yes"}],
                    **({"rowspan": 2} if n == 3 else {}),
                    **({"isHidden": True} if n == 4 else {}),
                },
                {
                    "id": f"r{n}-item",
                    "type": "radio",
                    "radioOptions": [
                        {"id": f"r{n}-a", "label": "A", "value": "a"},
                        {"id": f"r{n}-b", "label": "B", "value": "b"},
                    ],
                },
            ],
        }
        for n in range(1, 6)
    ],
}


def check_rows(*row_ids: str) -> Dict[str, Any]:
    """Table answer ticking the ownership checkbox of each given TV row."""
    answer: Dict[str, Any] = {}
    for row_id in row_ids:
        cell_id, option_id = TV_CHECK_CELLS[row_id]
        answer[cell_id] = [option_id]
    return answer


@pytest.fixture
def tv_check():
    return check_rows


@pytest.fixture
def tv_survey_wire() -> Dict[str, Any]:
    return copy.deepcopy(TV_SURVEY)


@pytest.fixture
def tv_survey(tv_survey_wire) -> Survey:
    return Survey.model_validate(tv_survey_wire)


@pytest.fixture
def tv_questions(tv_survey):
    return tv_survey.questions


@pytest.fixture
def tv_table(tv_survey) -> Question:
    return tv_survey.questions[1]


@pytest.fixture
def merged_table() -> Question:
    return Question.model_validate(copy.deepcopy(MERGED_TABLE))


@pytest.fixture(autouse=True)
def clean_state():
    inmemory_state.reset()
    get_buffered_events(clear=True)
    yield
    inmemory_state.reset()
    get_buffered_events(clear=True)


@pytest.fixture
def client():
    app = create_app(AppConfig())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def stored_tv_survey(client, tv_survey_wire):
    resp = client.put("/api/v1/surveys/survey-tv", json=tv_survey_wire)
    assert resp.status_code == 200, resp.text
    return tv_survey_wire
