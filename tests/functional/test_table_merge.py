"""Row-merge resolution for table cells."""

from __future__ import annotations

from survey_flow.logic.table_merge import MergeGroup, anchor_cell, merge_group
from survey_flow.models.survey import Question


def test_hidden_cell_resolves_to_anchor_above(merged_table):
    group = merge_group(merged_table, "row4", 0)
    assert group == MergeGroup(anchor_row_id="row3", member_row_ids=("row3", "row4"))
    assert group.is_merged


def test_anchor_cell_reports_its_span(merged_table):
    assert merge_group(merged_table, "row3", 0).member_row_ids == ("row3", "row4")


def test_unmerged_cells_are_singletons(merged_table):
    assert merge_group(merged_table, "row1", 0) == MergeGroup("row1", ("row1",))
    assert merge_group(merged_table, "row4", 1) == MergeGroup("row4", ("row4",))
    assert not merge_group(merged_table, "row5", 0).is_merged


def test_unknown_row_or_column_is_a_singleton(merged_table):
    assert merge_group(merged_table, "row-missing", 0) == MergeGroup("row-missing", ("row-missing",))
    assert merge_group(merged_table, "row4", 9) == MergeGroup("row4", ("row4",))
    assert merge_group(merged_table, "row4", None) == MergeGroup("row4", ("row4",))


def test_span_is_clipped_at_table_end():
    table = Question.model_validate(
        {
            "id": "t",
            "type": "table",
            "tableRowsData": [
                {"id": "r1", "cells": [{"id": "c1", "type": "text", "rowspan": 5}]},
                {"id": "r2", "cells": [{"id": "c2", "type": "text", "isHidden": True}]},
            ],
        }
    )
    assert merge_group(table, "r1", 0).member_row_ids == ("r1", "r2")
    assert merge_group(table, "r2", 0).anchor_row_id == "r1"


def test_hidden_cell_without_anchor_is_a_singleton():
    table = Question.model_validate(
        {
            "id": "t",
            "type": "table",
            "tableRowsData": [
                {"id": "r1", "cells": [{"id": "c1", "type": "text"}]},
                {"id": "r2", "cells": [{"id": "c2", "type": "text", "isHidden": True}]},
            ],
        }
    )
    assert merge_group(table, "r2", 0) == MergeGroup("r2", ("r2",))


def test_anchor_cell_returns_the_anchor_row_and_cell(merged_table):
    row, cell = anchor_cell(merged_table, "row4", 0)
    assert row.id == "row3"
    assert cell.id == "r3-group"
    assert anchor_cell(merged_table, "row4", 8) is None
