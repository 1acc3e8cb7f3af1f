"""Row-merge resolution for table questions.

A table column may merge several rows into one visual cell: the top cell
(the anchor) carries ``rowspan > 1`` and the cells it covers are flagged
``isHidden``. These helpers answer, for a (row, column) coordinate, which
rows share that visual cell and which row anchors it. Merge shape is static
definition data, so every function here is pure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from survey_flow.models.survey import Cell, Question, Row


@dataclass(frozen=True)
class MergeGroup:
    anchor_row_id: str
    member_row_ids: Tuple[str, ...]

    @property
    def is_merged(self) -> bool:
        return len(self.member_row_ids) > 1


def _row_index(rows: Sequence[Row], row_id: str) -> Optional[int]:
    for index, row in enumerate(rows):
        if row.id == row_id:
            return index
    return None


def cell_at(row: Row, column_index: Optional[int]) -> Optional[Cell]:
    if column_index is None or column_index < 0 or column_index >= len(row.cells):
        return None
    return row.cells[column_index]


def _span_group(rows: Sequence[Row], start: int, span: int) -> MergeGroup:
    members = [row.id for row in rows[start:start + span]]
    return MergeGroup(anchor_row_id=rows[start].id, member_row_ids=tuple(members))


def _covering_anchor_index(rows: Sequence[Row], row_index: int, column_index: int) -> Optional[int]:
    """Nearest row above ``row_index`` whose visible cell spans down over it."""
    for r in range(row_index - 1, -1, -1):
        cell = cell_at(rows[r], column_index)
        if cell is None or cell.is_hidden:
            continue
        if r + cell.span - 1 >= row_index:
            return r
    return None


def merge_group(table: Question, row_id: str, column_index: Optional[int]) -> MergeGroup:
    """Return the merge group covering ``row_id`` at ``column_index``.

    - Unmerged visible cell: singleton group anchored on itself.
    - Visible anchor with rowspan > 1: rows [i, i + rowspan - 1] (clipped).
    - Hidden cell: anchored on the nearest covering row above.
    - Unknown row, missing cell, or no covering anchor: singleton.
    """
    singleton = MergeGroup(anchor_row_id=row_id, member_row_ids=(row_id,))
    rows: List[Row] = table.rows
    row_index = _row_index(rows, row_id)
    if row_index is None:
        return singleton
    cell = cell_at(rows[row_index], column_index)
    if cell is None:
        return singleton
    if not cell.is_hidden:
        if cell.span > 1:
            return _span_group(rows, row_index, cell.span)
        return singleton
    anchor_index = _covering_anchor_index(rows, row_index, column_index)  # type: ignore[arg-type]
    if anchor_index is None:
        return singleton
    anchor_cell = cell_at(rows[anchor_index], column_index)
    return _span_group(rows, anchor_index, anchor_cell.span if anchor_cell else 1)


def anchor_cell(table: Question, row_id: str, column_index: Optional[int]) -> Optional[Tuple[Row, Cell]]:
    """Return the (row, cell) that anchors the merge group at the coordinate."""
    group = merge_group(table, row_id, column_index)
    row = table.find_row(group.anchor_row_id)
    if row is None:
        return None
    cell = cell_at(row, column_index)
    if cell is None:
        return None
    return row, cell


__all__ = ["MergeGroup", "merge_group", "anchor_cell", "cell_at"]
