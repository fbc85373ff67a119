# alfa_topics/core/widths.py
from __future__ import annotations
from typing import Sequence

from .model import ColumnWidths, RowWidths

class WidthTracker:
    """
    Running maximum text width per printed column.

    Widths only grow while a topic loads. `finalize_with_labels` runs once after
    the last row so no header label is ever wider than its column.
    """

    def __init__(self):
        self.seq = 0
        self.stamp = 0
        self.frame_id = 0
        self.fields: list[int] = []

    def clear(self) -> None:
        self.seq = self.stamp = self.frame_id = 0
        self.fields = []

    def observe_row(self, row: RowWidths) -> None:
        self.seq = max(self.seq, row.seq)
        self.stamp = max(self.stamp, row.stamp)
        self.frame_id = max(self.frame_id, row.frame_id)
        self._merge_fields(row.fields)

    def _merge_fields(self, widths: Sequence[int]) -> None:
        for i, w in enumerate(widths):
            if i == len(self.fields):
                self.fields.append(w)
            else:
                self.fields[i] = max(self.fields[i], w)

    def finalize_with_labels(self, labels: Sequence[str],
                             seq_len: int, stamp_len: int, frame_len: int) -> None:
        self.seq = max(self.seq, seq_len)
        self.stamp = max(self.stamp, stamp_len)
        self.frame_id = max(self.frame_id, frame_len)
        # columns no row reached (e.g. zero data rows) start from their label width
        self._merge_fields([len(lbl) for lbl in labels])

    def snapshot(self) -> ColumnWidths:
        return ColumnWidths(self.seq, self.stamp, self.frame_id, tuple(self.fields))
