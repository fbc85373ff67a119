# alfa_topics/core/message.py
from __future__ import annotations
from typing import Sequence

from .model import NormalizedHeader, Record, RowWidths
from .normalize import to_timestamp

def build_record(tokens: Sequence[str], header: NormalizedHeader) -> tuple[Record, RowWidths]:
    """
    Turn one data row into a Record plus the widths it needs for aligned printing.
    `tokens` must already be padded to the header's column count.
    """
    def col(tag) -> str:
        i = header.index_of(tag)
        return tokens[i] if i is not None else ""

    seq = col("header_seq")
    stamp = col("header_stamp")
    frame_id = col("header_frame_id")
    fields = [tokens[i] for i in header.field_indices]

    rec = Record(
        date_time=to_timestamp(col("timestamp")),
        seq=seq,
        stamp=stamp,
        frame_id=frame_id,
        fields=fields,
        labels=header.labels,
    )
    widths = RowWidths(
        seq=len(seq),
        stamp=len(stamp),
        frame_id=len(frame_id),
        fields=tuple(len(f) for f in fields),
    )
    return rec, widths
