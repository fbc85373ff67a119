# alfa_topics/core/model.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Literal
import pandas as pd

ColumnTag = Literal["timestamp", "header_seq", "header_stamp", "header_frame_id", "field"]
TopicState = Literal["empty", "loading", "loaded", "failed"]

@dataclass(frozen=True)
class TopicSchema:
    """Reserved strings of the dataset CSV layout plus the labels used when printing."""
    delimiter: str = ","
    field_prefix: str = "field."
    time_marker: str = "%time"
    header_seq: str = "header.seq"
    header_stamp: str = "header.stamp"
    header_frame_id: str = "header.frame_id"
    fault_prefix: str = "failure_status"

    index_label: str = "Index"
    datetime_label: str = "Date/Time Stamp"
    seq_label: str = "SeqID"
    stamp_label: str = "Time Stamp"
    frame_label: str = "Frame"

    def triple_markers(self) -> dict[str, ColumnTag]:
        return {
            self.field_prefix + self.header_seq: "header_seq",
            self.field_prefix + self.header_stamp: "header_stamp",
            self.field_prefix + self.header_frame_id: "header_frame_id",
        }

@dataclass(frozen=True)
class NormalizedHeader:
    raw_labels: tuple[str, ...]
    tags: tuple[ColumnTag, ...]
    labels: tuple[str, ...]          # display labels, one per "field" column
    has_triple: bool

    @property
    def field_indices(self) -> tuple[int, ...]:
        return tuple(i for i, t in enumerate(self.tags) if t == "field")

    def index_of(self, tag: ColumnTag) -> int | None:
        for i, t in enumerate(self.tags):
            if t == tag:
                return i
        return None

@dataclass(frozen=True)
class RowWidths:
    seq: int = 0
    stamp: int = 0
    frame_id: int = 0
    fields: tuple[int, ...] = ()

@dataclass(frozen=True)
class ColumnWidths:
    seq: int = 0
    stamp: int = 0
    frame_id: int = 0
    fields: tuple[int, ...] = ()

@dataclass
class Record:
    date_time: pd.Timestamp          # NaT when the row carries no usable %time
    seq: str
    stamp: str
    frame_id: str
    fields: list[str]
    labels: tuple[str, ...]

    def _position(self, key: str | int) -> int:
        if isinstance(key, int):
            return key
        try:
            return self.labels.index(key)
        except ValueError:
            raise KeyError(key) from None

    def field(self, key: str | int) -> str:
        return self.fields[self._position(key)]

    def value(self, key: str | int):
        from .normalize import coerce_token
        return coerce_token(self.field(key))

    def format_datetime(self) -> str:
        if pd.isna(self.date_time):
            return "N/A"
        return self.date_time.strftime("%Y-%m-%d %H:%M:%S.%f")

    def render(self, widths: ColumnWidths, has_triple: bool, separator: str = " | ",
               datetime_width: int = 0) -> str:
        parts = [f"{self.format_datetime():>{datetime_width}}"]
        if has_triple:
            parts += [f"{self.seq:>{widths.seq}}",
                      f"{self.stamp:>{widths.stamp}}",
                      f"{self.frame_id:>{widths.frame_id}}"]
        for i, text in enumerate(self.fields):
            w = widths.fields[i] if i < len(widths.fields) else 0
            parts.append(f"{text:>{w}}")
        return separator.join(parts)

@dataclass
class LoadResult:
    state: TopicState
    path: Path | None
    n_records: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state == "loaded" and self.error is None

    @property
    def partial(self) -> bool:
        # loaded, but reading stopped early at a malformed row
        return self.state == "loaded" and self.error is not None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error
