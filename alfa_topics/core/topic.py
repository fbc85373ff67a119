# alfa_topics/core/topic.py
from __future__ import annotations
import logging
import sys
from pathlib import Path

import pandas as pd

from .classify import is_fault_topic
from .errors import MissingHeaderError, RowOverflowError
from .message import build_record
from .model import ColumnWidths, LoadResult, NormalizedHeader, Record, TopicSchema, TopicState
from .normalize import normalize_header, to_numeric_or_str, tokenize
from .widths import WidthTracker

_LOG = logging.getLogger(__name__)

_EMPTY_HEADER = NormalizedHeader(raw_labels=(), tags=(), labels=(), has_triple=False)

class Topic:
    """
    One topic of a dataset sequence, loaded from a single delimited file.

    States: "empty" -> "loading" -> "loaded" | "failed". A row with more fields
    than the header stops reading; rows before it are kept and the topic still
    ends up "loaded", with the error reported in the LoadResult.
    """

    def __init__(self, filename: str | Path = "", topic_name: str = "N/A",
                 schema: TopicSchema | None = None):
        self.schema = schema or TopicSchema()
        self.name = topic_name
        self.file_name: Path | None = None
        self.records: list[Record] = []
        self.state: TopicState = "empty"
        self.last_result: LoadResult | None = None
        self._header = _EMPTY_HEADER
        self._widths = WidthTracker()
        self._is_fault = False
        if filename:
            self.read_from_file(filename)

    # ---------- queries ----------
    @property
    def is_initialized(self) -> bool:
        return self.state == "loaded"

    @property
    def is_fault_topic(self) -> bool:
        return self._is_fault

    @property
    def has_header_triple(self) -> bool:
        return self._header.has_triple

    @property
    def field_labels(self) -> list[str]:
        return list(self._header.labels)

    @property
    def raw_labels(self) -> list[str]:
        return list(self._header.raw_labels)

    @property
    def column_widths(self) -> ColumnWidths:
        return self._widths.snapshot()

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return (f"Topic(name={self.name!r}, state={self.state!r}, "
                f"records={len(self.records)}, fields={len(self._header.labels)})")

    def clear(self) -> None:
        self.name = ""
        self.file_name = None
        self.records = []
        self.state = "empty"
        self._header = _EMPTY_HEADER
        self._widths.clear()
        self._is_fault = False

    # ---------- loading ----------
    def read_from_file(self, filename: str | Path) -> LoadResult:
        topic_name = self.name
        self.clear()
        self.name = topic_name
        path = Path(filename)
        self.file_name = path

        self.state = "loading"
        try:
            error = self._read(path)
        except (OSError, UnicodeDecodeError, MissingHeaderError) as e:
            _LOG.error("failed to load topic '%s' from %s: %s", self.name, path.name, e)
            n_read = len(self.records)
            self.records = []
            self._header = _EMPTY_HEADER
            self._widths.clear()
            self.state = "failed"
            self.last_result = LoadResult("failed", path, n_read, e)
            return self.last_result

        s = self.schema
        self._widths.finalize_with_labels(self._header.labels,
                                          len(s.seq_label), len(s.stamp_label), len(s.frame_label))
        self._is_fault = is_fault_topic(self.name, s)
        self.state = "loaded"

        if error is not None:
            _LOG.error("error converting line #%d of %s; keeping %d earlier row(s) of topic '%s'",
                       error.line_number, path.name, len(self.records), self.name)
        else:
            _LOG.info("loaded topic '%s': %d message(s), %d field(s)",
                      self.name, len(self.records), len(self._header.labels))
        self.last_result = LoadResult("loaded", path, len(self.records), error)
        return self.last_result

    def _read(self, path: Path) -> RowOverflowError | None:
        delim = self.schema.delimiter
        with path.open("r", encoding="utf-8-sig") as f:
            first = f.readline()
            if not first:
                raise MissingHeaderError(f"error reading the header from '{path}'", path)
            self._header = normalize_header(tokenize(first, delim), self.schema)
            n_cols = len(self._header.raw_labels)

            for line_number, line in enumerate(f, start=1):
                tokens = tokenize(line, delim)
                if len(tokens) > n_cols:
                    return RowOverflowError(path, line_number, len(tokens), n_cols)
                tokens += [""] * (n_cols - len(tokens))
                rec, row_widths = build_record(tokens, self._header)
                self._widths.observe_row(row_widths)
                self.records.append(rec)
        return None

    # ---------- printing ----------
    def format_header(self, separator: str = " | ") -> str:
        if not self.is_initialized or not self.records:
            return ""
        s = self.schema
        w = self._widths
        parts = [s.index_label, f"{s.datetime_label:>{self._datetime_width()}}"]
        if self._header.has_triple:
            parts += [f"{s.seq_label:>{w.seq}}",
                      f"{s.stamp_label:>{w.stamp}}",
                      f"{s.frame_label:>{w.frame_id}}"]
        parts += [f"{lbl:>{w.fields[i]}}" for i, lbl in enumerate(self._header.labels)]
        return separator + separator.join(parts) + separator

    def _datetime_width(self) -> int:
        if not self.records:
            return 0
        return max(len(self.records[0].format_datetime()), len(self.schema.datetime_label))

    def format_lines(self, start: int = 0, count: int = -1, separator: str = " | ") -> list[str]:
        if start < 0 or not self.is_initialized:
            return []
        if count < 0:
            count = len(self.records)
        widths = self.column_widths
        idx_w = len(self.schema.index_label)
        dt_w = self._datetime_width()
        out = []
        for i in range(start, min(start + count, len(self.records))):
            body = self.records[i].render(widths, self._header.has_triple, separator, dt_w)
            out.append(f"{separator}{i:>{idx_w}}{separator}{body}{separator}")
        return out

    def print_header(self, separator: str = " | ", file=None) -> int:
        """Print the column labels; returns the printed line length (0 if nothing printed)."""
        line = self.format_header(separator)
        if not line:
            return 0
        print(line, file=file if file is not None else sys.stdout)
        return len(line)

    def print(self, start: int = 0, count: int = -1, separator: str = " | ", file=None) -> int:
        """Print the header and `count` messages from `start` (all when negative). Returns lines printed."""
        if start < 0 or not self.is_initialized:
            return 0
        out = file if file is not None else sys.stdout
        header_len = self.print_header(separator, file=out)
        if header_len:
            print("-" * header_len, file=out)
        lines = self.format_lines(start, count, separator)
        for line in lines:
            print(line, file=out)
        return len(lines)

    # ---------- export ----------
    def to_dataframe(self) -> pd.DataFrame:
        """One row per message; field columns numeric where every value parses."""
        cols: dict[str, object] = {"date_time": pd.Series(pd.to_datetime([r.date_time for r in self.records]))}
        if self._header.has_triple:
            cols["seq"] = to_numeric_or_str(pd.Series([r.seq for r in self.records], dtype=object))
            cols["stamp"] = to_numeric_or_str(pd.Series([r.stamp for r in self.records], dtype=object))
            cols["frame_id"] = [r.frame_id for r in self.records]

        seen: dict[str, int] = {}
        for i, lbl in enumerate(self._header.labels):
            n = seen.get(lbl, 0)
            key = lbl if n == 0 else f"{lbl}.{n}"
            while key in cols:
                n += 1
                key = f"{lbl}.{n}"
            seen[lbl] = n + 1
            series = pd.Series([r.fields[i] for r in self.records], dtype=object)
            cols[key] = to_numeric_or_str(series)
        return pd.DataFrame(cols).reset_index(drop=True)
