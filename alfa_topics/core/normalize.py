# alfa_topics/core/normalize.py
from __future__ import annotations
import pandas as pd

from .model import ColumnTag, NormalizedHeader, TopicSchema

def tokenize(line: str, delimiter: str) -> list[str]:
    """Plain delimiter split (no quoting). An empty line has no tokens."""
    line = line.rstrip("\r\n")
    if not line:
        return []
    return line.split(delimiter)

def normalize_header(raw_labels, schema: TopicSchema) -> NormalizedHeader:
    """
    Classify every raw header column and derive the display labels.

      - the time marker column              -> "timestamp" (no display label)
      - prefix + header.seq/stamp/frame_id  -> header triple tags (no display label)
      - anything else                       -> "field", prefix stripped when present

    A header naming only part of the triple still counts as carrying one.
    """
    triple = schema.triple_markers()
    prefix = schema.field_prefix
    tags: list[ColumnTag] = []
    labels: list[str] = []
    has_triple = False

    for raw in raw_labels:
        if raw == schema.time_marker:
            tags.append("timestamp")
            continue
        if raw in triple:
            tags.append(triple[raw])
            has_triple = True
            continue
        tags.append("field")
        if prefix and raw.startswith(prefix):
            labels.append(raw[len(prefix):])
        else:
            labels.append(raw)

    return NormalizedHeader(
        raw_labels=tuple(raw_labels),
        tags=tuple(tags),
        labels=tuple(labels),
        has_triple=has_triple,
    )

def to_timestamp(token: str) -> pd.Timestamp:
    """%time columns hold integer nanoseconds since the epoch."""
    token = (token or "").strip()
    if not token:
        return pd.NaT
    try:
        return pd.Timestamp(int(token), unit="ns")
    except (ValueError, OverflowError):
        pass
    try:
        return pd.Timestamp(int(float(token)), unit="ns")
    except (ValueError, OverflowError):
        return pd.NaT

def coerce_token(token: str):
    s = token.strip()
    if not s:
        return token
    try:
        return int(s)
    except ValueError:
        pass
    try:
        return float(s)
    except ValueError:
        return token

def to_numeric_or_str(s: pd.Series) -> pd.Series:
    """Numeric dtype when every non-empty cell parses, otherwise the text as-is."""
    blank = s.astype(str).str.strip() == ""
    num = pd.to_numeric(s.where(~blank), errors="coerce")
    if num[~blank].notna().all():
        return num
    return s.astype(str)
