# alfa_topics/core/metrics.py
from __future__ import annotations
import numpy as np
import pandas as pd

from .topic import Topic

def message_rate_hz(times: pd.Series) -> float:
    t = pd.to_datetime(times).dropna().sort_values()
    if t.shape[0] < 2:
        return 0.0
    dt_s = np.diff(t.to_numpy().astype("datetime64[ns]").astype(np.int64)) / 1e9
    dt_s = dt_s[dt_s > 0]
    if dt_s.size == 0:
        return 0.0
    return float(1.0 / np.mean(dt_s))

def topic_metrics(topic: Topic) -> dict:
    base = {"topic": topic.name, "is_fault": topic.is_fault_topic,
            "n_messages": len(topic.records), "n_fields": len(topic.field_labels)}
    df = topic.to_dataframe() if topic.is_initialized else pd.DataFrame()
    times = df["date_time"].dropna() if "date_time" in df.columns else pd.Series(dtype="datetime64[ns]")
    if times.empty:
        return {**base, "start_time": "", "end_time": "", "duration_s": 0.0, "rate_hz": 0.0}
    start, end = times.min(), times.max()
    return {
        **base,
        "start_time": start.strftime("%Y-%m-%d %H:%M:%S.%f"),
        "end_time":   end.strftime("%Y-%m-%d %H:%M:%S.%f"),
        "duration_s": round((end - start).total_seconds(), 6),
        "rate_hz":    round(message_rate_hz(times), 6),
    }
