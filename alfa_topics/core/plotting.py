# alfa_topics/core/plotting.py
from __future__ import annotations
import re
from pathlib import Path
from typing import Sequence
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .topic import Topic

_NON_FIELD_COLUMNS = ("date_time", "seq", "stamp", "frame_id")

def _sanitize(name: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("_")
    return s[:120] if len(s) > 120 else s

def _thin_xy(x, y, max_points: int):
    """Light decimator: keep at most max_points evenly spaced points."""
    n = len(x)
    if n <= max_points or max_points <= 0:
        return x, y
    idx = np.linspace(0, n - 1, max_points).astype(int)
    return x[idx], y[idx]

def save_field_plot(topic: Topic,
                    fields: Sequence[str] | None,
                    out_dir: Path,
                    max_points: int = 20000) -> Path | None:
    """
    Plot numeric fields of a topic against its message date/time.
    `fields=None` plots every numeric field. Returns the PNG path, or None when skipped.
    """
    if not topic.is_initialized or not topic.records:
        print(f"[SKIP] {topic.name}: no messages to plot.")
        return None

    df = topic.to_dataframe()
    wanted = list(fields) if fields else [c for c in df.columns if c not in _NON_FIELD_COLUMNS]
    prepared: list[tuple[np.ndarray, np.ndarray, str]] = []
    for col in wanted:
        if col not in df.columns or not pd.api.types.is_numeric_dtype(df[col]):
            continue
        mask = df[col].notna() & df["date_time"].notna()
        if not mask.any():
            continue
        x, y = _thin_xy(df.loc[mask, "date_time"].to_numpy(), df.loc[mask, col].to_numpy(), max_points)
        prepared.append((x, y, col))

    if not prepared:
        print(f"[SKIP] {topic.name}: no numeric data in {wanted}.")
        return None

    out_dir.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(11, 5))
    for x, y, label in prepared:
        plt.plot(x, y, label=label)
    plt.xlabel("Date/Time")
    plt.ylabel("Value")
    fault = " [fault]" if topic.is_fault_topic else ""
    plt.title(f"Topic: {topic.name}{fault}")
    plt.grid(True, alpha=0.3)
    plt.legend(fontsize=8, ncol=4, loc="upper center",
               bbox_to_anchor=(0.5, -0.15), frameon=False)
    plt.tight_layout(rect=[0, 0.12, 1, 1])
    out_path = out_dir / f"{_sanitize(topic.name) or 'topic'}_fields.png"
    plt.savefig(out_path, dpi=160)
    plt.close()
    print(f"[OK] {topic.name}: {len(prepared)} field(s) → {out_path}")
    return out_path
