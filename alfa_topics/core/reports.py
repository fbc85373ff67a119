# alfa_topics/core/reports.py
from __future__ import annotations
import re
from pathlib import Path
from typing import Literal
import numpy as np
import pandas as pd
from scipy.io import savemat

from .topic import Topic

ReportFormat = Literal["csv", "mat", "both"]

def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> None:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df_out.to_csv(out_csv, index=False, encoding="utf-8")
    print(f"[OK] wrote report: {title} → {out_csv}")

def _to_mat_cellstr(seq: list[str]) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    seq2 = [("" if s is None else str(s)) for s in seq]
    arr = np.empty((len(seq2), 1), dtype=object)
    arr[:, 0] = seq2
    return arr

def _mat_name(col: str) -> str:
    # MATLAB struct fields: letters, digits, underscores; must start with a letter
    s = re.sub(r"[^A-Za-z0-9_]+", "_", col).strip("_")
    if not s or not s[0].isalpha():
        s = "f_" + s
    return s[:63]

def _write_mat(df_out: pd.DataFrame, out_mat: Path, varname: str, title: str) -> None:
    """
    Save a MATLAB struct with one field per column.
    Strings become cell arrays (Nx1), numerics become double (Nx1), time is a cell of text.
    """
    out_mat.parent.mkdir(parents=True, exist_ok=True)
    mat_struct: dict[str, np.ndarray] = {}
    for col in df_out.columns:
        s = df_out[col]
        key = _mat_name(str(col))
        while key in mat_struct:
            key += "_"
        if pd.api.types.is_datetime64_any_dtype(s):
            text = s.dt.strftime("%Y-%m-%d %H:%M:%S.%f").fillna("").tolist()
            mat_struct[key] = _to_mat_cellstr(text)
        elif pd.api.types.is_numeric_dtype(s):
            mat_struct[key] = s.to_numpy(dtype=float).reshape(-1, 1)
        else:
            mat_struct[key] = _to_mat_cellstr(s.astype(str).tolist())
    savemat(out_mat, {varname: mat_struct})
    print(f"[OK] wrote report: {title} → {out_mat}")

def write_topic_report(topic: Topic,
                       out_base: Path,
                       fmt: ReportFormat = "csv",
                       mat_variable: str = "topic") -> list[Path]:
    """
    Export a loaded topic, one row per message.
    - out_base is a *base path without extension* (e.g., .../mavros-nav_info-roll)
    - fmt: "csv" | "mat" | "both"
    Returns the files written (nothing for an unloaded topic).
    """
    if not topic.is_initialized:
        return []
    df_out = topic.to_dataframe()
    title = topic.name or out_base.name
    written: list[Path] = []
    if fmt in ("csv", "both"):
        _write_csv(df_out, out_base.with_suffix(".csv"), title)
        written.append(out_base.with_suffix(".csv"))
    if fmt in ("mat", "both"):
        _write_mat(df_out, out_base.with_suffix(".mat"), mat_variable, title)
        written.append(out_base.with_suffix(".mat"))
    return written
