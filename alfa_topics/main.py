# alfa_topics/main.py
from __future__ import annotations
from pathlib import Path
import logging
import sys
import yaml

from alfa_topics.core.classify import schema_from_config
from alfa_topics.core.metrics import topic_metrics
from alfa_topics.core.plotting import save_field_plot
from alfa_topics.core.reports import write_topic_report
from alfa_topics.core.topic import Topic

def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def main(argv: list[str] | None = None) -> int:
    # ---------- config ----------
    argv = sys.argv[1:] if argv is None else argv
    here = Path(__file__).resolve().parent
    cfg_path = Path(argv[0]) if argv else here / "config.yaml"
    cfg = load_config(cfg_path)

    verbose = bool(cfg.get("logging", {}).get("verbose", True))
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format="[%(levelname)s] %(name)s: %(message)s")

    in_cfg = cfg.get("input", {})
    in_path = Path(in_cfg.get("path", "")).expanduser()
    topic_name = str(in_cfg.get("topic_name") or in_path.stem)
    schema = schema_from_config(cfg)
    if verbose:
        print(f"[cfg] input={in_path} topic={topic_name}")

    # ---------- load ----------
    topic = Topic(topic_name=topic_name, schema=schema)
    result = topic.read_from_file(in_path)
    if result.state == "failed":
        print(f"[WARN] could not load {in_path}: {result.error}")
        return 1
    if result.partial:
        print(f"[WARN] {in_path.name}: kept {result.n_records} message(s) before: {result.error}")

    # ---------- print ----------
    p_cfg = cfg.get("print", {})
    n_printed = topic.print(int(p_cfg.get("start", 0)), int(p_cfg.get("count", -1)),
                            str(p_cfg.get("separator", " | ")))
    if verbose:
        m = topic_metrics(topic)
        print(f"[summary] printed {n_printed}/{m['n_messages']} message(s), "
              f"{m['n_fields']} field(s), {m['duration_s']} s at {m['rate_hz']} Hz, fault={m['is_fault']}")

    # ---------- export ----------
    e_cfg = cfg.get("export") or {}
    if e_cfg.get("enabled", False):
        out_dir = Path(e_cfg.get("directory", "out")).expanduser()
        write_topic_report(topic, out_dir / (topic_name or "topic"),
                           fmt=str(e_cfg.get("format", "csv")).lower(),
                           mat_variable=str(e_cfg.get("mat_variable", "topic")))
        if e_cfg.get("plot", False):
            save_field_plot(topic, e_cfg.get("plot_fields") or None, out_dir)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
