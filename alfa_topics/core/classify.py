# alfa_topics/core/classify.py
from __future__ import annotations
import dataclasses
import logging

from .model import TopicSchema

_LOG = logging.getLogger(__name__)

def schema_from_config(cfg: dict | None) -> TopicSchema:
    """
    Build the schema from the optional `schema:` section of config.yaml.
    Unknown keys are ignored, missing keys keep the dataset defaults.
    """
    section = (cfg or {}).get("schema", {}) if cfg else {}
    if not isinstance(section, dict):
        section = {}
    known = {f.name for f in dataclasses.fields(TopicSchema)}
    overrides = {}
    for k, v in section.items():
        if k not in known:
            _LOG.warning("ignoring unknown schema key '%s'", k)
            continue
        if v is None or (k == "delimiter" and str(v) == ""):
            _LOG.warning("empty value for schema key '%s'; keeping default %r", k,
                         getattr(TopicSchema, k))
            continue
        overrides[k] = str(v)
    return TopicSchema(**overrides)

def is_fault_topic(name: str, schema: TopicSchema) -> bool:
    """Fault topics carry the reserved fault prefix at the start of their name."""
    prefix = schema.fault_prefix
    name = name or ""
    if len(name) < len(prefix):
        return False
    return name[:len(prefix)] == prefix
