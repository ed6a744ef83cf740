from __future__ import annotations
import json
import math
import os
from typing import Any
import yaml
from .beatmap import Beatmap

# ---------- helpers ----------

def _scrub(obj: Any) -> Any:
    """NaN/inf are not JSON; they become null."""
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, dict):
        return {k: _scrub(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_scrub(v) for v in obj]
    return obj

# ---------- public writer API ----------

def to_json(beatmap: Beatmap, indent: int = 2) -> str:
    return json.dumps(_scrub(beatmap.to_dict()), indent=indent or None, ensure_ascii=False)

def to_yaml(beatmap: Beatmap) -> str:
    return yaml.safe_dump(beatmap.to_dict(), sort_keys=False, allow_unicode=True)

def render(beatmap: Beatmap, fmt: str = "json", indent: int = 2) -> str:
    if fmt == "yaml":
        return to_yaml(beatmap)
    if fmt == "json":
        return to_json(beatmap, indent=indent)
    raise ValueError(f"unknown output format: {fmt!r}")

def write_output(beatmap: Beatmap, out_path: str, fmt: str = "json", indent: int = 2):
    """
    Writes the decoded beatmap to out_path (parent directories are created).
    """
    text = render(beatmap, fmt, indent)
    parent = os.path.dirname(os.path.abspath(out_path))
    os.makedirs(parent, exist_ok=True)
    with open(out_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
        if not text.endswith("\n"):
            f.write("\n")
