# src/osu2json/config.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import copy
import yaml

PKG_ROOT = Path(__file__).resolve().parent
DEFAULT_CFG_PATH = PKG_ROOT / "config.default.yaml"
USER_CFG_PATH = Path.home() / ".config" / "osu2json" / "config.yaml"

OUTPUT_FORMATS = ("json", "yaml")

def _safe_load(path: Path) -> Dict[str, Any]:
    try:
        if path.exists():
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        # a broken user file should not stop decoding
        pass
    return {}

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out

def load_config(
    user_path: Optional[Path] = None,
    default_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Packaged defaults merged with user overrides.
    Sections: 'decode' (max_repeat_count, start_time_offset),
    'output' (format, indent), 'watch' (debounce_seconds).
    """
    dpath = Path(default_path) if default_path else DEFAULT_CFG_PATH
    upath = Path(user_path) if user_path else USER_CFG_PATH

    cfg = _deep_merge(_safe_load(dpath), _safe_load(upath))

    # "output:" with nothing below it loads as None
    for section in ("decode", "output", "watch"):
        if not isinstance(cfg.get(section), dict):
            cfg[section] = {}

    cfg.setdefault("decode", {}).setdefault("max_repeat_count", 9000)
    cfg["decode"].setdefault("start_time_offset", 0)
    cfg.setdefault("output", {}).setdefault("format", "json")
    cfg["output"].setdefault("indent", 2)
    cfg.setdefault("watch", {}).setdefault("debounce_seconds", 0.3)
    return cfg

def get_output_format(cfg: Dict[str, Any]) -> str:
    fmt = str((cfg.get("output") or {}).get("format", "json")).lower()
    return fmt if fmt in OUTPUT_FORMATS else "json"

def get_indent(cfg: Dict[str, Any]) -> int:
    try:
        return max(0, int((cfg.get("output") or {}).get("indent", 2)))
    except (TypeError, ValueError):
        return 2
