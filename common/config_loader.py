from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict
import yaml

def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def load_contract(path: str | Path) -> Dict[str, Any]:
    """Read a raw holding contract from a .json or .yaml file."""
    p = Path(path)
    if p.suffix.lower() in (".yaml", ".yml"):
        return load_yaml(p)
    with p.open("r", encoding="utf-8") as f:
        return json.load(f) or {}

def load_view_config(path: str | Path = "config/holdings.yaml") -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    return load_yaml(p)
