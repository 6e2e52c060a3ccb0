from pathlib import Path
import json

def _ensure_exists(path: Path):
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"file not found: {p}")

def read_json(path: Path):
    _ensure_exists(path)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
