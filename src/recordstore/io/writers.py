from pathlib import Path
from typing import Any, Optional
import json

def atomic_write_json(data: Any, out: Path, indent: Optional[int] = None) -> None:
    out.parent.mkdir(parents=True, exist_ok=True)
    tmp = out.with_suffix(out.suffix + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        tmp.replace(out)         # atomic replace on same filesystem
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
