"""
Atomic JSON output: readers of the output file see the old tree or the new
one, never a partial write.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any


def atomic_write_json(data: Any, target_path: Path, *, indent: int = 2) -> None:
    """
    Serialise data as UTF-8 JSON (non-ASCII kept as is) into a uniquely named
    temp file next to target_path, then move it into place.

    The temp file is removed when serialisation or the move fails.
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target_path.name}.", suffix=".tmp", dir=target_path.parent,
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, target_path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise
