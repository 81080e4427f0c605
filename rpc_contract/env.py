from __future__ import annotations

import os
from pathlib import Path


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def load_env_file(path: Path, *, override: bool = False) -> int:
    """
    Load `KEY=value` lines from a dotenv file into os.environ.

    Blank lines and `#` comments are skipped, an `export ` prefix is allowed
    and a value wrapped in matching quotes is unwrapped. A missing file is not
    an error. Returns the number of variables set.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return 0

    count = 0
    for line in raw.splitlines():
        s = line.strip()
        if not s or s.startswith("#") or "=" not in s:
            continue
        if s.startswith("export "):
            s = s[len("export ") :]
        key, value = s.split("=", 1)
        key = key.strip()
        if not key:
            continue
        if override or os.environ.get(key) is None:
            os.environ[key] = _unquote(value.strip())
            count += 1
    return count
