from __future__ import annotations

import os
from pathlib import Path
from typing import List


def load_dotenv_if_present(path: str | Path | None = None) -> List[str]:
    """
    Minimal .env reader for local runs.

    - Reads KEY=VALUE lines from `path` (default: ".env" in the CWD).
    - Skips blank lines and "#" comments; strips one pair of surrounding quotes.
    - Never overwrites variables already present in os.environ.

    Returns the keys that were actually set, which is handy in tests.
    """
    env_path = Path(path or ".env")
    if not env_path.is_file():
        return []

    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return []

    loaded: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        if not key or key in os.environ:
            continue
        os.environ[key] = value
        loaded.append(key)

    return loaded


__all__ = ["load_dotenv_if_present"]
