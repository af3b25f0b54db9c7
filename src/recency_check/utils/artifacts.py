from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Optional


def artifact_stem(directory: Path, context: str, when: Optional[datetime] = None) -> Path:
    """Return ``<directory>/<context>_<YYYYmmdd_HHMMSS>`` without an extension.

    The directory is created if needed. Unsafe characters in ``context`` are
    replaced with underscores.
    """
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    safe = re.sub(r"[^A-Za-z0-9_.-]+", "_", context).strip("_") or "artifact"
    return directory / f"{safe}_{timestamp}"
