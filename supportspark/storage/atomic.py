"""Crash-safe JSON file helpers.

``atomic_write_json`` never leaves a half-written target behind: the payload
goes to a uniquely named temp file in the same directory, which is then
renamed over the target.  A reader sees either the old or the new document.
"""

from __future__ import annotations

import json
import logging
import os
import secrets
import time
from pathlib import Path
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _temp_path_for(path: Path) -> Path:
    # Same directory as the target so the rename never crosses a volume.
    suffix = f"{time.time_ns()}.{secrets.token_hex(4)}.tmp"
    return path.with_name(f"{path.name}.{suffix}")


def _write_file(path: Path, payload: str) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(payload)
        fh.flush()
        os.fsync(fh.fileno())


def atomic_write_json(path: Path, value: Any) -> None:
    """Serialise *value* and atomically replace *path* with it.

    Raises:
        OSError: Any failure writing or renaming the temp file.  The temp
            file is removed first and the previous target is left untouched.
        TypeError: If *value* is not JSON-serialisable (nothing is written).
    """
    path = Path(path)
    payload = json.dumps(value, indent=2, ensure_ascii=False)
    tmp_path = _temp_path_for(path)
    try:
        _write_file(tmp_path, payload)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove temp file %s", tmp_path)
        raise


def read_json(path: Path, default: T) -> T:
    """Return the parsed contents of *path*.

    When the file does not exist it is created holding *default*, which is
    then returned.  Malformed JSON and other I/O errors propagate.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Initialising missing file %s", path)
        atomic_write_json(path, default)
        return default
    return json.loads(content)
