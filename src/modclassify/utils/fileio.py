"""
Atomic writes for result files.

Each write goes to a temporary file next to the destination and is then
moved into place with ``os.replace()``, so an interrupted run leaves either
the previous file or the complete new one.
"""

from __future__ import annotations

import json
import os
import tempfile
from typing import Any


def atomic_write_json(path: str | os.PathLike, data: Any, *, indent: int = 2) -> None:
    """Serialize *data* to JSON and write it atomically.

    Serialization happens before any file is touched, so unserializable
    data raises without creating anything on disk.
    """
    atomic_write_text(path, json.dumps(data, indent=indent))


def atomic_write_text(path: str | os.PathLike, content: str) -> None:
    """Write *content* to *path* atomically.

    Parameters
    ----------
    path:
        Destination file; its directory must exist.
    content:
        Text to write.
    """
    directory = os.path.dirname(os.fspath(path)) or "."
    fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as handle:
            handle.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
