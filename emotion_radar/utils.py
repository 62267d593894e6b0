"""Shared file helpers for emotion-radar."""

import json
import os
import tempfile

_MISSING = object()


def atomic_write_json(path: str, data, indent: int = 2) -> None:
    """Write JSON atomically.

    The payload goes to a temp file in the same directory which is fsynced
    and then renamed over *path*, so readers never see a torn file.
    Non-ASCII text is written as-is (UTF-8).
    """
    dir_path = os.path.dirname(path) or "."
    os.makedirs(dir_path, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=dir_path, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def read_json(path: str, default=_MISSING):
    """Read a JSON file.

    Returns *default* when the file does not exist (if given); parse errors
    always propagate as ``ValueError``.
    """
    if default is not _MISSING and not os.path.exists(path):
        return default
    with open(path, encoding="utf-8") as f:
        return json.load(f)
