"""
File primitives shared by the stores: per-file locks, atomic replace, and
single-call appends.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

PathLike = Union[str, Path]

_registry_guard = threading.Lock()
_file_locks: Dict[str, threading.Lock] = {}


def lock_for(path: PathLike) -> threading.Lock:
    """Return the process-wide lock owned by ``path``.

    Every store instance pointing at the same file shares one lock; different
    files never contend.
    """
    key = os.path.abspath(os.fspath(path))
    with _registry_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _file_locks[key] = lock
        return lock


def atomic_write_text(path: PathLike, text: str) -> None:
    """Write ``text`` to a temp file next to ``path`` and replace ``path`` with it.

    Raises OSError on failure; the original file is left untouched.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def append_text(path: PathLike, text: str) -> None:
    """Append ``text`` with a single write call."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8", newline="") as fh:
        fh.write(text)


def read_text(path: PathLike) -> Optional[str]:
    """Read a whole file, or None when it does not exist."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except FileNotFoundError:
        return None


def read_json_object(path: PathLike) -> Optional[Dict[str, Any]]:
    """Load a JSON object from ``path``.

    Returns None when the file is missing, unreadable, malformed, or its root
    is not an object.
    """
    try:
        text = read_text(path)
    except (OSError, UnicodeDecodeError):
        return None
    if text is None:
        return None
    try:
        obj = json.loads(text)
    except ValueError:
        return None
    return obj if isinstance(obj, dict) else None


def write_json_object(path: PathLike, obj: Dict[str, Any]) -> None:
    """Pretty-print ``obj`` to ``path`` atomically."""
    atomic_write_text(path, json.dumps(obj, indent=2, ensure_ascii=False) + "\n")
