"""JSON config document access: nested lookups, ancestor creation, atomic writes."""

import json
import os
import tempfile
from typing import Any, Optional

_MISSING = object()


def get_path(doc: dict, *keys: str, default: Any = None) -> Any:
    """
    Look up doc[k1][k2]... returning `default` if any step is missing or
    is not an object.
    """
    node: Any = doc
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key, _MISSING)
        if node is _MISSING:
            return default
    return node


def has_path(doc: dict, *keys: str) -> bool:
    """Check whether doc[k1][k2]... exists (its value may be null)."""
    return get_path(doc, *keys, default=_MISSING) is not _MISSING


def ensure_object(doc: dict, *keys: str) -> dict:
    """
    Return doc[k1][k2]..., creating empty objects for missing ancestors.

    An ancestor that exists but is not an object (e.g. a string or null)
    is replaced by an empty object.
    """
    node = doc
    for key in keys:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    return node


def load_document(path: str) -> dict:
    """
    Read and parse a JSON config document.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not JSON or its root is not an object
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"config root must be a JSON object, got {type(data).__name__}")
    return data


def dump_document(doc: dict) -> str:
    """Serialise a document the way the host application writes it (2-space indent)."""
    return json.dumps(doc, indent=2, ensure_ascii=False)


def write_document_atomic(path: str, doc: dict) -> None:
    """
    Replace `path` with the serialised document without ever exposing a
    half-written file: write a sibling temp file, fsync, then os.replace.
    The original file mode is preserved, and a symlinked path keeps its link:
    the write lands on the file it points to.

    Raises:
        OSError: If the file cannot be written or replaced
    """
    path = os.path.realpath(path)
    directory = os.path.dirname(path)
    mode: Optional[int]
    try:
        mode = os.stat(path).st_mode & 0o777
    except FileNotFoundError:
        mode = None

    fd, tmp = tempfile.mkstemp(prefix=".openclaw.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(dump_document(doc))
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


__all__ = [
    "get_path",
    "has_path",
    "ensure_object",
    "load_document",
    "dump_document",
    "write_document_atomic",
]
