"""Helpers for remote (allocation) paths, which always use '/' separators."""

from __future__ import annotations

import os
import secrets

ENCRYPTED_FOLDER_NAME = "encrypted"


def _clean(path: str, separators: str) -> str:
    """Lexically clean a slash-separated path.

    ``separators`` are the characters that end a path element; only '/'
    marks the end of a '.' or '..' element.
    """
    if not path:
        return "."
    rooted = path[0] == "/"
    n = len(path)
    out: list[str] = []
    r = dotdot = 0
    if rooted:
        out.append("/")
        r = dotdot = 1
    while r < n:
        c = path[r]
        if c in separators:
            r += 1
        elif c == "." and (r + 1 == n or path[r + 1] == "/"):
            r += 1
        elif c == "." and path[r + 1] == "." and (r + 2 == n or path[r + 2] == "/"):
            r += 2
            if len(out) > dotdot:
                w = len(out) - 1
                while w > dotdot and out[w] != "/":
                    w -= 1
                del out[w:]
            elif not rooted:
                if out:
                    out.append("/")
                out.extend("..")
                dotdot = len(out)
        else:
            if (rooted and len(out) != 1) or (not rooted and out):
                out.append("/")
            start = r
            while r < n and path[r] not in separators:
                r += 1
            out.extend(path[start:r])
    return "".join(out) if out else "."


def remote_clean(path: str) -> str:
    """Return the shortest equivalent remote path; '\\' also separates elements."""
    return _clean(path, "/\\")


def is_remote_abs(path: str) -> bool:
    return path.startswith("/")


def get_full_remote_path(local_path: str, remote_path: str) -> str:
    """Append the local file name when the remote path is empty or names a directory."""
    if not remote_path or remote_path.endswith("/"):
        remote_path = remote_path.rstrip("/")
        file_name = os.path.split(local_path)[1]
        remote_path = f"{remote_path}/{file_name}"
    return remote_path


def join(a: str, b: str) -> str:
    """Join two path parts, clean the result and normalise separators to '/'."""
    parts = [p for p in (a, b) if p]
    if not parts:
        return ""
    return _clean("/".join(parts), "/").replace("\\", "/")


def new_connection_id() -> str:
    """Return a random connection identifier as a decimal string."""
    return str(secrets.randbelow(0xFFFFFFFF))