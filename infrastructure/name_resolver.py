"""Display name resolution for references that point at local files."""

from __future__ import annotations

from pathlib import PurePath
from urllib.parse import unquote, urlsplit


class PathNameResolver:
    """Resolve ``file://`` URIs and plain paths to their file name.

    Other schemes (``content://``, ``http://`` ...) need a platform lookup and
    resolve to None, leaving the caller to fall back on the last path segment.
    """

    def resolve_display_name(self, reference: str) -> str | None:
        if not reference:
            return None
        parts = urlsplit(reference)
        if parts.scheme == "file":
            path = unquote(parts.path)
        elif "://" in reference:
            return None
        else:
            path = reference
        name = PurePath(path).name
        return name or None
