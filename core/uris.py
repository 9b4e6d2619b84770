"""Helpers for reading identity and names out of reference strings.

References are opaque URI-like strings (``content://...``, ``file:///...`` or
plain paths). Nothing here touches the filesystem.
"""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def last_path_segment(reference: str) -> str | None:
    """Return the decoded last non-empty path segment, or None if there is none."""
    if not reference:
        return None
    try:
        path = urlsplit(reference).path
    except ValueError:
        return None
    segments = [s for s in path.split("/") if s]
    if not segments:
        return None
    return unquote(segments[-1])


def same_identity(a: str, b: str) -> bool:
    """True if `a` and `b` share a derived identity.

    The identity is the last path segment of `a`; when `a` has none, plain
    string equality is used instead.
    """
    ident = last_path_segment(a)
    if ident is None:
        return a == b
    return ident == last_path_segment(b)


def filename_from_uri(key: str) -> str | None:
    """Extract a filename from an exported URI key.

    Content URIs often carry the real path percent-encoded in one segment
    (``primary%3ADCIM%2Fcat.jpg``); when `key` contains escapes the whole
    string is decoded first and the text after the last ``/`` is used.
    """
    name = last_path_segment(key)
    if "%" in key:
        decoded = unquote(key)
        slash = decoded.rfind("/")
        if slash != -1:
            name = decoded[slash + 1 :]
    return name or None


def normalize_for_match(text: str) -> str:
    """Lowercase `text` and drop everything outside ``[a-z0-9]``."""
    return _NON_ALNUM.sub("", text.lower())
