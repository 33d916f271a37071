"""Helper functions for HTTP header handling."""

import re
from typing import Optional
from urllib.parse import quote


_UNSAFE_FILENAME_CHARS = re.compile(r'["\\\x00-\x1f\x7f]')


def sanitize_filename(filename: Optional[str], default: str) -> str:
    """
    Clean a client supplied filename for use in a Content-Disposition header.

    Quotes, backslashes and control characters are removed. Falls back to
    ``default`` when nothing usable is left.
    """
    if not filename:
        return default

    cleaned = _UNSAFE_FILENAME_CHARS.sub("", filename).strip()
    return cleaned or default


def content_disposition(filename: str) -> str:
    """Build an attachment Content-Disposition header value."""
    try:
        filename.encode("latin-1")
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
        return f'attachment; filename="{fallback}"; filename*=UTF-8\'\'{quote(filename)}'

    return f'attachment; filename="{filename}"'
