"""Name sanitizing and timestamp helpers for the OneNote export tool."""

import re
from datetime import datetime

MAX_NAME_LENGTH = 130

# Characters Windows refuses in file and folder names, plus control chars.
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

# Markdown-special characters dropped from names embedded in a link.
INSERTED_ASSET_STRIP_CHARS = "#$%^*[]'<>!@{};"

TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")
DISPLAY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def sanitize_name(name: str, preserve_spaces: bool = False) -> str:
    """Map a display name to a safe file or folder name.

    Examples:
        'Meeting: 3/4' -> 'Meeting--3-4'
        '[Draft] plan' -> '(Draft)-plan'
        'Team  notes' (preserve_spaces) -> 'Team notes'
    """
    safe = "-".join(_ILLEGAL_CHARS.split(name))
    safe = safe.replace("[", "(").replace("]", ")")

    if preserve_spaces:
        safe = re.sub(r"\s+", " ", safe)
    else:
        safe = re.sub(r"\s+", "-", safe)

    return safe[:MAX_NAME_LENGTH].strip()


def sanitize_inserted_asset_name(name: str, preserve_spaces: bool = False) -> str:
    """Sanitize a name that will be embedded inside a Markdown link."""
    stripped = "".join(c for c in name if c not in INSERTED_ASSET_STRIP_CHARS)
    return sanitize_name(stripped, preserve_spaces)


def format_timestamp(timestamp: str) -> str | None:
    """Convert '2023-05-01T10:00:00.000Z' to '2023-05-01 10:00:00'.

    Returns None when the value matches none of the accepted formats.
    """
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(timestamp, fmt)
        except ValueError:
            continue
        return parsed.strftime(DISPLAY_TIMESTAMP_FORMAT)
    return None


def link_target(path: str) -> str:
    """Encode spaces so a path can sit inside a Markdown link target."""
    return path.replace(" ", "%20")
