"""
Parser for the human-readable new-feature format:

    NAME: Add CSV export
    CATEGORY: reports
    DESCRIPTION: Export the report table as CSV
    ---
    free-form instructions for the worker,
    kept verbatim

NAME is required. CATEGORY defaults to config.DEFAULT_CATEGORY and
DESCRIPTION to the name. Everything after the first ``---`` line is the
instruction payload, sliced from the input as-is (line endings included).
"""

from __future__ import annotations

import re

import config
from features.errors import ValidationError
from features.queue.models import FeatureDraft

SEPARATOR = "---"

_MARKER_RE = re.compile(r"^\s*(NAME|CATEGORY|DESCRIPTION)\s*:\s*(.*?)\s*$", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"^[ \t]*" + re.escape(SEPARATOR) + r"[ \t]*\r?$", re.MULTILINE)


def parse_feature_text(text: str) -> FeatureDraft:
    """Parse one feature block. Raises ValidationError when NAME is missing."""
    text = text or ""
    fence = _SEPARATOR_RE.search(text)
    if fence:
        header, body = text[:fence.start()], text[fence.end():]
    else:
        header, body = text, ""

    fields: dict[str, str] = {}
    for line in header.splitlines():
        match = _MARKER_RE.match(line)
        if match:
            fields.setdefault(match.group(1).lower(), match.group(2))

    name = fields.get("name", "")
    if not name:
        raise ValidationError("Feature text must include a non-empty 'NAME:' line")

    instructions = body.strip("\r\n")
    return FeatureDraft(
        name=name,
        category=fields.get("category") or config.DEFAULT_CATEGORY,
        description=fields.get("description") or name,
        instructions=instructions if instructions.strip() else None,
    )
