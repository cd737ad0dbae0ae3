import re

_TAG_RE = re.compile(r'<[^>]*>')

def sanitize_string(v: str) -> str:
    if not isinstance(v, str):
        return v
    # Strip HTML tags, then surrounding whitespace
    return _TAG_RE.sub('', v).strip()

def sanitize_optional(v: str | None) -> str | None:
    """Like sanitize_string, but blank input collapses to None."""
    v = sanitize_string(v)
    if isinstance(v, str) and not v:
        return None
    return v
