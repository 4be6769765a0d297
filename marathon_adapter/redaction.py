import re
from urllib.parse import urlsplit


_SECRET_PATTERNS = [
    re.compile(r"(Authorization\s*:\s*)([^\n\r]+)", re.IGNORECASE),
    re.compile(r"((?:Bearer|Basic)\s+)\S+", re.IGNORECASE),
    re.compile(r"((?:access|id|refresh)_token=)[^&\s]+", re.IGNORECASE),
    re.compile(r"((?:token|api_key|password|secret)=)[^&\s]+", re.IGNORECASE),
    re.compile(r"(\"(?:password|secret|token)\"\s*:\s*)\"[^\"]*\"", re.IGNORECASE),
]


def redact_url(value: str) -> str:
    if not value:
        return ""
    try:
        parsed = urlsplit(value)
        port = parsed.port
    except ValueError:
        return "<redacted-url>"
    if not parsed.scheme or not parsed.hostname:
        return "<redacted-url>"
    # Userinfo, path and query are dropped.
    host = f"{parsed.hostname}:{port}" if port else parsed.hostname
    return f"{parsed.scheme}://{host}/..."


def redact_text(value: str) -> str:
    if not value:
        return value
    redacted = value
    for pattern in _SECRET_PATTERNS:
        redacted = pattern.sub(r"\1[REDACTED]", redacted)
    redacted = re.sub(r"https?://[^\s\"']+", lambda match: redact_url(match.group(0)), redacted)
    return redacted
