import re
import secrets
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import SplitResult, quote, urlsplit

from deferred_fetch.core.errors import InvalidURLError

MAX_BASENAME_LENGTH = 50

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_\-]")
# Characters a browser leaves as-is in a URL path; everything else is percent-encoded
_PATH_SAFE_CHARS = "/%!$&'()*+,;=:@~[]|^"

def is_valid_url(url: Optional[str]) -> bool:
    """Check that url is an absolute URL with a scheme and a host."""
    if not url or not isinstance(url, str) or url != url.strip():
        return False
    try:
        parts = urlsplit(url)
        # Accessing .port validates it
        parts.port
    except ValueError:
        return False
    return bool(_SCHEME_RE.match(parts.scheme) and parts.hostname)

def validate_url(url: Optional[str]) -> None:
    if not is_valid_url(url):
        raise InvalidURLError(f"Invalid URL format: {url}")

def _utc_timestamp(now: Optional[datetime] = None) -> str:
    """Compact sortable UTC timestamp, e.g. 20231027T103000Z"""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y%m%dT%H%M%S") + "Z"

def _normalized_path(parts: SplitResult) -> str:
    return quote(parts.path, safe=_PATH_SAFE_CHARS)

def url_basename(url: str) -> str:
    """
    Sanitized base name for a URL: the last non-empty path segment, or the
    host name when the path is empty.
    """
    parts = urlsplit(url)
    segments = [s for s in _normalized_path(parts).split("/") if s]
    base_name = segments[-1] if segments else (parts.hostname or "")
    return _UNSAFE_FILENAME_CHARS.sub("_", base_name)[:MAX_BASENAME_LENGTH]

def generate_unique_filename(
    url: str,
    extension: str,
    *,
    now: Optional[datetime] = None,
    token: Optional[str] = None,
) -> str:
    """
    Build "<timestamp>-<random>-<basename>.<extension>" for a fetched URL.

    Uniqueness comes from the timestamp plus 4 random bytes; there is no
    check against files already on disk.
    """
    timestamp = _utc_timestamp(now)
    if token is None:
        token = secrets.token_hex(4)
    return f"{timestamp}-{token}-{url_basename(url)}.{extension}"
