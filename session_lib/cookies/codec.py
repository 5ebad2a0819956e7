"""Cookie header parsing and Set-Cookie serialization.

Expiry values follow the CGI cookie conventions:

    '+3M'        three months from now (a month is 30 days)
    '-10m'       ten minutes ago, which makes the client drop the cookie
    '+1 hour'    spelled-out units work too
    'now'        expire immediately
    3600         seconds from now
    None         session cookie, no expires attribute

Any other string is treated as an absolute date and passed through.
"""
from __future__ import annotations
import re
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Callable, Dict, Optional, Union
from urllib.parse import quote, unquote

from starlette.requests import cookie_parser

Expiry = Union[str, int, float, datetime, None]

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "M": 30 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}

_WORD_UNITS = {
    "sec": "s", "second": "s",
    "min": "m", "minute": "m",
    "hr": "h", "hour": "h",
    "day": "d",
    "week": "w",
    "month": "M",
    "year": "y",
}

_RELATIVE_RE = re.compile(r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*([A-Za-z]*)$")


def _unit_seconds(unit: str) -> int:
    if not unit:
        return 1
    if unit in _UNIT_SECONDS:
        return _UNIT_SECONDS[unit]
    word = unit.lower()
    if word.endswith("s") and word[:-1] in _WORD_UNITS:
        word = word[:-1]
    if word in _WORD_UNITS:
        return _UNIT_SECONDS[_WORD_UNITS[word]]
    raise ValueError(f"Unknown cookie expiry unit {unit!r}")


def parse_expiry_offset(expiry: str) -> Optional[timedelta]:
    """Return the offset described by a relative expiry token.

    Returns None when `expiry` is not relative (an absolute date string).
    """
    token = expiry.strip()
    if token.lower() == "now":
        return timedelta(0)
    m = _RELATIVE_RE.match(token)
    if not m:
        return None
    amount, unit = m.groups()
    return timedelta(seconds=float(amount) * _unit_seconds(unit))


def format_expires(dt: datetime) -> str:
    """Format `dt` as an RFC 1123 date for the expires attribute."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc).replace(microsecond=0), usegmt=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CookieCodec:
    """Parse `Cookie` headers and build `Set-Cookie` header values.

    `clock` supplies the current time for relative expiries; tests pass a
    fixed clock to get stable headers.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utcnow

    def parse(self, header_value: Optional[str]) -> Dict[str, str]:
        if not header_value:
            return {}
        jar: Dict[str, str] = {}
        for name, value in cookie_parser(header_value).items():
            if not name:
                continue
            jar[unquote(name)] = unquote(value)
        return jar

    def expires_at(self, expiry: Expiry) -> Optional[Union[datetime, str]]:
        """Resolve `expiry` to an absolute datetime, or a verbatim date string."""
        if expiry is None:
            return None
        if isinstance(expiry, datetime):
            return expiry
        if isinstance(expiry, (int, float)):
            return self._clock() + timedelta(seconds=expiry)
        offset = parse_expiry_offset(expiry)
        if offset is None:
            return expiry
        return self._clock() + offset

    def serialize(
        self,
        name: str,
        value: str,
        path: str = "/",
        expiry: Expiry = None,
        *,
        domain: Optional[str] = None,
        secure: bool = False,
        httponly: bool = False,
        samesite: Optional[str] = None,
    ) -> str:
        parts = [f"{quote(name, safe='')}={quote(value or '', safe='')}"]
        if path:
            parts.append(f"path={path}")
        expires = self.expires_at(expiry)
        if isinstance(expires, datetime):
            parts.append(f"expires={format_expires(expires)}")
        elif expires:
            parts.append(f"expires={expires}")
        if domain:
            parts.append(f"domain={domain}")
        if secure:
            parts.append("secure")
        if httponly:
            parts.append("HttpOnly")
        if samesite:
            if samesite.lower() not in ("strict", "lax", "none"):
                raise ValueError("samesite must be 'strict', 'lax' or 'none'")
            parts.append(f"SameSite={samesite.lower()}")
        return "; ".join(parts)


default_codec = CookieCodec()


def parse(header_value: Optional[str]) -> Dict[str, str]:
    return default_codec.parse(header_value)


def serialize(name: str, value: str, path: str = "/", expiry: Expiry = None, **attrs) -> str:
    return default_codec.serialize(name, value, path, expiry, **attrs)
