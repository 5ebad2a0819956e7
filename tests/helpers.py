from datetime import datetime, timezone
from typing import Optional

from starlette.requests import Request

# Clock used by codec fixtures so Set-Cookie headers are stable
FIXED_NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_request(cookie: Optional[str] = None, root_path: str = '') -> Request:
    """Build a bare Starlette request carrying an optional Cookie header.

    Usage in tests:
        from tests.helpers import make_request
        request = make_request('sessionid=abc123')
    """
    headers = []
    if cookie is not None:
        headers.append((b'cookie', cookie.encode('latin-1')))
    scope = {
        'type': 'http',
        'method': 'GET',
        'path': '/',
        'root_path': root_path,
        'query_string': b'',
        'headers': headers,
    }
    return Request(scope)
