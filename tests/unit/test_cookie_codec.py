from datetime import datetime, timedelta, timezone

import pytest

from session_lib.cookies.codec import CookieCodec, format_expires, parse_expiry_offset
from tests.helpers import FIXED_NOW


def test_parse_simple_header(fixed_codec):
    jar = fixed_codec.parse('sessionid=abc123; theme=dark')
    assert jar == {'sessionid': 'abc123', 'theme': 'dark'}


def test_parse_ignores_malformed_entries(fixed_codec):
    jar = fixed_codec.parse('garbage; sessionid=abc123;;  ; =orphan')
    assert jar == {'sessionid': 'abc123'}


def test_parse_empty_and_missing_header(fixed_codec):
    assert fixed_codec.parse(None) == {}
    assert fixed_codec.parse('') == {}


def test_parse_keeps_empty_value(fixed_codec):
    # An empty value is reported as such; the manager decides it means "absent".
    assert fixed_codec.parse('sessionid=') == {'sessionid': ''}


def test_parse_unescapes_percent_encoding(fixed_codec):
    assert fixed_codec.parse('name=a%20b') == {'name': 'a b'}


@pytest.mark.parametrize('token,expected', [
    ('+3M', timedelta(days=90)),
    ('-10m', timedelta(minutes=-10)),
    ('+1h', timedelta(hours=1)),
    ('+30s', timedelta(seconds=30)),
    ('+1y', timedelta(days=365)),
    ('+3 months', timedelta(days=90)),
    ('-10 minutes', timedelta(minutes=-10)),
    ('+2 weeks', timedelta(days=14)),
    ('now', timedelta(0)),
    ('3600', timedelta(hours=1)),
])
def test_parse_expiry_offset(token, expected):
    assert parse_expiry_offset(token) == expected


def test_parse_expiry_offset_absolute_date_is_not_relative():
    assert parse_expiry_offset('Wed, 21 Oct 2026 07:28:00 GMT') is None


def test_unknown_unit_raises():
    with pytest.raises(ValueError):
        parse_expiry_offset('+3 fortnights')


def test_format_expires_uses_gmt():
    dt = datetime(2026, 1, 1, 11, 50, 0, tzinfo=timezone.utc)
    assert format_expires(dt) == 'Thu, 01 Jan 2026 11:50:00 GMT'


def test_serialize_relative_expiry(fixed_codec):
    header = fixed_codec.serialize('sessionid', 'abc123', path='/', expiry='+3M')
    assert header == 'sessionid=abc123; path=/; expires=Wed, 01 Apr 2026 12:00:00 GMT'


def test_serialize_deletion_cookie(fixed_codec):
    header = fixed_codec.serialize('sessionid', '', path='/app/', expiry='-10m')
    assert header == 'sessionid=; path=/app/; expires=Thu, 01 Jan 2026 11:50:00 GMT'


def test_serialize_attributes(fixed_codec):
    header = fixed_codec.serialize('sid', 'x', path='/', expiry=None,
                                   domain='example.com', secure=True, httponly=True, samesite='Lax')
    assert header == 'sid=x; path=/; domain=example.com; secure; HttpOnly; SameSite=lax'


def test_serialize_absolute_expiry_passthrough(fixed_codec):
    header = fixed_codec.serialize('sid', 'x', expiry='Fri, 01 Jan 2027 00:00:00 GMT')
    assert header.endswith('expires=Fri, 01 Jan 2027 00:00:00 GMT')


def test_serialize_datetime_and_seconds(fixed_codec):
    assert fixed_codec.expires_at(60) == FIXED_NOW + timedelta(seconds=60)
    dt = datetime(2030, 5, 1, tzinfo=timezone.utc)
    assert fixed_codec.expires_at(dt) is dt
    assert fixed_codec.expires_at(None) is None


def test_serialize_rejects_bad_samesite(fixed_codec):
    with pytest.raises(ValueError):
        fixed_codec.serialize('sid', 'x', samesite='sometimes')


def test_default_clock_is_utc():
    codec = CookieCodec()
    expires = codec.expires_at('now')
    assert expires.tzinfo is not None


def test_module_level_helpers():
    from session_lib.cookies import parse, serialize

    assert parse('a=1; b=2') == {'a': '1', 'b': '2'}
    assert serialize('a', '1', path='/x', expiry=None) == 'a=1; path=/x'
