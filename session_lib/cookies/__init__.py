from .codec import CookieCodec, format_expires, parse, parse_expiry_offset, serialize

__all__ = ["CookieCodec", "format_expires", "parse", "parse_expiry_offset", "serialize"]
