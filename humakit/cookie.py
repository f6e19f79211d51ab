"""Reading cookies from request headers."""

from __future__ import annotations

import string
from collections.abc import Iterable
from dataclasses import dataclass

from humakit.api import Context

_TOKEN_CHARS = frozenset("!#$%&'*+-.^_`|~" + string.digits + string.ascii_letters)
_TRIM = " \t\n\r"


@dataclass(frozen=True)
class Cookie:
    """A cookie sent by the client."""

    name: str
    value: str


class NoCookieError(LookupError):
    """Raised when a named cookie is not present."""


def _cookie_lines(ctx: Context) -> list[str]:
    return [value for name, value in ctx.header_items() if name.lower() == "cookie"]


def _is_cookie_name_valid(name: str) -> bool:
    return bool(name) and all(c in _TOKEN_CHARS for c in name)


def _valid_value_char(c: str) -> bool:
    return 0x20 <= ord(c) < 0x7F and c not in '";\\'


def _parse_cookie_value(raw: str) -> str | None:
    if len(raw) > 1 and raw[0] == '"' and raw[-1] == '"':
        raw = raw[1:-1]
    if all(_valid_value_char(c) for c in raw):
        return raw
    return None


def _parse_cookies(lines: Iterable[str], name_filter: str = "") -> list[Cookie]:
    cookies: list[Cookie] = []
    for line in lines:
        rest = line.strip(_TRIM)
        while rest:
            part, _, rest = rest.partition(";")
            part = part.strip(_TRIM)
            if not part:
                continue
            name, _, raw = part.partition("=")
            name = name.strip(_TRIM)
            if not _is_cookie_name_valid(name):
                continue
            if name_filter and name != name_filter:
                continue
            value = _parse_cookie_value(raw)
            if value is None:
                continue
            cookies.append(Cookie(name, value))
    return cookies


def read_cookie(ctx: Context, name: str) -> Cookie:
    """Return the first cookie with the given name."""
    for cookie in _parse_cookies(_cookie_lines(ctx), name):
        return cookie
    raise NoCookieError(f"named cookie not present: {name}")


def read_cookies(ctx: Context) -> list[Cookie]:
    """Return every well-formed cookie in the request headers."""
    return _parse_cookies(_cookie_lines(ctx))