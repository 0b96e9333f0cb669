"""Cookie header helpers.

The Cookie request header has no notion of deleting a single cookie, so
removing one means rebuilding the header from all the others.
"""

from __future__ import annotations

from typing import List, Tuple

from starlette.types import Scope

_COOKIE_HEADER = b"cookie"


def parse_cookie_header(cookie_header: str) -> List[Tuple[str, str]]:
    """Split a Cookie header into (name, value) pairs, keeping their order."""
    cookies: List[Tuple[str, str]] = []
    if not cookie_header:
        return cookies

    for cookie_pair in cookie_header.split(";"):
        cookie_pair = cookie_pair.strip()
        if not cookie_pair:
            continue
        name, _, value = cookie_pair.partition("=")
        cookies.append((name.strip(), value.strip()))

    return cookies


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def render_cookie_header(cookies: List[Tuple[str, str]]) -> str:
    return "; ".join(f"{name}={value}" for name, value in cookies)


def pop_cookie(scope: Scope, cookie_name: str) -> str:
    """Remove ``cookie_name`` from the request and return its value.

    Returns an empty string and leaves the headers alone when the cookie is
    missing. All Cookie headers are folded into one when the cookie is found;
    the header disappears entirely if nothing else remains.
    """
    headers = scope.get("headers") or []

    cookies: List[Tuple[str, str]] = []
    for key, value in headers:
        if key.lower() == _COOKIE_HEADER:
            cookies.extend(parse_cookie_header(value.decode("latin-1")))

    found = next((value for name, value in cookies if name == cookie_name), None)
    if found is None:
        return ""

    remaining = [(name, value) for name, value in cookies if name != cookie_name]
    new_headers = [(key, value) for key, value in headers if key.lower() != _COOKIE_HEADER]
    if remaining:
        new_headers.append((_COOKIE_HEADER, render_cookie_header(remaining).encode("latin-1")))
    scope["headers"] = new_headers

    return _unquote(found)


def build_set_cookie(
    name: str,
    value: str,
    *,
    domain: str = "",
    path: str = "/",
) -> str:
    """Render the Set-Cookie value for the credential cookie.

    The value is written verbatim: ``Response.set_cookie`` would quote it
    because of the ``=`` padding.
    """
    parts = [f"{name}={value}"]
    if domain:
        parts.append(f"Domain={domain}")
    parts.append(f"Path={path or '/'}")
    parts.extend(["Secure", "HttpOnly", "SameSite=Strict"])
    return "; ".join(parts)
