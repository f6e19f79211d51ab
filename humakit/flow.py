"""A small HTTP router with named parameters, wildcards and route groups.

Patterns are split on ``/``. A segment ``:name`` captures a non-empty value,
``:name|regexp`` captures a value the regular expression matches, and a final
``...`` captures the rest of the path. GET routes also answer HEAD; requests
for a known path with another method get 405 (or 204 for OPTIONS) with an
``Allow`` header; anything else gets 404.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from http import HTTPStatus
from urllib.parse import unquote_to_bytes, urlsplit

ALL_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "CONNECT", "OPTIONS", "TRACE")

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass
class Request:
    """An incoming HTTP request and the parameters captured by routing."""

    method: str = "GET"
    url: str = "/"
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    params: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> str:
        """The escaped path part of the URL."""
        return urlsplit(self.url).path


@dataclass
class Response:
    """A response being written; the status is 200 unless set first."""

    headers: list[tuple[str, str]] = field(default_factory=list)
    _status: int | None = field(default=None, repr=False)
    _body: bytearray = field(default_factory=bytearray, repr=False)

    @property
    def status(self) -> int:
        return self._status if self._status is not None else HTTPStatus.OK

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def header(self, name: str) -> str:
        """Return the first value of a response header, or an empty string."""
        wanted = name.lower()
        return next((v for n, v in self.headers if n.lower() == wanted), "")

    def set_header(self, name: str, value: str) -> None:
        wanted = name.lower()
        self.headers[:] = [(n, v) for n, v in self.headers if n.lower() != wanted]
        self.headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def write_header(self, status: int) -> None:
        """Set the status; only the first call has any effect."""
        if self._status is None:
            self._status = status

    def write(self, data: bytes | str) -> int:
        if isinstance(data, str):
            data = data.encode()
        self.write_header(HTTPStatus.OK)
        self._body.extend(data)
        return len(data)


Handler = Callable[[Response, Request], None]
Middleware = Callable[[Handler], Handler]


def param(request: Request, name: str) -> str:
    """Return a named parameter or the ``...`` wildcard, or an empty string."""
    return request.params.get(name, "")


def _error(response: Response, message: str, status: int) -> None:
    response.set_header("Content-Type", "text/plain; charset=utf-8")
    response.set_header("X-Content-Type-Options", "nosniff")
    response.write_header(status)
    response.write(message + "\n")


def _not_found(response: Response, request: Request) -> None:
    _error(response, "404 page not found", HTTPStatus.NOT_FOUND)


def _method_not_allowed(response: Response, request: Request) -> None:
    _error(response, HTTPStatus.METHOD_NOT_ALLOWED.phrase, HTTPStatus.METHOD_NOT_ALLOWED)


def _options(response: Response, request: Request) -> None:
    response.write_header(HTTPStatus.NO_CONTENT)


def _query_unescape(value: str) -> str:
    if _BAD_ESCAPE.search(value):
        raise ValueError(f"invalid URL escape in {value!r}")
    return unquote_to_bytes(value.replace("+", " ")).decode("utf-8", "surrogateescape")


@dataclass
class _Route:
    method: str
    segments: list[str]
    wildcard: bool
    handler: Handler
    patterns: dict[str, re.Pattern[str]]

    def match(self, url_segments: list[str]) -> dict[str, str] | None:
        if not self.wildcard and len(url_segments) != len(self.segments):
            return None

        params: dict[str, str] = {}
        for i, segment in enumerate(self.segments):
            if i >= len(url_segments):
                return None
            if segment == "...":
                params["..."] = "/".join(url_segments[i:])
                return params
            if segment.startswith(":"):
                key, has_rx, rx = segment[1:].partition("|")
                try:
                    value = _query_unescape(url_segments[i])
                except ValueError:
                    return None
                if has_rx:
                    if self.patterns[rx].search(value):
                        params[key] = value
                        continue
                elif value:
                    params[key] = value
                    continue
                return None
            if url_segments[i] != segment:
                return None
        return params


class Mux:
    """Dispatches requests to the handler whose pattern and method match."""

    def __init__(self) -> None:
        self.not_found: Handler = _not_found
        self.method_not_allowed: Handler = _method_not_allowed
        self.options: Handler = _options
        self._routes: list[_Route] = []
        self._middlewares: list[Middleware] = []

    def handle(self, pattern: str, handler: Handler, *methods: str) -> None:
        """Register a handler for a pattern and methods (all methods if none)."""
        method_list = list(methods)
        if "GET" in method_list and "HEAD" not in method_list:
            method_list.append("HEAD")
        if not method_list:
            method_list = list(ALL_METHODS)

        segments = pattern.split("/")
        patterns = {}
        for segment in segments:
            if segment.startswith(":"):
                _, has_rx, rx = segment.partition("|")
                if has_rx:
                    patterns[rx] = re.compile(rx)

        wrapped = self._wrap(handler)
        for method in method_list:
            self._routes.append(
                _Route(
                    method=method.upper(),
                    segments=segments,
                    wildcard=pattern.endswith("/..."),
                    handler=wrapped,
                    patterns=patterns,
                )
            )

    def handle_func(self, pattern: str, handler: Handler, *methods: str) -> None:
        """Register a plain handler function; the same as ``handle``."""
        self.handle(pattern, handler, *methods)

    def use(self, *middlewares: Middleware) -> None:
        """Add middleware for routes registered from now on."""
        self._middlewares.extend(middlewares)

    def group(self, fn: Callable[[Mux], None]) -> None:
        """Call ``fn`` with a copy whose middleware stays local to the group."""
        sub = copy.copy(self)
        sub._middlewares = list(self._middlewares)
        fn(sub)

    def serve_http(self, response: Response, request: Request) -> None:
        """Route the request and write the response."""
        url_segments = request.path.split("/")
        allowed: list[str] = []

        for route in self._routes:
            params = route.match(url_segments)
            if params is None:
                continue
            if request.method == route.method:
                route.handler(response, replace(request, params={**request.params, **params}))
                return
            if route.method not in allowed:
                allowed.append(route.method)

        if allowed:
            response.set_header("Allow", ", ".join([*allowed, "OPTIONS"]))
            if request.method == "OPTIONS":
                self._wrap(self.options)(response, request)
            else:
                self._wrap(self.method_not_allowed)(response, request)
            return

        self._wrap(self.not_found)(response, request)

    def _wrap(self, handler: Handler) -> Handler:
        for middleware in reversed(self._middlewares):
            handler = middleware(handler)
        return handler