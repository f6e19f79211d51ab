"""Core API object: formats, transformers, middleware and built-in routes."""

from __future__ import annotations

import json
import posixpath
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, BinaryIO, Protocol
from urllib.parse import parse_qsl, urlsplit

from humakit.chain import Middlewares

_SCHEMA_REF = re.compile(r'#/components/schemas/([^"]+)')

_DOCS_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="referrer" content="same-origin" />
    <meta name="viewport" content="width=device-width, initial-scale=1, shrink-to-fit=no" />
    <title>{title}</title>
    <!-- Embed elements Elements via Web Component -->
    <link href="https://unpkg.com/@stoplight/elements@8.1.0/styles.min.css" rel="stylesheet" />
    <script src="https://unpkg.com/@stoplight/elements@8.1.0/web-components.min.js"
            integrity="sha256-985sDMZYbGa0LDS8jYmC4VbkVlh7DZ0TWejFv+raZII="
            crossorigin="anonymous"></script>
  </head>
  <body style="height: 100vh;">

    <elements-api
      apiDescriptionUrl="{spec_url}.json"
      router="hash"
      layout="sidebar"
      tryItCredentialsPolicy="same-origin"
    />

  </body>
</html>"""


class UnknownContentTypeError(ValueError):
    """Raised when no format is registered for a content type."""


@dataclass(frozen=True)
class ProtoVersion:
    """HTTP protocol version as text and numbers."""

    proto: str = "HTTP/1.1"
    proto_major: int = 1
    proto_minor: int = 1


@dataclass
class _Reply:
    status: int = 0
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytearray = field(default_factory=bytearray)


@dataclass
class Context:
    """A request together with the response being built for it.

    Copies made by ``with_context`` and ``with_value`` share the response, so
    a status or header set through one is seen through all of them.
    """

    method: str = "GET"
    url: str = "/"
    headers: list[tuple[str, str]] = field(default_factory=list)
    params: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    host: str = ""
    remote_addr: str = ""
    version: ProtoVersion = field(default_factory=ProtoVersion)
    operation: Any = None
    values: Mapping[Any, Any] = field(default_factory=dict)
    _reply: _Reply = field(default_factory=_Reply, repr=False)

    @property
    def path(self) -> str:
        """The path part of the request URL."""
        return urlsplit(self.url).path

    def header(self, name: str) -> str:
        """Return the first value of a request header, or an empty string."""
        wanted = name.lower()
        return next((v for n, v in self.headers if n.lower() == wanted), "")

    def header_items(self) -> Iterator[tuple[str, str]]:
        """Yield every request header as a ``(name, value)`` pair."""
        yield from self.headers

    def param(self, name: str) -> str:
        """Return a path parameter, or an empty string."""
        return self.params.get(name, "")

    def query(self, name: str) -> str:
        """Return the first value of a query parameter, or an empty string."""
        query = urlsplit(self.url).query
        return next(
            (v for k, v in parse_qsl(query, keep_blank_values=True) if k == name), ""
        )

    @property
    def status(self) -> int:
        """The response status code; 0 until one is set."""
        return self._reply.status

    @status.setter
    def status(self, code: int) -> None:
        self._reply.status = code

    def set_header(self, name: str, value: str) -> None:
        """Set a response header, replacing any existing values."""
        wanted = name.lower()
        self._reply.headers[:] = [
            (n, v) for n, v in self._reply.headers if n.lower() != wanted
        ]
        self._reply.headers.append((name, value))

    def append_header(self, name: str, value: str) -> None:
        """Add a value to a response header."""
        self._reply.headers.append((name, value))

    @property
    def response_headers(self) -> list[tuple[str, str]]:
        """The response headers set so far."""
        return list(self._reply.headers)

    def write(self, data: bytes | str) -> int:
        """Append data to the response body and return its length."""
        if isinstance(data, str):
            data = data.encode()
        self._reply.body.extend(data)
        return len(data)

    @property
    def response_body(self) -> bytes:
        """The response body written so far."""
        return bytes(self._reply.body)


def with_context(ctx: Context, values: Mapping[Any, Any]) -> Context:
    """Return a context sharing the request and response but with new values."""
    return replace(ctx, values=dict(values))


def with_value(ctx: Context, key: Any, value: Any) -> Context:
    """Return a context with one request-scoped value added."""
    return replace(ctx, values={**ctx.values, key: value})


Transformer = Callable[[Context, str, Any], Any]


@dataclass(frozen=True)
class Format:
    """Marshals values to a binary writer and unmarshals them from bytes."""

    marshal: Callable[[BinaryIO, Any], Any]
    unmarshal: Callable[[bytes], Any]


@dataclass
class Config:
    """Configuration for a new API; see ``default_config`` for a start."""

    openapi: dict[str, Any] | None = None
    openapi_path: str = ""
    docs_path: str = ""
    schemas_path: str = ""
    formats: dict[str, Format] = field(default_factory=dict)
    default_format: str = ""
    transformers: list[Transformer] = field(default_factory=list)
    create_hooks: list[Callable[[Config], Config]] = field(default_factory=list)


class _Adapter(Protocol):
    def handle(self, op: Mapping[str, str], handler: Callable[[Context], None]) -> None: ...

    def serve_http(self, response: Any, request: Any) -> None: ...


class API:
    """An API wrapping a specific router adapter."""

    def __init__(self, config: Config, adapter: _Adapter) -> None:
        self.config = config
        self.adapter = adapter
        self.formats: dict[str, Format] = dict(config.formats)
        self.format_keys: list[str] = [config.default_format] if config.default_format else []
        self.format_keys.extend(config.formats)
        self.transformers: list[Transformer] = list(config.transformers)
        self.middlewares = Middlewares()

    @property
    def openapi(self) -> dict[str, Any]:
        """The OpenAPI document; it may be edited until the server starts."""
        return self.config.openapi

    def unmarshal(self, content_type: str, data: bytes) -> Any:
        """Decode request data using the format for the content type."""
        # Handles e.g. `application/json; charset=utf-8` or `my/format+json`.
        start = content_type.find("+") + 1
        end = content_type.find(";")
        if end == -1:
            end = len(content_type)
        ct = content_type[start:end] or "application/json"
        fmt = self.formats.get(ct)
        if fmt is None:
            raise UnknownContentTypeError(f"unknown content type: {content_type}")
        return fmt.unmarshal(data)

    def marshal(self, writer: BinaryIO, content_type: str, value: Any) -> None:
        """Encode a value to the writer using the format for the content type."""
        fmt = self.formats.get(content_type)
        if fmt is None:
            fmt = self.formats.get(content_type[content_type.find("+") + 1 :])
        if fmt is None:
            raise UnknownContentTypeError(f"unknown content type: {content_type}")
        fmt.marshal(writer, value)

    def transform(self, ctx: Context, status: str, value: Any) -> Any:
        """Run the value through every transformer in order."""
        for transformer in self.transformers:
            value = transformer(ctx, status, value)
        return value

    def use_middleware(self, *middlewares: Callable[[Context, Callable[[Context], None]], None]) -> None:
        """Append middleware run for every operation, in the order added."""
        self.middlewares.extend(middlewares)


def _api_prefix(openapi: Mapping[str, Any]) -> str:
    for server in openapi.get("servers") or []:
        path = urlsplit(server.get("url", "")).path
        if path:
            return path
    return ""


def _compact_json(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode()


def new_api(config: Config, adapter: _Adapter) -> API:
    """Create an API, filling in defaults and registering the built-in routes."""
    config = replace(config)
    for hook in list(config.create_hooks):
        config = hook(config)

    if config.openapi is None:
        config.openapi = {}
    spec = config.openapi
    if not spec.get("openapi"):
        spec["openapi"] = "3.1.0"
    if spec.get("components") is None:
        spec["components"] = {}
    if spec["components"].get("schemas") is None:
        spec["components"]["schemas"] = {}

    if not config.default_format and "application/json" in config.formats:
        config.default_format = "application/json"

    api = API(config, adapter)

    if config.openapi_path:
        cached: list[bytes] = []

        def serve_spec(ctx: Context) -> None:
            ctx.set_header("Content-Type", "application/vnd.oai.openapi+json")
            if not cached:
                cached.append(_compact_json(api.openapi))
            ctx.write(cached[0])

        adapter.handle({"method": "GET", "path": config.openapi_path + ".json"}, serve_spec)

    if config.docs_path:

        def serve_docs(ctx: Context) -> None:
            spec_url = config.openapi_path
            prefix = _api_prefix(api.openapi)
            if prefix:
                spec_url = posixpath.normpath(prefix + "/" + spec_url)
            ctx.set_header("Content-Type", "text/html")
            title = "Elements in HTML"
            info = api.openapi.get("info") or {}
            if info.get("title"):
                title = info["title"] + " Reference"
            ctx.write(_DOCS_TEMPLATE.format(title=title, spec_url=spec_url))

        adapter.handle({"method": "GET", "path": config.docs_path}, serve_docs)

    if config.schemas_path:

        def serve_schema(ctx: Context) -> None:
            # Some routers dislike a path param with a suffix, so strip it here.
            name = ctx.param("schema").removesuffix(".json")
            ctx.set_header("Content-Type", "application/json")
            schema = api.openapi["components"]["schemas"].get(name)
            text = _compact_json(schema).decode()
            text = _SCHEMA_REF.sub(
                lambda m: f"{config.schemas_path}/{m.group(1)}.json", text
            )
            ctx.write(text)

        adapter.handle(
            {"method": "GET", "path": config.schemas_path + "/{schema}"}, serve_schema
        )

    return api