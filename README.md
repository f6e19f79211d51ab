# humakit

Small, dependency-free building blocks for writing HTTP APIs in Python.

## Installation

```
pip install humakit
```

To run the test suite:

```
pip install "humakit[test]"
pytest
```

## What is inside

- `humakit.casing`: split identifiers in any casing style and join them again.
  `split`, `join` and `merge_numbers` do the work. `camel`, `lower_camel`,
  `snake` and `kebab` produce the finished styles. `identity` and `initialism`
  are ready-made part transforms.
- `humakit.chain`: `Middlewares` is a list of middleware functions, each
  called as `fn(ctx, next)`. `Middlewares.handler(endpoint)` composes them, in
  order, into a single handler that ends with `endpoint`.
- `humakit.api`: the core types.
  - `Context` is a request together with the response being built for it. Its
    request side offers `header`, `header_items`, `param`, `query` and `path`.
    Its response side offers `status`, `set_header`, `append_header`, `write`,
    `response_headers` and `response_body`.
  - `with_context` and `with_value` return copies of a context with different
    request-scoped `values`. The copies share the response.
  - `Format` pairs a `marshal(writer, value)` function with an
    `unmarshal(data)` function.
  - `API` offers `marshal`, `unmarshal`, `transform`, `use_middleware` and the
    `openapi` document. Looking up an unknown content type raises
    `UnknownContentTypeError`.
  - `new_api(config, adapter)` builds an `API` from a `Config`. It fills in a
    minimal OpenAPI document if one is missing. It registers these routes with
    the adapter when their paths are configured:
    - `GET <openapi_path>.json`, the spec as JSON;
    - `GET <docs_path>`, an HTML documentation page;
    - `GET <schemas_path>/{schema}`, a single schema from `components.schemas`.
- `humakit.defaults`: `default_config(title, version)` returns a `Config` with
  JSON registered and the paths `/openapi`, `/docs` and `/schemas` set.
  - `json_marshal` writes compact, HTML-safe JSON followed by a newline.
  - `json_unmarshal` decodes JSON bytes.
- `humakit.cookie`: `read_cookies(ctx)` parses every `Cookie` request header
  into `Cookie(name, value)` objects. `read_cookie(ctx, name)` returns the
  first cookie with that name, or raises `NoCookieError`.
- `humakit.conditional`: `Params` holds the `If-Match`, `If-None-Match`,
  `If-Modified-Since` and `If-Unmodified-Since` values.
  - `resolve(ctx)` records whether the request is a write (POST, PUT, PATCH or
    DELETE).
  - `has_conditional_params()` reports whether any of the values were given.
  - `precondition_failed(etag, modified)` returns quietly when every
    precondition holds. Otherwise it raises `StatusError`: status 304 for a
    read, or status 412 for a write. A 412 lists every failed check as an
    `ErrorDetail` in `errors`.
- `humakit.autoconfig`: `AutoConfig` and `AutoConfigVar` describe CLI
  auto-configuration for an API. Their `to_dict()` gives the JSON form.
- `humakit.flow`: `Mux` is a compact router working on `Request` and
  `Response` objects.
  - Patterns support named parameters (`:name`), regular-expression
    constraints (`:name|^[0-9]+$`) and a trailing `...` wildcard.
  - Middleware is added with `use`, and `group` limits it to a set of routes.
  - GET routes also answer HEAD. A known path requested with another method
    gets 405, or 204 for OPTIONS, together with an `Allow` header. Anything else
    gets 404.
  - `param(request, name)` reads a captured parameter.

## Examples

Casing:

```python
from humakit.casing import camel, snake, split

split("HTTPServer_2020")   # ["HTTP", "Server", "2020"]
snake("h.264 stream")      # "h264_stream"
camel("camel_case_TEST")   # "CamelCaseTest"
```

Middleware:

```python
from humakit.chain import Middlewares

calls = []

def log(ctx, next):
    calls.append("before")
    next(ctx)

handler = Middlewares([log]).handler(lambda ctx: calls.append("endpoint"))
handler(None)              # calls == ["before", "endpoint"]
```

Routing:

```python
from humakit.flow import Mux, Request, Response, param

mux = Mux()

def show(response, request):
    response.write("hello " + param(request, "name"))

mux.handle_func("/hello/:name", show, "GET")

response = Response()
mux.serve_http(response, Request("GET", "/hello/world"))
response.status            # 200
response.body              # b"hello world"
```

An API wired to a simple adapter. An adapter is any object with
`handle(op, handler)` and `serve_http(response, request)`:

```python
from humakit.api import Context, new_api
from humakit.defaults import default_config

class Routes:
    def __init__(self):
        self.handlers = {}

    def handle(self, op, handler):
        self.handlers[(op["method"], op["path"])] = handler

    def serve_http(self, response, request):
        raise NotImplementedError

routes = Routes()
api = new_api(default_config("My API", "1.0.0"), routes)

ctx = Context(method="GET", url="/openapi.json")
routes.handlers[("GET", "/openapi.json")](ctx)
ctx.response_body          # the OpenAPI document as JSON
```

Conditional requests:

```python
from humakit.conditional import Params, StatusError

params = Params(if_none_match=['"abc123"'])
try:
    params.precondition_failed("abc123", None)
except StatusError as error:
    error.status           # 304, as this is a read request
```

## What it does not do

- humakit contains no HTTP server and no bindings to other web frameworks. You
  feed `Context`, `Request` and `Response` objects to the handlers yourself,
  or through an adapter you write.
- `API` does not register operations from typed handlers. It does not generate
  or validate JSON schemas, and it does not pick a response format from an
  `Accept` header.
- The OpenAPI document is served only as JSON. No YAML or OpenAPI 3.0
  versions are produced.