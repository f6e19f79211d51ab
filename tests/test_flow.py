import pytest

from humakit.flow import Mux, Request, Response, param

MATCHING = [
    # simple path matching
    (["GET"], "/one", "GET", "/one", 200, None, ""),
    (["GET"], "/one", "GET", "/two", 404, None, ""),
    # nested
    (["GET"], "/parent/child/one", "GET", "/parent/child/one", 200, None, ""),
    (["GET"], "/parent/child/one", "GET", "/parent/child/two", 404, None, ""),
    # misc no matches
    (["GET"], "/not/enough", "GET", "/not/enough/items", 404, None, ""),
    (["GET"], "/not/enough/items", "GET", "/not/enough", 404, None, ""),
    # wildcards
    (["GET"], "/prefix/...", "GET", "/prefix/anything/else", 200, {"...": "anything/else"}, ""),
    (["GET"], "/prefix/...", "GET", "/prefix/", 200, {"...": ""}, ""),
    (["GET"], "/prefix/...", "GET", "/prefix", 404, None, ""),
    (["GET"], "/prefix", "GET", "/prefix/anything/else", 404, None, ""),
    (["GET"], "/prefix/", "GET", "/prefix/anything/else", 404, None, ""),
    (["GET"], "/prefix...", "GET", "/prefix/anything/else", 404, None, ""),
    # path params
    (
        ["GET"], "/path-params/:era/:group/:member", "GET", "/path-params/60/beatles/lennon",
        200, {"era": "60", "group": "beatles", "member": "lennon"}, "",
    ),
    (
        ["GET"], "/path-params/:era/:group/:member/foo", "GET", "/path-params/60/beatles/lennon/bar",
        404, {"era": "60", "group": "beatles", "member": "lennon"}, "",
    ),
    (["GET"], "/path-params/:era", "GET", "/path-params/a%3A%2F%2Fb%2Fc", 200, {"era": "a://b/c"}, ""),
    # regexp
    (
        ["GET"], "/path-params/:era|^[0-9]{2}$/:group|^[a-z].+$", "GET", "/path-params/60/beatles",
        200, {"era": "60", "group": "beatles"}, "",
    ),
    (["GET"], "/path-params/:era|^[0-9]{2}$/:group|^[a-z].+$", "GET", "/path-params/abc/123", 404, None, ""),
    # kitchen sink
    (
        ["GET"], "/path-params/:id/:era|^[0-9]{2}$/...", "GET", "/path-params/abc/12/foo/bar/baz",
        200, {"id": "abc", "era": "12", "...": "foo/bar/baz"}, "",
    ),
    (["GET"], "/path-params/:id/:era|^[0-9]{2}$/...", "GET", "/path-params/abc/12", 404, None, ""),
    # leading and trailing slashes
    (["GET"], "slashes/one", "GET", "/slashes/one", 404, None, ""),
    (["GET"], "/slashes/two", "GET", "slashes/two", 404, None, ""),
    (["GET"], "/slashes/three/", "GET", "/slashes/three", 404, None, ""),
    (["GET"], "/slashes/four", "GET", "/slashes/four/", 404, None, ""),
    # empty segments
    (["GET"], "/baz/:id/:age", "GET", "/baz/123/", 404, None, ""),
    (["GET"], "/baz/:id/:age/", "GET", "/baz/123//", 404, None, ""),
    (["GET"], "/baz/:id/:age", "GET", "/baz//21", 404, None, ""),
    (["GET"], "/baz//:age", "GET", "/baz//21", 200, None, ""),
    (["GET"], "/baz/:id|^$/:age/", "GET", "/baz//21/", 200, None, ""),
    # methods
    (["POST"], "/one", "POST", "/one", 200, None, ""),
    (["GET"], "/one", "POST", "/one", 405, None, ""),
    # multiple methods
    (["GET", "POST", "PUT"], "/one", "POST", "/one", 200, None, ""),
    (["GET", "POST", "PUT"], "/one", "PUT", "/one", 200, None, ""),
    (["GET", "POST", "PUT"], "/one", "DELETE", "/one", 405, None, ""),
    # all methods
    ([], "/one", "GET", "/one", 200, None, ""),
    ([], "/one", "DELETE", "/one", 200, None, ""),
    # method casing
    (["gEt"], "/one", "GET", "/one", 200, None, ""),
    # head requests
    (["GET"], "/one", "HEAD", "/one", 200, None, ""),
    (["HEAD"], "/one", "HEAD", "/one", 200, None, ""),
    (["HEAD"], "/one", "GET", "/one", 405, None, ""),
    # allow header
    (["GET", "PUT"], "/one", "DELETE", "/one", 405, None, "GET, PUT, HEAD, OPTIONS"),
    # options
    (["GET", "PUT"], "/one", "OPTIONS", "/one", 204, None, "GET, PUT, HEAD, OPTIONS"),
]


@pytest.mark.parametrize(
    "methods, pattern, req_method, req_path, status, params, allow", MATCHING
)
def test_matching(methods, pattern, req_method, req_path, status, params, allow):
    mux = Mux()
    seen = []
    mux.handle_func(pattern, lambda w, r: seen.append(r), *methods)

    response = Response()
    mux.serve_http(response, Request(method=req_method, url=req_path))

    assert response.status == status
    if status == 200:
        assert len(seen) == 1
        for key, value in (params or {}).items():
            assert param(seen[0], key) == value
    else:
        assert seen == []
    if allow:
        assert response.header("Allow") == allow


def test_middleware():
    used = []

    def make(tag):
        def middleware(next_handler):
            def handler(w, r):
                used.append(tag)
                next_handler(w, r)

            return handler

        return middleware

    def hf(w, r):
        pass

    m = Mux()
    m.use(make("1"))
    m.use(make("2"))
    m.handle_func("/", hf, "GET")

    def first_group(g):
        g.use(make("3"), make("4"))
        g.handle_func("/foo", hf, "GET")

        def nested(n):
            n.use(make("5"))
            n.handle_func("/nested/foo", hf, "GET")

        g.group(nested)

    def second_group(g):
        g.use(make("6"))
        g.handle_func("/bar", hf, "GET")

    m.group(first_group)
    m.group(second_group)
    m.handle_func("/baz", hf, "GET")

    cases = [
        ("GET", "/", "12", 200),
        ("GET", "/foo", "1234", 200),
        ("GET", "/nested/foo", "12345", 200),
        ("GET", "/bar", "126", 200),
        ("GET", "/baz", "12", 200),
        ("GET", "/notfound", "12", 404),
        ("POST", "/nested/foo", "12", 405),
        ("OPTIONS", "/nested/foo", "12", 204),
    ]
    for method, path, expected_used, expected_status in cases:
        used.clear()
        response = Response()
        m.serve_http(response, Request(method=method, url=path))
        assert response.status == expected_status, (method, path)
        assert "".join(used) == expected_used, (method, path)


def test_custom_handlers():
    m = Mux()
    m.not_found = lambda w, r: w.write("custom not found handler")
    m.method_not_allowed = lambda w, r: w.write("custom method not allowed handler")
    m.options = lambda w, r: w.write("custom options handler")
    m.handle_func("/", lambda w, r: None, "GET")

    cases = [
        ("GET", "/notfound", b"custom not found handler"),
        ("POST", "/", b"custom method not allowed handler"),
        ("OPTIONS", "/", b"custom options handler"),
    ]
    for method, path, body in cases:
        response = Response()
        m.serve_http(response, Request(method=method, url=path))
        assert response.body == body


def test_default_error_bodies():
    m = Mux()
    m.handle_func("/", lambda w, r: None, "GET")

    response = Response()
    m.serve_http(response, Request(method="GET", url="/missing"))
    assert response.status == 404
    assert response.body == b"404 page not found\n"

    response = Response()
    m.serve_http(response, Request(method="POST", url="/"))
    assert response.status == 405
    assert response.body == b"Method Not Allowed\n"
    assert response.header("Allow") == "GET, HEAD, OPTIONS"


@pytest.mark.parametrize(
    "name, value",
    [("id", "123"), ("missing", "")],
)
def test_params(name, value):
    m = Mux()
    seen = []
    m.handle_func("/foo/:id", lambda w, r: seen.append(r), "GET")
    m.serve_http(Response(), Request(method="GET", url="/foo/123"))
    assert len(seen) == 1
    assert param(seen[0], name) == value


def test_invalid_escape_does_not_match():
    m = Mux()
    m.handle_func("/foo/:id", lambda w, r: None, "GET")
    response = Response()
    m.serve_http(response, Request(method="GET", url="/foo/%zz"))
    assert response.status == 404


def test_handler_writes_body():
    m = Mux()
    m.handle_func("/hello/:name", lambda w, r: w.write("Hello, " + param(r, "name")), "GET")
    response = Response()
    m.serve_http(response, Request(method="GET", url="/hello/world?x=1"))
    assert response.status == 200
    assert response.body == b"Hello, world"