from humakit.chain import Middlewares


def _recording(name, calls):
    def middleware(ctx, next_handler):
        calls.append(name)
        next_handler(ctx)

    return middleware


def test_empty_chain_returns_endpoint():
    def endpoint(ctx):
        pass

    assert Middlewares().handler(endpoint) is endpoint


def test_middleware_runs_in_order_before_endpoint():
    calls = []
    chain = Middlewares([_recording("first", calls), _recording("second", calls)])
    handler = chain.handler(lambda ctx: calls.append(("endpoint", ctx)))

    handler("request")

    assert calls == ["first", "second", ("endpoint", "request")]


def test_middleware_can_replace_context():
    seen = []

    def replace(ctx, next_handler):
        next_handler(ctx + "-changed")

    handler = Middlewares([replace]).handler(seen.append)
    handler("ctx")

    assert seen == ["ctx-changed"]


def test_middleware_can_short_circuit():
    seen = []

    def stop(ctx, next_handler):
        seen.append("stopped")

    handler = Middlewares([stop, _recording("never", seen)]).handler(seen.append)
    handler("ctx")

    assert seen == ["stopped"]


def test_code_after_next_runs_after_endpoint():
    calls = []

    def around(ctx, next_handler):
        calls.append("before")
        next_handler(ctx)
        calls.append("after")

    Middlewares([around]).handler(lambda ctx: calls.append("endpoint"))(None)

    assert calls == ["before", "endpoint", "after"]


def test_appending_middleware_extends_chain():
    calls = []
    chain = Middlewares()
    chain.append(_recording("a", calls))
    chain.extend([_recording("b", calls)])

    chain.handler(lambda ctx: None)(None)

    assert len(chain) == 2
    assert calls == ["a", "b"]