"""Composition of middleware into a single request handler."""

from __future__ import annotations

from collections.abc import Callable
from functools import reduce
from typing import Any

Handler = Callable[[Any], None]
Middleware = Callable[[Any, Handler], None]


def _wrap(middleware: Middleware, next_handler: Handler) -> Handler:
    def handler(ctx: Any) -> None:
        middleware(ctx, next_handler)

    return handler


class Middlewares(list):
    """A list of middleware functions ``fn(ctx, next)`` run for every request."""

    def handler(self, endpoint: Handler) -> Handler:
        """Build a handler running the middleware in order, then ``endpoint``."""
        if not self:
            return endpoint
        return reduce(lambda inner, mw: _wrap(mw, inner), reversed(self), endpoint)