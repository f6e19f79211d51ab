"""Building blocks for HTTP APIs: body formats, middleware, conditional requests, cookies, casing and routing."""

__version__ = "0.1.0"
__all__ = [
    "api",
    "autoconfig",
    "casing",
    "chain",
    "conditional",
    "cookie",
    "defaults",
    "flow",
]