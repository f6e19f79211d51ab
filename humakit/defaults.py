"""Default JSON format and API configuration."""

from __future__ import annotations

import json
from typing import Any, BinaryIO

from humakit.api import Config, Format

_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def json_marshal(writer: BinaryIO, value: Any) -> None:
    """Write a value as compact, HTML-safe JSON followed by a newline."""
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    writer.write((text.translate(_HTML_ESCAPES) + "\n").encode())


def json_unmarshal(data: bytes) -> Any:
    """Decode JSON bytes into a Python value."""
    return json.loads(data)


DEFAULT_JSON_FORMAT = Format(marshal=json_marshal, unmarshal=json_unmarshal)

DEFAULT_FORMATS = {
    "application/json": DEFAULT_JSON_FORMAT,
    "json": DEFAULT_JSON_FORMAT,
}


def default_config(title: str, version: str) -> Config:
    """Return a starting configuration supporting JSON with the standard paths."""
    return Config(
        openapi={
            "openapi": "3.1.0",
            "info": {"title": title, "version": version},
            "components": {"schemas": {}},
        },
        openapi_path="/openapi",
        docs_path="/docs",
        schemas_path="/schemas",
        formats=dict(DEFAULT_FORMATS),
        default_format="application/json",
    )