"""Auto-configuration settings advertised to CLI clients.

An ``AutoConfig`` is placed in the OpenAPI extensions under the key
``x-cli-config`` so that command-line clients can configure themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AutoConfigVar:
    """A variable the user is prompted for during auto-configuration."""

    description: str = ""
    example: str = ""
    default: Any = None
    enum: list[Any] | None = None
    # Excluded values are never sent to the server; they only feed param templates.
    exclude: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, leaving out empty fields."""
        data: dict[str, Any] = {}
        if self.description:
            data["description"] = self.description
        if self.example:
            data["example"] = self.example
        if self.default is not None:
            data["default"] = self.default
        if self.enum:
            data["enum"] = list(self.enum)
        if self.exclude:
            data["exclude"] = True
        return data


@dataclass
class AutoConfig:
    """An API's automatic configuration settings for CLI clients."""

    security: str = ""
    headers: dict[str, str] | None = None
    prompt: dict[str, AutoConfigVar] | None = None
    params: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; ``security`` and ``params`` are always present."""
        data: dict[str, Any] = {"security": self.security}
        if self.headers:
            data["headers"] = dict(self.headers)
        if self.prompt:
            data["prompt"] = {name: var.to_dict() for name, var in self.prompt.items()}
        data["params"] = dict(self.params) if self.params is not None else None
        return data