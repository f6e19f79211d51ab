"""Conditional requests using ETags and last-modified times.

``Params`` holds the ``If-Match``, ``If-None-Match``, ``If-Modified-Since``
and ``If-Unmodified-Since`` request headers and checks them against the
current state of a resource. Reads that fail a precondition get a
304 Not Modified; writes get a 412 Precondition Failed listing every check
that failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from humakit.api import Context

_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass
class ErrorDetail:
    """One problem found with a request, and where in the request it is."""

    message: str = ""
    location: str = ""
    value: Any = None

    def __str__(self) -> str:
        return f"{self.message} ({self.location}: {self.value!r})"


class StatusError(Exception):
    """An error carrying the HTTP status code to respond with."""

    def __init__(self, status: int, message: str = "", errors: list[ErrorDetail] | None = None) -> None:
        super().__init__(message or HTTPStatus(status).phrase)
        self.status = status
        self.message = message or HTTPStatus(status).phrase
        self.errors: list[ErrorDetail] = list(errors or [])


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _after(a: datetime | None, b: datetime) -> bool:
    """Whether ``a`` is strictly later than ``b``; a missing time never is."""
    return a is not None and _as_utc(a) > _as_utc(b)


def _http_date(value: datetime | None) -> str:
    dt = _ZERO_TIME if value is None else _as_utc(value)
    return (
        f"{_DAYS[dt.weekday()]}, {dt.day:02d} {_MONTHS[dt.month - 1]} "
        f"{dt.year:04d} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def _trim_etag(value: str) -> str:
    """Strip the weak ``W/`` prefix and surrounding quotes from an ETag."""
    if value.startswith("W/") and len(value) > 2:
        value = value[2:]
    return value.strip('"')


@dataclass
class Params:
    """Conditional request headers sent by a client."""

    if_match: list[str] = field(default_factory=list)
    if_none_match: list[str] = field(default_factory=list)
    if_modified_since: datetime | None = None
    if_unmodified_since: datetime | None = None
    # Writes raise 412 with details; reads raise a bare 304.
    _is_write: bool = field(default=False, repr=False)

    def resolve(self, ctx: Context) -> list[ErrorDetail]:
        """Note whether the request is a write; never reports errors."""
        if ctx.method.upper() in _WRITE_METHODS:
            self._is_write = True
        return []

    def has_conditional_params(self) -> bool:
        """Whether any conditional request header was set."""
        return bool(
            self.if_match
            or self.if_none_match
            or self.if_modified_since is not None
            or self.if_unmodified_since is not None
        )

    def precondition_failed(self, etag: str, modified: datetime | None = None) -> None:
        """Check the headers against a resource's current ETag and modified time.

        Returns quietly when every precondition holds (or none were sent).
        Raises ``StatusError`` with status 304 for reads and 412 for writes
        otherwise.
        """
        failed = False
        errors: list[ErrorDetail] = []
        found = f"found resource with ETag {etag}" if etag else "found no existing resource"

        # If-None-Match fails on any match; `*` matches any existing resource.
        for match in self.if_none_match:
            trimmed = _trim_etag(match)
            if trimmed == etag or (trimmed == "*" and etag):
                if self._is_write:
                    errors.append(
                        ErrorDetail(
                            message=f"If-None-Match: {match} precondition failed, {found}",
                            location="headers.If-None-Match",
                            value=match,
                        )
                    )
                failed = True

        # If-Match fails if none of the given ETags matches.
        if self.if_match and not any(_trim_etag(m) == etag for m in self.if_match):
            if self._is_write:
                errors.append(
                    ErrorDetail(
                        message=f"If-Match precondition failed, {found}",
                        location="headers.If-Match",
                        value=list(self.if_match),
                    )
                )
            failed = True

        if self.if_modified_since is not None and not _after(modified, self.if_modified_since):
            if self._is_write:
                since = _http_date(self.if_modified_since)
                errors.append(
                    ErrorDetail(
                        message=(
                            f"If-Modified-Since: {since} precondition failed, "
                            f"resource was modified at {_http_date(modified)}"
                        ),
                        location="headers.If-Modified-Since",
                        value=since,
                    )
                )
            failed = True

        if self.if_unmodified_since is not None and _after(modified, self.if_unmodified_since):
            if self._is_write:
                since = _http_date(self.if_unmodified_since)
                errors.append(
                    ErrorDetail(
                        message=(
                            f"If-Unmodified-Since: {since} precondition failed, "
                            f"resource was modified at {_http_date(modified)}"
                        ),
                        location="headers.If-Unmodified-Since",
                        value=since,
                    )
                )
            failed = True

        if not failed:
            return
        if self._is_write:
            raise StatusError(HTTPStatus.PRECONDITION_FAILED, errors=errors)
        raise StatusError(HTTPStatus.NOT_MODIFIED)