"""Split identifiers into words and rejoin them in different casing styles.

``split`` takes almost any input (CamelCase, snake_case, kebab-case, spaced
words, numbers and symbols) and breaks it into parts, which ``join`` and the
style helpers turn into the wanted casing.
"""

from __future__ import annotations

import enum
import re
import unicodedata
from collections.abc import Callable, Iterable

TransformFunc = Callable[[str], str]

COMMON_INITIALISMS = frozenset(
    {
        "ACL", "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML",
        "HTTP", "HTTPS", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS",
        "RPC", "SLA", "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP", "UI",
        "UID", "UUID", "URI", "URL", "UTF8", "VM", "XML", "XMPP", "XSRF",
        "XSS",
        # Media initialisms
        "1080P", "2D", "3D", "4K", "8K", "AAC", "AC3", "CDN", "DASH", "DRM",
        "DVR", "EAC3", "FPS", "GOP", "H264", "H265", "HD", "HLS", "MJPEG",
        "MP2T", "MP3", "MP4", "MPEG2", "MPEG4", "NTSC", "PCM", "RGB", "RGBA",
        "RTMP", "RTP", "SCTE", "SCTE35", "SMPTE", "UPID", "UPIDS", "VOD",
        "YUV420", "YUV422", "YUV444",
    }
)

# Words that attach to a preceding number, e.g. 2D, 100GB, 1080P.
COMMON_SUFFIXES = frozenset({"D", "GB", "K", "KB", "KBPS", "MB", "MPBS", "P", "TB"})

_WHITE_SPACE = frozenset(
    "\t\n\v\f\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class _State(enum.Enum):
    NONE = enum.auto()
    LOWER = enum.auto()
    FIRST_UPPER = enum.auto()
    UPPER = enum.auto()
    SYMBOL = enum.auto()


def _category(c: str) -> str:
    return unicodedata.category(c)


def _is_space(c: str) -> bool:
    return c in _WHITE_SPACE


def _is_punct(c: str) -> bool:
    return _category(c).startswith("P")


def _is_upper(c: str) -> bool:
    return _category(c) == "Lu"


def _is_lower(c: str) -> bool:
    return _category(c) == "Ll"


def _is_letter(c: str) -> bool:
    return _category(c).startswith("L")


def _simple(mapped: str, original: str) -> str:
    return mapped if len(mapped) == 1 else original


def _lower(value: str) -> str:
    return "".join(_simple(c.lower(), c) for c in value)


def _upper(value: str) -> str:
    return "".join(_simple(c.upper(), c) for c in value)


def _is_separator(c: str) -> bool:
    if ord(c) <= 0x7F:
        return not (c.isalnum() or c == "_")
    if _is_letter(c) or _category(c) == "Nd":
        return False
    return _is_space(c)


def _title(value: str) -> str:
    """Upper-case the first letter of every word, leaving the rest alone."""
    out = []
    at_word_start = True
    for c in value:
        out.append(_simple(c.title(), c) if at_word_start else c)
        at_word_start = _is_separator(c)
    return "".join(out)


def _is_int(part: str) -> bool:
    if not _INT_RE.fullmatch(part):
        return False
    return _INT_MIN <= int(part) <= _INT_MAX


def identity(part: str) -> str:
    """Return the part as a plain string, otherwise unchanged."""
    return str(part)


def initialism(part: str) -> str:
    """Upper-case common initialisms such as ID and HTTP."""
    upper = _upper(part)
    return upper if upper in COMMON_INITIALISMS else part


def split(value: str) -> list[str]:
    """Split a value into words, honouring casing styles, numbers and symbols.

    >>> split("HTTPServer_2020")
    ['HTTP', 'Server', '2020']
    """
    results: list[str] = []
    start = 0
    state = _State.NONE

    for i, c in enumerate(value):
        # Spaces and punctuation always break words (kebab and snake casing).
        if _is_space(c) or _is_punct(c):
            if i > start:
                results.append(value[start:i])
            start = i + 1
            state = _State.NONE
            continue

        if state not in (_State.FIRST_UPPER, _State.UPPER) and _is_upper(c):
            # An initial uppercase letter may begin a word, e.g. Camel.
            if start != i:
                results.append(value[start:i])
                start = i
            state = _State.FIRST_UPPER
        elif state is _State.FIRST_UPPER and _is_upper(c):
            # A run of uppercase letters is grouped, e.g. HTTP.
            state = _State.UPPER
        elif state is not _State.SYMBOL and not _is_letter(c):
            if start != i:
                results.append(value[start:i])
                start = i
            state = _State.SYMBOL
        elif state is not _State.LOWER and _is_lower(c):
            if state is _State.UPPER:
                # The last uppercase letter starts the lowercase word, e.g. HTTPServer.
                if i > 0 and start != i - 1:
                    results.append(value[start : i - 1])
                    start = i - 1
            elif state is not _State.FIRST_UPPER:
                if i > 0 and start != i:
                    results.append(value[start:i])
                    start = i
            state = _State.LOWER

    if start < len(value):
        results.append(value[start:])

    return results


def _apply(part: str, transforms: Iterable[TransformFunc]) -> str | None:
    for transform in transforms:
        part = transform(part)
        if not part:
            return None
    return part


def join(parts: Iterable[str], sep: str, *transforms: TransformFunc) -> str:
    """Join parts with ``sep`` after running each through the transforms.

    A part that a transform turns into an empty string is dropped.
    """
    kept = (_apply(part, transforms) for part in parts)
    return sep.join(part for part in kept if part is not None)


def merge_numbers(parts: Iterable[str], *suffixes: str) -> list[str]:
    """Merge number parts with adjacent word parts for nicer delimited names.

    ``h264`` rather than ``h_264``; a number followed by one of the suffixes
    (by default ``COMMON_SUFFIXES``) is joined to the suffix instead, giving
    ``mode_4k`` rather than ``mode4_k``. Pass an empty string to disable the
    default suffixes.
    """
    parts = list(parts)
    lookup = {s.upper() for s in suffixes} if suffixes else COMMON_SUFFIXES
    results: list[str] = []
    prev_num = False
    i = 0

    while i < len(parts):
        part = parts[i]
        if _is_int(part):
            if i < len(parts) - 1 and parts[i + 1].upper() in lookup:
                results.append(part + parts[i + 1])
                i += 2
                continue
            if not prev_num:
                if i == 0:
                    results.append(part)
                else:
                    results[-1] += part
                prev_num = True
                i += 1
                continue
            prev_num = True
        else:
            # A leading number is glued to the word that follows it.
            if i == 1 and prev_num:
                results[0] += part
                prev_num = False
                i += 1
                continue
            prev_num = False

        results.append(part)
        i += 1

    return results


def camel(value: str, *transforms: TransformFunc) -> str:
    """Return a CamelCase version of the value.

    Parts are lower-cased first unless other transforms are given; pass
    ``identity`` to keep them as they are.
    """
    if not transforms:
        transforms = (_lower,)
    return join(split(value), "", *transforms, _title)


def lower_camel(value: str, *transforms: TransformFunc) -> str:
    """Return a lowerCamelCase version of the value."""
    result = camel(value, *transforms)
    if not result:
        return result
    return _lower(result[0]) + result[1:]


def snake(value: str, *transforms: TransformFunc) -> str:
    """Return a snake_case version of the value."""
    if not transforms:
        transforms = (_lower,)
    return join(merge_numbers(split(value)), "_", *transforms)


def kebab(value: str, *transforms: TransformFunc) -> str:
    """Return a kebab-case version of the value."""
    if not transforms:
        transforms = (_lower,)
    return join(merge_numbers(split(value)), "-", *transforms)