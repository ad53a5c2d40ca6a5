"""Error kinds raised by the conversion stages and JSON decode diagnostics."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from .geojson_extract import GeometryDocument


class ConversionError(Exception):
    """Base class for errors that end a conversion run."""


class CatalogError(ConversionError):
    """The facility configuration could not be read or decoded."""


class GeometryDocumentError(ConversionError):
    """A geometry document could not be read or decoded.

    ``partial`` holds the features that did decode when the failure was a
    structural mismatch further down the document; it is ``None`` when
    nothing usable could be recovered (unreadable file, JSON syntax error).
    """

    def __init__(self, message: str, partial: Optional["GeometryDocument"] = None) -> None:
        super().__init__(message)
        self.partial = partial


class MissingGeometryError(ConversionError):
    """An expected geometry document or directory does not exist."""


class DuplicateMapError(ConversionError):
    """Two geometry sources resolved to the same display name."""


class OutputWriteError(ConversionError):
    """An output artifact could not be written."""


def offset_to_line_char(text: str, offset: int) -> tuple[int, int]:
    """Return 1-based (line, character) for ``offset`` by scanning ``text``."""
    line, char = 1, 1
    for ch in text[: max(offset, 0)]:
        if ch == "\n":
            line += 1
            char = 1
        else:
            char += 1
    return line, char


def decode_json_bytes(
    data: Union[bytes, str],
    source: Union[str, Path],
    error_cls: type[ConversionError],
) -> Any:
    """
    Decode strict JSON content, raising ``error_cls`` with a line/character diagnostic.

    A leading byte-order mark and the ``NaN`` / ``Infinity`` / ``-Infinity``
    literals are not JSON and are reported as syntax errors.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            prefix = data[: exc.start].decode("utf-8", "replace")
            line, char = offset_to_line_char(prefix, len(prefix))
            raise error_cls(
                f"{source}: Error at line {line}, character {char}: invalid UTF-8 ({exc.reason})"
            ) from exc
    else:
        text = data

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        line, char = offset_to_line_char(text, exc.pos)
        raise error_cls(f"{source}: Error at line {line}, character {char}: {exc.msg}") from exc
    except _NonStandardConstant as exc:
        line, char = offset_to_line_char(text, _constant_offset(text))
        raise error_cls(
            f"{source}: Error at line {line}, character {char}: "
            f"invalid literal {exc.token!r} looking for beginning of value"
        ) from exc


class _NonStandardConstant(ValueError):
    def __init__(self, token: str) -> None:
        super().__init__(token)
        self.token = token


def _reject_constant(token: str) -> Any:
    raise _NonStandardConstant(token)


# String literals are matched first so constants inside them are skipped.
_CONSTANT_RE = re.compile(r'"(?:[^"\\]|\\.)*"|(-?Infinity|NaN)')


def _constant_offset(text: str) -> int:
    """Offset of the first bare NaN/Infinity literal; the decoder stops at the first one."""
    for match in _CONSTANT_RE.finditer(text):
        if match.group(1) is not None:
            return match.start(1)
    return 0


def expect_type(
    value: Any,
    expected: Union[type, tuple[type, ...]],
    path: str,
    error_cls: type[ConversionError],
    source: Union[str, Path, None] = None,
) -> None:
    """Raise ``error_cls`` when ``value`` is not of the expected JSON type."""
    allowed = expected if isinstance(expected, tuple) else (expected,)
    if isinstance(value, allowed) and not (isinstance(value, bool) and bool not in allowed):
        return
    wanted = " or ".join(_TYPE_NAMES.get(t, t.__name__) for t in allowed)
    prefix = f"{source}: " if source is not None else ""
    raise error_cls(f"{prefix}Invalid `{path}`: {_json_kind(value)} value invalid for type {wanted}.")


_TYPE_NAMES = {
    str: "string",
    list: "array",
    dict: "object",
    int: "integer",
    float: "number",
    type(None): "null",
}


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
