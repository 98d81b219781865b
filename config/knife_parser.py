# config/knife_parser.py

"""
Line-oriented parser for knife.rb declarations.

Recognized shapes (one declaration per logical line):

    node_name               'admin'             -> str
    local_mode              true                -> bool
    data_bag_encrypt_version 2                  -> int
    log_level               :info               -> str ("info")
    log_location            STDOUT              -> str ("STDOUT")
    cookbook_path [ "/a", "/b" ]                -> list[str], may span lines
    chef_zero[:port]        8889                -> nested under "chef_zero"

Anything else raises ConfigParseError naming the offending line.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from utils.errors import ConfigParseError
from utils.logging import get_logger

logger = get_logger(__name__)

_SQ = r"'(?:[^'\\]|\\.)*'"
_DQ = r'"(?:[^"\\]|\\.)*"'

_STRING_RE = re.compile(rf"{_SQ}|{_DQ}")
_COMMENT_SCAN_RE = re.compile(rf"{_SQ}|{_DQ}|#")
_NAME_RE = re.compile(r"[A-Za-z_]\w*")
_SUBKEY_RE = re.compile(rf"\[\s*(?::(?P<symbol>\w+)|(?P<quoted>{_SQ}|{_DQ}))\s*\]")
_SEPARATOR_RE = re.compile(r"\s+")
_WHITESPACE_RE = re.compile(r"\s*")
_LIST_SEPARATOR_RE = re.compile(r"\s*,\s*")
_LIST_CLOSE_RE = re.compile(r"\s*\]")
_BOOL_RE = re.compile(r"(true|false)\b")
_INT_RE = re.compile(r"[-+]?\d+(?![\w.])")
_SYMBOL_RE = re.compile(r":([A-Za-z_]\w*[?!]?)")
_CONSTANT_RE = re.compile(r"[A-Z]\w*(?:::[A-Z]\w*)*")

_DQ_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "s": " ", "0": "\0", "e": "\x1b"}


class _Invalid(Exception):
    """Internal signal carrying the reason a declaration failed to parse."""


def _strip_comment(line: str) -> str:
    """Drop a ``#`` comment that sits outside any quoted string."""
    for match in _COMMENT_SCAN_RE.finditer(line):
        if match.group() == "#":
            return line[: match.start()]
    return line


def _has_open_quote(text: str) -> bool:
    unquoted = _STRING_RE.sub("", text)
    return "'" in unquoted or '"' in unquoted


def _bracket_depth(text: str) -> int:
    unquoted = _STRING_RE.sub("", text)
    return unquoted.count("[") - unquoted.count("]")


def _unquote(literal: str) -> str:
    quote, body = literal[0], literal[1:-1]
    if quote == "'":
        return re.sub(r"\\([\\'])", r"\1", body)
    return re.sub(r"\\(.)", lambda m: _DQ_ESCAPES.get(m.group(1), m.group(1)), body)


def _parse_list(text: str, pos: int) -> tuple[list[str], int]:
    """Parse ``[ "a", "b", ]`` starting at the opening bracket."""
    items: list[str] = []
    pos = _WHITESPACE_RE.match(text, pos + 1).end()  # type: ignore[union-attr]
    while True:
        close = _LIST_CLOSE_RE.match(text, pos)
        if close:
            return items, close.end()

        string = _STRING_RE.match(text, pos)
        if not string:
            raise _Invalid("list items must be quoted strings")
        items.append(_unquote(string.group()))
        pos = string.end()

        close = _LIST_CLOSE_RE.match(text, pos)
        if close:
            return items, close.end()
        comma = _LIST_SEPARATOR_RE.match(text, pos)
        if not comma:
            raise _Invalid("expected ',' or ']' in list")
        pos = comma.end()


def _parse_value(text: str, pos: int) -> tuple[Any, int]:
    """Parse one value literal starting at ``pos``; return it and the end offset."""
    if text.startswith("[", pos):
        return _parse_list(text, pos)

    match = _STRING_RE.match(text, pos)
    if match:
        return _unquote(match.group()), match.end()

    match = _BOOL_RE.match(text, pos)
    if match:
        return match.group(1) == "true", match.end()

    match = _INT_RE.match(text, pos)
    if match:
        return int(match.group()), match.end()

    match = _SYMBOL_RE.match(text, pos)
    if match:
        return match.group(1), match.end()

    match = _CONSTANT_RE.match(text, pos)
    if match:
        return match.group(), match.end()

    raise _Invalid("unrecognized value")


def _parse_declaration(text: str) -> tuple[tuple[str, ...], Any]:
    """Parse a single comment-free declaration into its key path and value."""
    name = _NAME_RE.match(text)
    if not name:
        raise _Invalid("expected a setting name")
    keys = [name.group()]
    pos = name.end()

    while text.startswith("[", pos):
        subkey = _SUBKEY_RE.match(text, pos)
        if not subkey:
            raise _Invalid("malformed nested key")
        if subkey.group("symbol") is not None:
            keys.append(subkey.group("symbol"))
        else:
            keys.append(_unquote(subkey.group("quoted")))
        pos = subkey.end()

    separator = _SEPARATOR_RE.match(text, pos)
    if not separator:
        raise _Invalid("expected whitespace between name and value")

    value, pos = _parse_value(text, separator.end())
    if text[pos:].strip():
        raise _Invalid("unexpected text after value")
    return tuple(keys), value


def _assign(tree: dict[str, Any], keys: tuple[str, ...], value: Any) -> bool:
    """Store ``value`` under ``keys``; return True when an earlier value was replaced."""
    node = tree
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    replaced = keys[-1] in node
    node[keys[-1]] = value
    return replaced


def _logical_lines(lines: Iterable[str], source: str) -> Iterable[tuple[int, str, str]]:
    """
    Yield ``(line_number, raw_text, declaration)`` for each non-empty logical
    line, joining bracketed lists that continue over several physical lines.
    """
    pending: list[str] = []
    pending_raw: list[str] = []
    start = 0

    for number, raw in enumerate(lines, start=1):
        raw = raw.rstrip("\r\n")
        text = _strip_comment(raw).strip()
        if not pending:
            if not text:
                continue
            start = number
        if _has_open_quote(text):
            raise ConfigParseError(
                "unterminated string", source=source, line_number=number, line=raw
            )
        pending.append(text)
        pending_raw.append(raw)

        declaration = " ".join(part for part in pending if part)
        if _bracket_depth(declaration) > 0:
            continue
        yield start, "\n".join(pending_raw), declaration
        pending, pending_raw = [], []

    if pending:
        raise ConfigParseError(
            "unterminated list",
            source=source,
            line_number=start,
            line=pending_raw[0],
        )


def parse_knife_lines(lines: Iterable[str], source: str = "<string>") -> dict[str, Any]:
    """
    Parse knife.rb lines into a nested settings dict.

    Last assignment wins for duplicate names. Raises ConfigParseError on the
    first line that matches no recognized shape; nothing partial is returned.
    """
    settings: dict[str, Any] = {}
    for line_number, raw, declaration in _logical_lines(lines, source):
        try:
            keys, value = _parse_declaration(declaration)
        except _Invalid as e:
            raise ConfigParseError(
                str(e), source=source, line_number=line_number, line=raw
            ) from None

        if _assign(settings, keys, value):
            logger.debug(
                "Setting %s redeclared; later value wins",
                ".".join(keys),
                extra={"config_path": source, "line_number": line_number},
            )
    return settings


def parse_knife_text(text: str, source: str = "<string>") -> dict[str, Any]:
    """Parse a whole knife.rb document held in memory."""
    return parse_knife_lines(text.splitlines(), source)
