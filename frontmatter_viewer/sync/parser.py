from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Mapping, Sequence, Tuple

NUMBER_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")
LINE_BREAK = re.compile(r"\r?\n")
LIST_MARKER = "- "
QUOTES = ("'", '"')


def parse_simple_yaml(text: str) -> Dict[str, Any]:
    """
    Parse the constrained metadata dialect into an insertion-ordered dict.

    Supported forms:
      key: value            (string, number, boolean, null)
      key: [a, b]           (inline list, items stay strings)
      key:                  (block list of "- item" lines)
        - a
      key:                  (nested mapping at a deeper indentation)
        child: value
    """
    mapping, _ = parse_block(LINE_BREAK.split(text), 0)
    return mapping


def parse_block(lines: Sequence[str], base_indent: int, start: int = 0) -> Tuple[Dict[str, Any], int]:
    """
    Parse the mapping whose keys sit at exactly `base_indent`, beginning at
    `start`. Returns the mapping and the index of the first line that does
    not belong to it. Every loop iteration consumes at least one line.
    """
    result: Dict[str, Any] = {}
    total = len(lines)
    i = start
    while i < total:
        line = lines[i]
        if _is_skippable(line):
            i += 1
            continue
        indent = _indent_of(line)
        if indent < base_indent:
            break
        if indent > base_indent:
            # orphaned deeper line, not claimed by any key
            i += 1
            continue

        key, sep, raw_value = line.partition(":")
        if not sep:
            i += 1
            continue
        key = key.strip()
        raw_value = raw_value.strip()

        if raw_value:
            if raw_value.startswith("[") and raw_value.endswith("]"):
                result[key] = _parse_inline_list(raw_value)
            else:
                result[key] = parse_scalar(raw_value)
            i += 1
            continue

        j = _next_content_index(lines, i + 1)
        if j < total and _indent_of(lines[j]) > base_indent:
            child_indent = _indent_of(lines[j])
            if lines[j].strip().startswith(LIST_MARKER):
                result[key], i = _parse_block_list(lines, child_indent, j)
            else:
                result[key], i = parse_block(lines, child_indent, j)
        else:
            result[key] = None
            i += 1
    return result, i


def parse_scalar(value: str) -> Any:
    if value == "true":
        return True
    if value == "false":
        return False
    if value in ("null", "~"):
        return None
    if NUMBER_PATTERN.fullmatch(value):
        return float(value) if "." in value else int(value)
    return strip_quotes(value)


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTES:
        return value[1:-1]
    return value


def _parse_inline_list(raw_value: str) -> List[str]:
    inner = raw_value[1:-1]
    if not inner.strip():
        return []
    return [strip_quotes(item.strip()) for item in inner.split(",")]


def _parse_block_list(lines: Sequence[str], list_indent: int, start: int) -> Tuple[List[str], int]:
    items: List[str] = []
    total = len(lines)
    i = start
    while i < total:
        line = lines[i]
        if _is_skippable(line):
            i += 1
            continue
        indent = _indent_of(line)
        if indent < list_indent:
            break
        if indent > list_indent:
            i += 1
            continue
        stripped = line.strip()
        if not stripped.startswith(LIST_MARKER):
            break
        items.append(strip_quotes(stripped[len(LIST_MARKER):].strip()))
        i += 1
    return items, i


def _next_content_index(lines: Sequence[str], start: int) -> int:
    i = start
    while i < len(lines) and _is_skippable(lines[i]):
        i += 1
    return i


def _is_skippable(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


# ---------------------------------------------------------------------------
# Rendering back to the dialect
# ---------------------------------------------------------------------------


def render_simple_yaml(mapping: Mapping[str, Any]) -> str:
    """
    Render a mapping so that `parse_simple_yaml` reads it back unchanged.
    Raises ValueError for values the dialect cannot express.
    """
    return "\n".join(_render_mapping(mapping, 0))


def _render_mapping(mapping: Mapping[str, Any], indent: int) -> List[str]:
    pad = " " * indent
    lines: List[str] = []
    for key, value in mapping.items():
        _check_key(key)
        if isinstance(value, Mapping):
            if not value:
                raise ValueError(f"Empty mapping under {key!r} would read back as null")
            lines.append(f"{pad}{key}:")
            lines.extend(_render_mapping(value, indent + 2))
        elif isinstance(value, (list, tuple)):
            if not value:
                lines.append(f"{pad}{key}: []")
                continue
            lines.append(f"{pad}{key}:")
            for item in value:
                lines.append(f"{pad}  {LIST_MARKER}{_render_list_item(item)}")
        else:
            lines.append(f"{pad}{key}: {_render_scalar(value)}")
    return lines


def _check_key(key: Any) -> None:
    if not isinstance(key, str) or not key:
        raise ValueError(f"Keys must be non-empty strings, got {key!r}")
    if key != key.strip() or ":" in key or "\n" in key or "\r" in key:
        raise ValueError(f"Key {key!r} cannot be represented")
    if key.startswith(("#", "-")):
        raise ValueError(f"Key {key!r} would be read as a comment or list item")


def _render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        if not math.isfinite(value) or not NUMBER_PATTERN.fullmatch(text):
            raise ValueError(f"Float {value!r} has no plain decimal form")
        return text
    if isinstance(value, str):
        _check_single_line(value)
        parsed = parse_scalar(value)
        bracketed = value.startswith("[") and value.endswith("]")
        if not value or value != value.strip() or bracketed or not isinstance(parsed, str) or parsed != value:
            return _quote(value)
        return value
    raise ValueError(f"Unsupported value type: {type(value).__name__}")


def _render_list_item(item: Any) -> str:
    if not isinstance(item, str):
        raise ValueError(f"List items must be strings, got {item!r}")
    _check_single_line(item)
    if not item or item != item.strip() or strip_quotes(item) != item:
        return _quote(item)
    return item


def _check_single_line(value: str) -> None:
    if "\n" in value or "\r" in value:
        raise ValueError(f"Multi-line string {value!r} cannot be represented")


def _quote(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    raise ValueError(f"String {value!r} contains both quote characters")
