"""Round-trip YAML codec for config files.

Parsed documents stay ruamel.yaml ``CommentedMap`` trees so that a commit can
merge the new value into the existing tree and keep user comments, key order
and quoting intact.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from fluencectl.domain.errors import ParseError


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful and a failed dump can leave it
    broken, so every operation gets its own instance.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    y.indent(mapping=2, sequence=4, offset=2)
    return y


def parse_yaml(text: str) -> Any:
    """Parse *text* into a round-trip tree (``None`` for an empty document).

    Raises:
        ParseError: If *text* is not well-formed YAML.
    """
    try:
        return _new_yaml().load(text)
    except YAMLError as exc:
        raise ParseError(f"Invalid YAML: {exc}") from exc


def dump_yaml(document: Any) -> str:
    """Serialize a round-trip tree (or plain data) to YAML text."""
    buf = StringIO()
    _new_yaml().dump(document, buf)
    return buf.getvalue()


def to_plain(node: Any) -> Any:
    """Convert a round-trip tree into plain dicts and lists.

    Unquoted YAML timestamps come back as ISO 8601 strings.
    """
    if isinstance(node, Mapping):
        return {str(k): to_plain(v) for k, v in node.items()}
    if isinstance(node, Sequence) and not isinstance(node, str):
        return [to_plain(v) for v in node]
    if isinstance(node, date):
        return node.isoformat()
    return node


def _to_commented(value: Any) -> Any:
    if isinstance(value, Mapping):
        node = CommentedMap()
        for k, v in value.items():
            node[k] = _to_commented(v)
        return node
    if isinstance(value, Sequence) and not isinstance(value, str):
        seq = CommentedSeq()
        seq.extend(_to_commented(v) for v in value)
        return seq
    return value


def merge_into(target: CommentedMap, source: Mapping[str, Any]) -> CommentedMap:
    """Make *target* equal to *source* while keeping its comments and order.

    Keys absent from *source* are removed, nested mappings and same-position
    list items are merged recursively, and anything else is replaced.
    """
    for key in [k for k in target if k not in source]:
        del target[key]
    for key, value in source.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, CommentedMap):
            merge_into(current, value)
        # Empty sequences (usually flow style ``[]``) are replaced, not merged.
        elif isinstance(value, list) and isinstance(current, CommentedSeq) and len(current):
            _merge_seq(current, value)
        elif key not in target or current != value:
            target[key] = _to_commented(value)
    return target


def _merge_seq(target: CommentedSeq, source: list[Any]) -> None:
    del target[len(source) :]
    for index, value in enumerate(source):
        if index >= len(target):
            target.append(_to_commented(value))
            continue
        current = target[index]
        if isinstance(value, Mapping) and isinstance(current, CommentedMap):
            merge_into(current, value)
        elif isinstance(value, list) and isinstance(current, CommentedSeq):
            _merge_seq(current, value)
        elif current != value:
            target[index] = _to_commented(value)
