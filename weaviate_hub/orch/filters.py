from __future__ import annotations

import json
import re
from typing import Any, Mapping, Sequence, Union


# JSON-shaped value accepted as a `where` filter.
FilterValue = Union[str, int, float, bool, None, Sequence["FilterValue"], Mapping[str, "FilterValue"]]

_ENUM_SYMBOL_RE = re.compile(r"^[A-Z][A-Za-z0-9_]*$")
_NAME_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def _is_enum_symbol(key: str, value: Any) -> bool:
    # Weaviate's `operator` field is an enum (Equal, Like, And, ...), not a string
    return key == "operator" and isinstance(value, str) and bool(_ENUM_SYMBOL_RE.match(value))


def _literal(value: Any) -> str:
    return json.dumps(value if isinstance(value, str) else str(value), ensure_ascii=False)


def to_graphql_value(value: FilterValue) -> str:
    """Serialize a JSON-shaped value as a GraphQL input literal.

    Mappings become `{key: value}` blocks and sequences become `[a, b]` lists.
    Anything that is not a JSON shape is emitted as a quoted string so a
    malformed filter still reaches the backend, which reports it.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return _literal(value)
    if isinstance(value, Mapping):
        parts = []
        for key, item in value.items():
            key = str(key)
            name = key if _NAME_RE.match(key) else _literal(key)
            rendered = item if _is_enum_symbol(key, item) else to_graphql_value(item)
            parts.append(f"{name}: {rendered}")
        return "{" + ", ".join(parts) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(to_graphql_value(v) for v in value) + "]"
    return _literal(value)


def equal_text(path: str, text: str) -> dict:
    return {"path": [path], "operator": "Equal", "valueText": text}


def like_text(path: str, pattern: str) -> dict:
    return {"path": [path], "operator": "Like", "valueText": pattern}


def conjoin(clause: dict, where: FilterValue | None) -> FilterValue:
    """AND `clause` with an optional caller filter."""
    if where is None:
        return clause
    return {"operator": "And", "operands": [clause, where]}
