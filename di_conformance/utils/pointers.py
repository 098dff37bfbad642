"""JSON pointer (RFC 6901) helpers for selective disclosure."""

from copy import deepcopy
from typing import Any, List, Sequence

from jsonpath_ng.jsonpath import Child, Fields, Index, JSONPath, Root


class PointerError(ValueError):
    """Raised when a JSON pointer is malformed or does not match a document."""


def parse_pointer(pointer: str) -> List[str]:
    """Split a JSON pointer into unescaped reference tokens."""
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise PointerError(f"JSON pointer must start with '/': {pointer!r}")
    return [
        token.replace("~1", "/").replace("~0", "~") for token in pointer[1:].split("/")
    ]


def _is_index(token: str) -> bool:
    return token.isdigit() and (token == "0" or not token.startswith("0"))


def pointer_to_path(pointer: str) -> JSONPath:
    """Build the JSONPath expression equivalent to a JSON pointer.

    `/a/b/0` becomes `$.a.b[0]`; numeric tokens address array elements.
    """
    path = Root()
    for token in parse_pointer(pointer):
        path = Child(path, Index(int(token)) if _is_index(token) else Fields(token))
    return path


def _match_values(document: Any, pointer: str) -> List[Any]:
    """Values along the matched path, from the document down to the target."""
    tokens = parse_pointer(pointer)
    try:
        matches = pointer_to_path(pointer).find(document)
    except (KeyError, TypeError) as err:
        raise PointerError(f"JSON pointer {pointer!r} does not match document") from err
    if len(matches) != 1:
        raise PointerError(f"JSON pointer {pointer!r} does not match document")

    values = []
    datum = matches[0]
    while datum is not None:
        values.append(datum.value)
        datum = datum.context
    values.reverse()

    # index tokens only ever match arrays
    for parent, token in zip(values, tokens):
        if isinstance(parent, list) != _is_index(token):
            raise PointerError(f"JSON pointer {pointer!r} does not match document")
    return values


def _skeleton(value: dict) -> dict:
    # identifiers and types of every traversed object stay disclosed
    return {key: deepcopy(value[key]) for key in ("id", "type") if key in value}


def select_pointers(document: dict, pointers: Sequence[str]) -> dict:
    """Build the subset of a document disclosed by a set of JSON pointers.

    The top-level `@context` is always kept. Selected array elements keep
    their relative order; unselected ones are dropped.
    """
    selection = _skeleton(document)
    if "@context" in document:
        selection["@context"] = deepcopy(document["@context"])

    for pointer in pointers:
        tokens = parse_pointer(pointer)
        if not tokens:
            return deepcopy(document)
        values = _match_values(document, pointer)
        target = selection
        for position, token in enumerate(tokens):
            if isinstance(target, list):
                # an enclosing array was disclosed whole
                break
            parent, child = values[position], values[position + 1]
            key = int(token) if isinstance(parent, list) else token
            if position == len(tokens) - 1:
                target[key] = deepcopy(child)
            elif key not in target:
                target[key] = _skeleton(child) if isinstance(child, dict) else {}
            target = target[key]

    return _compact(selection)


def _compact(value: Any) -> Any:
    if isinstance(value, dict) and value and all(isinstance(k, int) for k in value):
        return [_compact(value[index]) for index in sorted(value)]
    if isinstance(value, dict):
        return {key: _compact(child) for key, child in value.items()}
    if isinstance(value, list):
        return [_compact(child) for child in value]
    return value
