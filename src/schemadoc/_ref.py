import logging
import typing as t

import pydantic

logger = logging.getLogger(__name__)

_DEFINITIONS_KEYWORDS = ("definitions", "$defs")
_ID_KEYWORDS = ("$id", "id")


def resolve_ref(root: pydantic.JsonValue, ref: str) -> pydantic.JsonValue:
    """Look up an internal `$ref` in the `root` document.

    A pointer like `#/definitions/Foo` walks the document segment by segment.
    A bare identifier like `#foo` searches the definitions for a matching `$id`.
    References that can't be resolved degrade to the empty schema.

    >>> root = {"definitions": {"Foo": {"type": "string", "$id": "#foo"}}}
    >>> resolve_ref(root, "#/definitions/Foo")
    {'type': 'string', '$id': '#foo'}
    >>> resolve_ref(root, "#foo")
    {'type': 'string', '$id': '#foo'}
    >>> resolve_ref(root, "#/definitions/Bar")
    {}
    """
    if "/" in ref:
        target = _resolve_pointer(root, ref)
    else:
        target = _resolve_identifier(root, ref)

    if target is None:
        logger.debug("could not resolve reference %r, using empty schema", ref)
        return {}
    return target


def _resolve_pointer(root: pydantic.JsonValue, ptr: str) -> pydantic.JsonValue:
    _fragment, *path = ptr.split("/")
    value = root
    for segment in path:
        key = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(value, t.Mapping) and key in value:
            value = value[key]
        elif isinstance(value, list) and key.isdigit() and int(key) < len(value):
            value = value[int(key)]
        else:
            return None
    return value


def _resolve_identifier(root: pydantic.JsonValue, ident: str) -> pydantic.JsonValue:
    if not isinstance(root, t.Mapping):
        return None
    wanted = {ident, ident.removeprefix("#")}
    for keyword in _DEFINITIONS_KEYWORDS:
        definitions = root.get(keyword)
        if not isinstance(definitions, t.Mapping):
            continue
        for definition in definitions.values():
            if isinstance(definition, t.Mapping) and _declared_id(definition) in wanted:
                return definition
    return None


def _declared_id(definition: t.Mapping[str, pydantic.JsonValue]) -> str | None:
    for keyword in _ID_KEYWORDS:
        if isinstance(declared := definition.get(keyword), str):
            return declared
    return None
