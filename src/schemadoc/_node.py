import enum
import logging
import typing as t
from dataclasses import dataclass

import pydantic
from typing_extensions import TypeIs

from ._errors import MalformedSchemaError
from ._ref import resolve_ref

logger = logging.getLogger(__name__)

type Schema = t.Mapping[str, pydantic.JsonValue]


class NodeKind(enum.Enum):
    """How a schema node gets rendered."""

    TUPLE = enum.auto()
    """A bare sequence of schemas, rendered like a tuple-typed array."""

    NOT = enum.auto()
    CONST = enum.auto()
    MULTI_TYPE = enum.auto()
    NULL = enum.auto()
    OBJECT = enum.auto()
    ARRAY = enum.auto()
    ENUM = enum.auto()
    STRING = enum.auto()
    NUMERIC = enum.auto()
    BOOLEAN = enum.auto()
    ONE_OF = enum.auto()
    ANY_OF = enum.auto()
    ALL_OF = enum.auto()
    CONDITIONAL = enum.auto()

    UNRECOGNIZED = enum.auto()
    """None of the supported keywords apply, rendered as an empty string."""


@dataclass(frozen=True)
class Node:
    """A schema node that has been classified for rendering."""

    kind: NodeKind

    schema: Schema
    """The schema with its `$ref` resolved and nullable types rewritten."""

    items: t.Sequence[pydantic.JsonValue] = ()
    """The element schemas of a `NodeKind.TUPLE` node."""


def normalize(schema: pydantic.JsonValue, root: pydantic.JsonValue) -> Node:
    """Classify the `schema`, applying the keyword precedence rules.

    A node that matches several rules is classified by the first one,
    e.g. a typed `enum` is still an `ENUM`:

    >>> normalize({"type": "string", "enum": ["a", "b"]}, {}).kind
    <NodeKind.ENUM: 8>
    >>> normalize([{"type": "null"}], {}).kind
    <NodeKind.NULL: 5>
    """
    match schema:
        case {"$ref": str(ref)} if ref.startswith("#"):
            schema = resolve_ref(root, ref)

    if is_schema_list(schema):
        if len(schema) != 1:
            return Node(NodeKind.TUPLE, {}, items=schema)
        schema = schema[0]

    if isinstance(schema, bool):
        # `true`/`false` schemas carry no keywords
        return Node(NodeKind.UNRECOGNIZED, {})
    if not isinstance(schema, t.Mapping):
        raise MalformedSchemaError(f"expected a schema object, got: {schema!r}")

    return _classify(schema)


def _classify(schema: Schema) -> Node:  # noqa: C901, PLR0911  # complexity
    match schema:
        case {"not": _}:
            return Node(NodeKind.NOT, schema)
        case {"const": _}:
            return Node(NodeKind.CONST, schema)
        case {"type": [*types]}:
            non_null = [type_ for type_ in types if type_ != "null"]
            if len(types) == 2 and len(non_null) == 1:  # noqa: PLR2004
                nullable = {"oneOf": [{**schema, "type": non_null[0]}, {"type": "null"}]}
                return Node(NodeKind.ONE_OF, nullable)
            return Node(NodeKind.MULTI_TYPE, schema)
        case {"type": "null"}:
            return Node(NodeKind.NULL, schema)
        case {"type": "object"}:
            return Node(NodeKind.OBJECT, schema)
        case {"properties": _} if "type" not in schema:
            return Node(NodeKind.OBJECT, schema)
        case {"type": "array"}:
            return Node(NodeKind.ARRAY, schema)
        case {"items": _} if "type" not in schema:
            return Node(NodeKind.ARRAY, schema)
        case {"enum": _}:
            return Node(NodeKind.ENUM, schema)
        case {"type": "string"}:
            return Node(NodeKind.STRING, schema)
        case {"type": "integer" | "number"}:
            return Node(NodeKind.NUMERIC, schema)
        case {"type": "boolean"}:
            return Node(NodeKind.BOOLEAN, schema)
        case {"oneOf": _}:
            return Node(NodeKind.ONE_OF, schema)
        case {"anyOf": _}:
            return Node(NodeKind.ANY_OF, schema)
        case {"allOf": _}:
            return Node(NodeKind.ALL_OF, schema)
        case {"if": _, "then": _}:
            return Node(NodeKind.CONDITIONAL, schema)
        case _:
            logger.debug("no renderer for schema with keywords %s", sorted(schema))
            return Node(NodeKind.UNRECOGNIZED, schema)


def is_schema_list(
    value: pydantic.JsonValue,
) -> TypeIs[t.Sequence[pydantic.JsonValue]]:
    """Check for a JSON array (but not a string)."""
    return isinstance(value, t.Sequence) and not isinstance(value, str)
