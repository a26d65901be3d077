"""Render JSON Schemas as a compact documentation grammar.

Every `_*_doc()` function follows the same layout rules:

* the result never starts or ends with a newline
* the result never starts with its own indentation,
  the caller has already placed the cursor
* lines after a newline are indented relative to the caller's indent level
"""

import dataclasses
import enum
import json
import typing as t
from dataclasses import dataclass

import pydantic

from ._errors import MalformedSchemaError, SchemaRecursionError
from ._node import NodeKind, Schema, is_schema_list, normalize

INDENT_UNIT = "  "

MAX_DEPTH = 128
"""How many schema levels may be nested before giving up."""

SEVERITY_ENUM: Schema = {"enum": ["off", 0, "warn", 1, "error", 2]}
"""Every linter rule accepts a severity as its first option."""


class Container(enum.Enum):
    """The kind of schema that encloses the current node."""

    ROOT = enum.auto()
    OBJECT = enum.auto()
    ARRAY = enum.auto()


def indent(level: int) -> str:
    """Get the indentation for the nesting `level`.

    >>> indent(2)
    '    '
    """
    return INDENT_UNIT * level


def render_schema(
    schema: pydantic.JsonValue,
    *,
    root: pydantic.JsonValue = None,
    indent: int = 0,
    parent: Container = Container.ROOT,
) -> str:
    """Render the `schema` as a documentation string.

    References are resolved against `root`, which defaults to the `schema` itself.

    >>> print(render_schema({"type": "array", "items": {"type": "integer"}}))
    [
      ...<integer />
    ]
    """
    ctx = _Context(
        root=schema if root is None else root,
        indent=indent,
        parent=parent,
    )
    return _doc(schema, ctx)


def rule_options_doc(schema: pydantic.JsonValue) -> str:
    """Document the options of a linter rule.

    The options follow the severity, so the `schema` describes the rest
    of a `[severity, ...options]` tuple. An array `schema` lists several
    positional options.

    >>> print(rule_options_doc([{"enum": ["always", "never"]}]))
    [
      < "off" | 0 | "warn" | 1 | "error" | 2 />,
      < "always" | "never" />
    ]
    """
    if not schema:
        return _enum_doc(SEVERITY_ENUM)
    return _tuple_doc([SEVERITY_ENUM, schema], _Context(root=schema))


@dataclass(frozen=True, kw_only=True)
class _Context:
    root: pydantic.JsonValue
    """The top-level schema document, needed for resolving refs."""

    indent: int = 0

    parent: Container = Container.ROOT

    depth: int = 0
    """How many schema nodes enclose the current one."""

    def at(self, *, indent: int | None = None, parent: Container | None = None) -> t.Self:
        return dataclasses.replace(
            self,
            indent=self.indent if indent is None else indent,
            parent=self.parent if parent is None else parent,
        )


def _doc(schema: pydantic.JsonValue, ctx: _Context) -> str:  # noqa: C901, PLR0911
    if ctx.depth >= MAX_DEPTH:
        raise SchemaRecursionError(
            f"schema is nested more than {MAX_DEPTH} levels deep, is there a cyclic $ref?"
        )
    node = normalize(schema, ctx.root)
    ctx = dataclasses.replace(ctx, depth=ctx.depth + 1)

    match node.kind:
        case NodeKind.TUPLE:
            return _tuple_doc(node.items, ctx)
        case NodeKind.NOT:
            return _not_doc(node.schema, ctx)
        case NodeKind.CONST:
            return _constant(node.schema["const"])
        case NodeKind.MULTI_TYPE:
            return _multi_type_doc(node.schema)
        case NodeKind.NULL:
            return "<null />"
        case NodeKind.OBJECT:
            return _object_doc(node.schema, ctx)
        case NodeKind.ARRAY:
            return _array_doc(node.schema, ctx)
        case NodeKind.ENUM:
            return _enum_doc(node.schema)
        case NodeKind.STRING:
            return _string_doc(node.schema)
        case NodeKind.NUMERIC:
            return _numeric_doc(node.schema)
        case NodeKind.BOOLEAN:
            return _boolean_doc(node.schema)
        case NodeKind.ONE_OF:
            return _of_doc(node.schema, ctx, keyword="oneOf", label="one")
        case NodeKind.ANY_OF:
            return _of_doc(node.schema, ctx, keyword="anyOf", label="any")
        case NodeKind.ALL_OF:
            return _of_doc(node.schema, ctx, keyword="allOf", label="all")
        case NodeKind.CONDITIONAL:
            return _conditional_doc(node.schema, ctx)
        case NodeKind.UNRECOGNIZED:
            return ""
        case other:  # pragma: no cover
            t.assert_never(other)


def _wrap(opening: str, body: str, closing: str, ctx: _Context) -> str:
    return f"{opening}\n{indent(ctx.indent + 1)}{body}\n{indent(ctx.indent)}{closing}"


def _tuple_doc(schemas: t.Sequence[pydantic.JsonValue], ctx: _Context) -> str:
    if ctx.parent is Container.ARRAY:
        return _tuple_body_doc(schemas, ctx)
    body_ctx = ctx.at(indent=ctx.indent + 1, parent=Container.ARRAY)
    return _wrap("[", _tuple_body_doc(schemas, body_ctx), "]", ctx)


def _tuple_body_doc(schemas: t.Sequence[pydantic.JsonValue], ctx: _Context) -> str:
    return f",\n{indent(ctx.indent)}".join(_doc(schema, ctx) for schema in schemas)


def _object_doc(schema: Schema, ctx: _Context) -> str:
    # Not rendered: dependencies, propertyNames
    entry_ctx = ctx.at(indent=ctx.indent + 1, parent=Container.OBJECT)
    sep = f",\n{indent(entry_ctx.indent)}"
    blocks: list[str] = []

    required = _keyword_list(schema, "required")
    if properties := _keyword_mapping(schema, "properties"):
        blocks.append(
            sep.join(
                f'{"(required) " if key in required else ""}"{key}": {_doc(value, entry_ctx)}'
                for key, value in properties.items()
            )
        )

    if pattern_properties := _keyword_mapping(schema, "patternProperties"):
        blocks.append(
            sep.join(
                f"[/{pattern}/]: {_doc(value, entry_ctx)}"
                for pattern, value in pattern_properties.items()
            )
        )

    match schema.get("additionalProperties", False):
        case True:
            blocks.append("...<any>")
        case False:
            pass
        case additional:
            blocks.append(f"...[<any>]: {_doc(additional, entry_ctx)}")

    if "minProperties" in schema:
        blocks.append(f"# min properties: {_text(schema['minProperties'])}")
    if "maxProperties" in schema:
        blocks.append(f"# max properties: {_text(schema['maxProperties'])}")

    if not blocks:
        return f"{{\n{indent(ctx.indent)}}}"
    return _wrap("{", f"\n{indent(entry_ctx.indent)}".join(blocks), "}", ctx)


def _array_doc(schema: Schema, ctx: _Context) -> str:
    if ctx.parent is Container.ARRAY:
        return _array_body_doc(schema, ctx)
    return _wrap("[", _array_body_doc(schema, ctx.at(indent=ctx.indent + 1)), "]", ctx)


def _array_body_doc(schema: Schema, ctx: _Context) -> str:
    item_ctx = ctx.at(parent=Container.ARRAY)
    lines: list[str] = []
    item_count: int | None = None

    if "contains" in schema or "items" in schema:
        contains = "contains" in schema
        items = schema["contains"] if contains else schema["items"]
        if contains:
            lines.append("(contains)")
        if is_schema_list(items):
            if not contains:
                item_count = len(items)
            if items:
                lines.append(
                    f",\n{indent(ctx.indent)}".join(
                        _doc(item, item_ctx) for item in items
                    )
                )
        else:
            lines.append(f"...{_doc(items, item_ctx)}")

    if "additionalItems" in schema:
        item_count = None
        match schema["additionalItems"]:
            case True:
                lines.append("...<any>")
            case False:
                pass
            case additional:
                lines.append(f"...{_doc(additional, item_ctx)}")

    # a single fixed slot has exactly one item anyway
    if item_count != 1:
        if "minItems" in schema:
            lines.append(f"# min items: {_text(schema['minItems'])}")
        if "maxItems" in schema:
            lines.append(f"# max items: {_text(schema['maxItems'])}")
        if "uniqueItems" in schema:
            lines.append(f"# unique: {_text(schema['uniqueItems'])}")

    return f"\n{indent(ctx.indent)}".join(lines)


def _string_doc(schema: Schema) -> str:
    mods: list[str] = []
    match schema:
        case {"minLength": min_length, "maxLength": max_length}:
            mods.append(f"length: {_text(min_length)} to {_text(max_length)}")
        case {"minLength": min_length}:
            mods.append(f"length: ≥ {_text(min_length)}")
        case {"maxLength": max_length}:
            mods.append(f"length: ≤ {_text(max_length)}")

    if "pattern" in schema:
        mods.append(f"regex: /{_text(schema['pattern'])}/")

    if "default" in schema:
        mods.append(f'default: "{_text(schema["default"])}"')

    return _leaf("string", mods)


def _numeric_doc(schema: Schema) -> str:
    mods: list[str] = []

    # Draft 4 uses boolean `exclusiveMinimum`/`exclusiveMaximum` flags.
    match schema:
        case {"minimum": minimum, "exclusiveMinimum": True}:
            mods.append(f"x > {_text(minimum)}")
        case {"minimum": minimum}:
            mods.append(f"x ≥ {_text(minimum)}")
        case {"exclusiveMinimum": bool()}:
            pass
        case {"exclusiveMinimum": minimum}:
            mods.append(f"x > {_text(minimum)}")

    match schema:
        case {"maximum": maximum, "exclusiveMaximum": True}:
            mods.append(f"x < {_text(maximum)}")
        case {"maximum": maximum}:
            mods.append(f"x ≤ {_text(maximum)}")
        case {"exclusiveMaximum": bool()}:
            pass
        case {"exclusiveMaximum": maximum}:
            mods.append(f"x < {_text(maximum)}")

    if "multipleOf" in schema:
        mods.append(f"multiple of: {_text(schema['multipleOf'])}")

    if "default" in schema:
        mods.append(f"default: {_text(schema['default'])}")

    return _leaf(_text(schema["type"]), mods)


def _boolean_doc(schema: Schema) -> str:
    mods = []
    if "default" in schema:
        mods.append(f"default: {_text(schema['default'])}")
    return _leaf("boolean", mods)


def _leaf(name: str, mods: t.Sequence[str]) -> str:
    if mods:
        return f"<{name} ({', '.join(mods)}) />"
    return f"<{name} />"


def _multi_type_doc(schema: Schema) -> str:
    doc = " | ".join(f"<{_text(type_)} />" for type_ in _keyword_list(schema, "type"))
    if "default" in schema:
        doc += f" (default: {_text(schema['default'])})"
    return f"({doc})"


def _enum_doc(schema: Schema) -> str:
    match _keyword_list(schema, "enum"):
        case [value]:
            return _constant(value)
        case values:
            doc = " | ".join(_constant(value) for value in values)

    if "default" in schema:
        doc += f" (default: {_constant(schema['default'])})"
    return f"< {doc} />"


def _of_doc(schema: Schema, ctx: _Context, *, keyword: str, label: str) -> str:
    branches = _keyword_list(schema, keyword)
    if not branches:
        raise MalformedSchemaError(f"`{keyword}` must not be empty")

    siblings = {key: value for key, value in schema.items() if key != keyword}
    items = [_merged(siblings, branch) for branch in branches]
    if len(items) == 1:
        return _doc(items[0], ctx)

    docs = []
    for item in items:
        if _is_multiple_items(item):
            # parenthesize, so that the items don't blur with the other branches
            item_ctx = ctx.at(indent=ctx.indent + 2)
            docs.append(
                f"{indent(ctx.indent + 1)}(\n"
                f"{indent(item_ctx.indent)}{_doc(item, item_ctx)}\n"
                f"{indent(ctx.indent + 1)})"
            )
        else:
            item_ctx = ctx.at(indent=ctx.indent + 1)
            docs.append(f"{indent(item_ctx.indent)}{_doc(item, item_ctx)}")

    return f"<{label} of:\n" + ",\n".join(docs) + f"\n{indent(ctx.indent)}/>"


def _not_doc(schema: Schema, ctx: _Context) -> str:
    siblings = {key: value for key, value in schema.items() if key != "not"}
    negated = _merged(siblings, schema["not"])
    return _wrap("<not:", _doc(negated, ctx.at(indent=ctx.indent + 1)), "/>", ctx)


def _conditional_doc(schema: Schema, ctx: _Context) -> str:
    branch_ctx = ctx.at(indent=ctx.indent + 1)
    lines = [
        f"if ({_doc(schema['if'], ctx)})",
        f"then {_doc(schema['then'], branch_ctx)})",
    ]
    if "else" in schema:
        lines.append(f"else {_doc(schema['else'], branch_ctx)})")
    return f"\n{indent(branch_ctx.indent)}".join(lines)


def _merged(siblings: Schema, branch: pydantic.JsonValue) -> pydantic.JsonValue:
    """Apply the sibling keywords to a combinator branch."""
    if isinstance(branch, t.Mapping):
        return {**siblings, **branch}
    return branch


def _is_multiple_items(schema: pydantic.JsonValue) -> bool:
    match schema:
        case [_, _, *_]:
            return True
        case {"type": "array", "items": [_, _, *_]}:
            return True
    return False


def _keyword_mapping(schema: Schema, keyword: str) -> Schema:
    value = schema.get(keyword, {})
    if not isinstance(value, t.Mapping):
        raise MalformedSchemaError(f"`{keyword}` must be an object, got: {value!r}")
    return value


def _keyword_list(schema: Schema, keyword: str) -> t.Sequence[pydantic.JsonValue]:
    value = schema.get(keyword, [])
    if not is_schema_list(value):
        raise MalformedSchemaError(f"`{keyword}` must be an array, got: {value!r}")
    return value


def _constant(value: pydantic.JsonValue) -> str:
    """Show a literal value, quoting strings.

    >>> print(_constant("on"), _constant(True), _constant(None))
    "on" true null
    """
    if isinstance(value, str):
        return f'"{value}"'
    return _text(value)


def _text(value: pydantic.JsonValue) -> str:
    """Show a value as it appears in the schema, without quoting strings."""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value, ensure_ascii=False)
