import typing as t
from dataclasses import dataclass

import pydantic

from ._render import rule_options_doc
from ._utils import error_context


class RuleMeta(t.TypedDict):
    """Metadata for documenting a linter rule."""

    schema: pydantic.JsonValue
    """Schema for the rule options, following the severity."""

    description: t.NotRequired[str]


_RULES_SCHEMA = pydantic.TypeAdapter(dict[str, pydantic.JsonValue])
_RULE_META_SCHEMA = pydantic.TypeAdapter(RuleMeta)


def rules_from(data: pydantic.JsonValue) -> dict[str, RuleMeta]:
    """Interpret a `{rule: meta}` mapping.

    The meta may be an object with a `schema` key, or the options schema itself.

    >>> rules_from({"a": {"schema": [], "description": "A."}, "b": {"type": "string"}})
    {'a': {'schema': [], 'description': 'A.'}, 'b': {'schema': {'type': 'string'}}}
    """
    rules: dict[str, RuleMeta] = {}
    for name, meta in _RULES_SCHEMA.validate_python(data).items():
        match meta:
            case {"schema": _}:
                with error_context(f"while loading rule `{name}`"):
                    rules[name] = _RULE_META_SCHEMA.validate_python(meta)
            case _:
                rules[name] = {"schema": meta}
    return rules


@dataclass(frozen=True)
class RuleDoc:
    """The rendered documentation for one rule."""

    name: str
    doc: str
    description: str | None = None


def document_rules(rules: t.Mapping[str, RuleMeta]) -> list[RuleDoc]:
    """Render the options of every rule, in order."""
    docs = []
    for name, meta in rules.items():
        with error_context(f"while rendering rule `{name}`"):
            doc = rule_options_doc(meta["schema"])
        docs.append(RuleDoc(name, doc, meta.get("description")))
    return docs
