from ._errors import MalformedSchemaError, SchemaError, SchemaRecursionError
from ._load import load_schema
from ._node import Node, NodeKind, normalize
from ._ref import resolve_ref
from ._render import (
    MAX_DEPTH,
    SEVERITY_ENUM,
    Container,
    indent,
    render_schema,
    rule_options_doc,
)
from ._rules import RuleDoc, RuleMeta, document_rules, rules_from

__all__ = [
    "MAX_DEPTH",
    "SEVERITY_ENUM",
    "Container",
    "MalformedSchemaError",
    "Node",
    "NodeKind",
    "RuleDoc",
    "RuleMeta",
    "SchemaError",
    "SchemaRecursionError",
    "document_rules",
    "indent",
    "load_schema",
    "normalize",
    "render_schema",
    "resolve_ref",
    "rule_options_doc",
    "rules_from",
]
