import typing as t

from ._rules import RuleDoc


def md_code_block(doc: str) -> str:
    """Wrap the rendered schema in a fenced code block.

    >>> print(md_code_block("<null />"))
    ```text
    <null />
    ```
    """
    return f"```text\n{doc}\n```"


def md_from_rules(rules: t.Sequence[RuleDoc]) -> str:
    """Describe every rule in its own Markdown section."""
    return "\n\n".join(_md_from_rule(rule) for rule in rules)


def _md_from_rule(rule: RuleDoc) -> str:
    parts = [f"### `{rule.name}`"]
    if rule.description:
        parts.append(rule.description)
    parts.append(md_code_block(rule.doc))
    return "\n\n".join(parts)


def text_from_rules(rules: t.Sequence[RuleDoc]) -> str:
    """Describe every rule as plain text."""
    return "\n\n".join(f"{rule.name}:\n{rule.doc}" for rule in rules)
