"""The schemadoc command-line interface."""

import contextlib
import enum
import functools
import logging
import pathlib
import typing as t
from dataclasses import dataclass

import click
import pydantic
import rich
import rich.console
import rich.logging

import schemadoc

from ._cli_help import App
from ._markdown import md_code_block, md_from_rules, text_from_rules
from ._utils import error_context

app = App(
    name="schemadoc",
    help="""\
Render JSON Schemas as compact, human-readable documentation.

<!-- options -->

Schemas are rendered as a pseudo-grammar of types, bounds, enums and combinators,
e.g. `{"type": "string", "maxLength": 5}` becomes `<string (length: ≤ 5) />`.
""",
)


class OutputFormat(enum.Enum):
    """Different output formats available for rendered schemas."""

    TEXT = enum.auto()
    JSON = enum.auto()
    MARKDOWN = enum.auto()


@dataclass
class _with_output[R]:  # noqa: N801  # invalid-name
    """Decorator for printing returned data from a Click command."""

    text: t.Callable[[R], str]
    json: t.Callable[[R], pydantic.JsonValue]
    markdown: t.Callable[[R], str]
    default: OutputFormat = OutputFormat.TEXT

    def __call__[**P](
        self, command: t.Callable[P, R]
    ) -> t.Callable[t.Concatenate[OutputFormat, P], None]:
        @functools.wraps(command)
        @click.option(
            "--format",
            type=click.Choice(OutputFormat, case_sensitive=False),
            default=self.default,
            show_default=True,
            help="Choose the output format, e.g. Markdown.",
        )
        def command_with_output(
            format: OutputFormat, *args: P.args, **kwargs: P.kwargs
        ) -> None:
            data = command(*args, **kwargs)
            match format:
                case OutputFormat.TEXT:
                    click.echo(self.text(data))
                case OutputFormat.JSON:
                    rich.print_json(data=self.json(data))
                case OutputFormat.MARKDOWN:
                    click.echo(self.markdown(data))
                case other:  # pragma: no cover
                    t.assert_never(other)

        return command_with_output


def _configure_logging(
    _ctx: click.Context, _param: click.Parameter, verbose: bool
) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[
            rich.logging.RichHandler(
                console=rich.console.Console(stderr=True),
                show_time=False,
                show_path=False,
            )
        ],
        force=True,
    )


_verbose_option = click.option(
    "--verbose",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_configure_logging,
    help="Log diagnostics (e.g. unresolved references) to stderr.",
)

_ExistingPath = click.Path(
    exists=True, path_type=pathlib.Path, file_okay=True, dir_okay=True
)


@app.command()
@click.argument("schema", type=_ExistingPath, required=False)
@click.option(
    "--plain",
    is_flag=True,
    help="Render the schema itself, instead of as linter rule options.",
)
@_verbose_option
@_with_output(text=str, json=str, markdown=md_code_block)
@click.pass_context
def render(ctx: click.Context, schema: pathlib.Path | None, *, plain: bool) -> str:
    """Render a JSON Schema file.

    By default, the `SCHEMA` describes the options of a linter rule,
    and is rendered as the tail of a `[severity, ...options]` tuple.
    An array `SCHEMA` lists several positional options.
    Use `--plain` to render an ordinary schema.

    The `SCHEMA` should point to a JSON file (or a `.toml` file),
    or to a directory containing a `schema.json` file.
    If this argument is not specified,
    the one in the current working directory will be used.
    """
    schema = _find_schema(ctx, schema)
    with _schema_errors_as_usage_errors(ctx, schema):
        document = schemadoc.load_schema(schema)
        if plain:
            return schemadoc.render_schema(document)
        return schemadoc.rule_options_doc(document)


@app.command()
@click.argument(
    "path",
    metavar="RULES",
    type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
)
@_verbose_option
@_with_output(
    text=text_from_rules,
    json=lambda docs: {rule.name: rule.doc for rule in docs},
    markdown=md_from_rules,
    default=OutputFormat.MARKDOWN,
)
@click.pass_context
def rules(ctx: click.Context, path: pathlib.Path) -> list[schemadoc.RuleDoc]:
    """Document the options of several linter rules.

    The `RULES` file maps rule names to their options schema,
    or to an object with `schema` and optional `description` keys:

    ```json
    {"no-tabs": {"description": "Disallow tabs.", "schema": [{"type": "object"}]}}
    ```
    """
    with _schema_errors_as_usage_errors(ctx, path):
        return schemadoc.document_rules(
            schemadoc.rules_from(schemadoc.load_schema(path))
        )


def _find_schema(ctx: click.Context, schema: pathlib.Path | None) -> pathlib.Path:
    if schema is None:
        schema_dir = pathlib.Path()
    elif schema.is_dir():
        schema_dir = schema
    else:
        return schema

    schema = schema_dir / "schema.json"
    if not (schema.exists() and schema.is_file()):
        ctx.fail(f"Could not infer `SCHEMA` for `{schema_dir}`.")
    return schema


@contextlib.contextmanager
def _schema_errors_as_usage_errors(
    ctx: click.Context, path: pathlib.Path
) -> t.Iterator[None]:
    """Report unreadable or unsupported input as a usage error."""
    try:
        with error_context(f"while processing {path}"):
            yield
    except ValueError as err:
        ctx.fail("\n".join([str(err), *getattr(err, "__notes__", ())]))
