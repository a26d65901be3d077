import contextlib
import os
import typing as t
from dataclasses import dataclass

import click

if t.TYPE_CHECKING:  # pragma: no cover
    import click.testing
    import pydantic


def show_help(ctx: click.Context, _param: click.Parameter, want_help: bool) -> None:
    if not want_help or ctx.resilient_parsing:
        return
    click.echo("".join(format_command_help(ctx, recursive=False)), nl=False)
    ctx.exit(0)


_HELP_OPTION = click.Option(
    ("--help",),
    type=bool,
    is_flag=True,
    expose_value=False,
    callback=show_help,
    is_eager=True,
    help="Show this help message and exit.",
)


@click.command(add_help_option=False)
@click.option(
    "--all",
    "recursive",
    type=bool,
    is_flag=True,
    flag_value=True,
    help="Also show help for all subcommands.",
)
@click.argument("subcommand", nargs=-1)
@click.pass_context
def help_command(
    help_ctx: click.Context, recursive: bool, subcommand: tuple[str, ...]
) -> None:
    """Show help for the application or a specific subcommand."""
    ctx = help_ctx.find_root()

    with contextlib.ExitStack() as stack:
        # Navigate to the correct subcommand
        for name in subcommand:
            if (
                not isinstance(ctx.command, click.Group)
                or (cmd := ctx.command.get_command(ctx, name)) is None
            ):
                help_ctx.fail(f"no such subcommand: {' '.join(subcommand)}")
            ctx = stack.enter_context(click.Context(cmd, info_name=name, parent=ctx))
        click.echo("".join(format_command_help(ctx, recursive=recursive)), nl=False)


def format_command_help(ctx: click.Context, *, recursive: bool) -> t.Iterable[str]:
    """Format the help of the command, and optionally of all its subcommands.

    >>> cmd = click.Command(name="foo", add_help_option=False)
    >>> print("".join(format_command_help(cmd.make_context("foo", []), recursive=False)))
    Usage: foo [OPTIONS]
    <BLANKLINE>
    """
    yield ctx.get_help() + "\n"

    if not recursive or not isinstance(ctx.command, click.Group):
        return

    for name, cmd in ctx.command.commands.items():
        with click.Context(cmd, info_name=name, parent=ctx) as ctx_cmd:
            command_path = ctx_cmd.command_path
            yield f"\n\n{command_path}\n{'-' * len(command_path)}\n\n"
            yield from format_command_help(ctx_cmd, recursive=recursive)


class _FixedCommand(click.Command):
    @t.override
    def get_help_option(self, ctx: click.Context) -> click.Option:
        return _HELP_OPTION


class _FixedGroup(_FixedCommand, click.Group):
    @t.override
    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args and not ctx.resilient_parsing:
            click.echo("".join(format_command_help(ctx, recursive=False)), nl=False)
            ctx.exit(2)
        return super().parse_args(ctx, args)


_FixedGroup.command_class = _FixedCommand
_FixedGroup.group_class = _FixedGroup


class App:
    def __init__(self, name: str, *, help: str) -> None:
        prolog, _, epilog = help.partition("\n<!-- options -->\n")
        self.click = _FixedGroup(
            name=name,
            help=prolog.strip(),
            epilog=epilog.strip() or None,
        )
        self.click.add_command(help_command, "help")

    def __call__(self, args: t.Sequence[str] | None = None) -> object:
        return self.click.main(args)

    def command(
        self, name: str | None = None
    ) -> t.Callable[[t.Callable], click.Command]:
        """Register a subcommand."""
        return self.click.command(name)

    def testrunner(self) -> "AppTestRunner":
        return AppTestRunner(self)


AppTestCliArg: t.TypeAlias = str | os.PathLike[str]


@t.final
@dataclass
class AppTestRunner:
    """Invoke the app in a testing context."""

    app: App

    class Opts(t.TypedDict, total=False):
        expect_exit: int
        """Which exit code to expect, default `0`."""

        catch_exceptions: bool
        """Whether to catch exceptions (other than `SystemExit`), default `True`."""

    def __call__(
        self, *args: AppTestCliArg, **opts: t.Unpack[Opts]
    ) -> "click.testing.Result":
        """Run an app command."""
        import click.testing  # noqa: PLC0415  # import-outside-toplevel

        __tracebackhide__ = True
        expect_exit = opts.get("expect_exit", 0)

        result = click.testing.CliRunner().invoke(
            self.app.click,
            [os.fspath(arg) for arg in args],
            catch_exceptions=opts.get("catch_exceptions", True),
        )
        print(result.output)
        if result.exit_code != expect_exit:  # pragma: no cover
            err = AssertionError("command failed with unexpected status code")
            err.add_note(f"exited with code: {result.exit_code}")
            err.add_note(f"expected exit code: {expect_exit}")
            err.add_note(f"args: {list(args)}")
            raise err
        return result

    def output(self, *args: AppTestCliArg, **opts: t.Unpack[Opts]) -> str:
        """Run an app command and return the visible OUTPUT."""
        __tracebackhide__ = True
        return self(*args, **opts).output

    def stdout(self, *args: AppTestCliArg, **opts: t.Unpack[Opts]) -> str:
        """Run an app command and return captured STDOUT."""
        __tracebackhide__ = True
        return self(*args, **opts).stdout

    def json(
        self, *args: AppTestCliArg, **opts: t.Unpack[Opts]
    ) -> "pydantic.JsonValue":
        """Run an app command and return captured STDOUT, parsed as JSON."""
        import json  # noqa: PLC0415  # import-outside-toplevel

        __tracebackhide__ = True
        return json.loads(self(*args, **opts).stdout)
