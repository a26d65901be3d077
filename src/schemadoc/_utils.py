import contextlib
import typing as t


@contextlib.contextmanager
def error_context(note: str) -> t.Iterator[None]:
    """Attach the `note` to any exception escaping this block.

    >>> try:
    ...     with error_context("while parsing example.json"):
    ...         raise ValueError("oops")
    ... except ValueError as err:
    ...     print(err.__notes__)
    ['while parsing example.json']
    """
    try:
        yield
    except Exception as err:
        err.add_note(note)
        raise
