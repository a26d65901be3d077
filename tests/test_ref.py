import logging

import pydantic
import pytest

from schemadoc import resolve_ref

from .helpers import parametrized

_ROOT = {
    "definitions": {
        "a/b": {"type": "null"},
        "t~x": {"type": "boolean"},
        "Foo": {"type": "string", "$id": "#foo"},
        "Legacy": {"type": "integer", "id": "legacy"},
    },
    "$defs": {"Bar": {"type": "number", "$id": "bar"}},
    "items": [{"type": "null"}, {"type": "string"}],
    "type": "object",
}


@parametrized(
    "ref,expected",
    {
        "pointer": ("#/definitions/Foo", {"type": "string", "$id": "#foo"}),
        "escaped-slash": ("#/definitions/a~1b", {"type": "null"}),
        "escaped-tilde": ("#/definitions/t~0x", {"type": "boolean"}),
        "array-index": ("#/items/1", {"type": "string"}),
        "id-with-hash": ("#foo", {"type": "string", "$id": "#foo"}),
        "id-without-hash": ("#bar", {"type": "number", "$id": "bar"}),
        "legacy-id": ("#legacy", {"type": "integer", "id": "legacy"}),
        "root": ("#/", {}),
    },
)
def test_resolve(ref: str, expected: pydantic.JsonValue) -> None:
    assert resolve_ref(_ROOT, ref) == expected


@parametrized(
    "ref",
    {
        "missing-key": "#/definitions/Missing",
        "index-out-of-range": "#/items/5",
        "index-not-a-number": "#/items/first",
        "through-a-scalar": "#/type/x",
        "unknown-id": "#nope",
        "bare-hash": "#",
    },
)
def test_unresolved_is_empty(ref: str) -> None:
    assert resolve_ref(_ROOT, ref) == {}


def test_unresolved_without_definitions() -> None:
    assert resolve_ref([{"type": "null"}], "#foo") == {}
    assert resolve_ref({"definitions": []}, "#foo") == {}


def test_unresolved_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="schemadoc"):
        resolve_ref(_ROOT, "#/nope")
    assert "could not resolve reference '#/nope'" in caplog.text
