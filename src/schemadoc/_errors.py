class SchemaError(ValueError):
    """The schema could not be rendered."""


class MalformedSchemaError(SchemaError):
    """A keyword is present, but its value doesn't have the expected shape."""


class SchemaRecursionError(SchemaError):
    """The schema nests too deeply, usually because of a cyclic `$ref`."""
