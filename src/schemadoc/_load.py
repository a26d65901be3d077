import json
import logging
import pathlib
import tomllib

import pydantic

logger = logging.getLogger(__name__)

_JSON_VALUE = pydantic.TypeAdapter(pydantic.JsonValue)


def load_schema(path: pathlib.Path) -> pydantic.JsonValue:
    """Load a schema document from a JSON file, or from a TOML file."""
    logger.debug("loading schema document from %s", path)
    if path.suffix == ".toml":
        data = tomllib.loads(path.read_text())
    else:
        data = json.loads(path.read_text())
    return _JSON_VALUE.validate_python(data)
