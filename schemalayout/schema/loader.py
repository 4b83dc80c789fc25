"""Load schema mappings from JSON or YAML files."""

import json
import logging
from pathlib import Path
from typing import Union

import yaml

from .abstraction import Schema

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


class SchemaFormatError(ValueError):
    """Raised when a schema file cannot be interpreted."""


def load_schema(path: Union[str, Path]) -> Schema:
    """
    Load a schema from a file.

    The file holds a mapping of entity name -> {type, properties}. An
    optional top-level ``entities`` key wrapping that mapping is accepted.

    Raises:
        FileNotFoundError: If the path does not exist
        SchemaFormatError: On unsupported suffix or malformed content
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise SchemaFormatError(
            f"Unsupported schema file type '{path.suffix}' (expected one of {', '.join(SUPPORTED_SUFFIXES)})"
        )

    try:
        content = path.read_text(encoding="utf-8")
        if suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            data = yaml.safe_load(content) or {}
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaFormatError(f"Failed to parse schema file {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("entities"), dict):
        data = data["entities"]
    if not isinstance(data, dict):
        raise SchemaFormatError(f"Schema file {path} must contain a mapping of entities")

    for key, entity_data in data.items():
        if entity_data is None:
            continue
        if not isinstance(entity_data, dict):
            raise SchemaFormatError(f"Entity '{key}' in {path} must be a mapping")
        properties = entity_data.get("properties") or []
        if not isinstance(properties, list) or not all(isinstance(p, dict) for p in properties):
            raise SchemaFormatError(f"Properties of entity '{key}' in {path} must be a list of mappings")

    schema = Schema.from_dict(data, name=path.stem)
    logger.debug("Loaded schema %s: %d entities", path, len(schema))
    return schema
