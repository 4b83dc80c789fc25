"""Schema model, relationship extraction and saved layouts."""

from .abstraction import Entity, Property, Relationship, RelationshipKind, Schema
from .extractor import (
    extract_relationships,
    find_target_entity,
    is_navigation_property,
    visible_properties,
)
from .layout_file import (
    SavedLayout,
    TablePosition,
    get_layout_file_path,
    parse_layout_file,
    write_layout_file,
)
from .loader import SchemaFormatError, load_schema

__all__ = [
    "Entity",
    "Property",
    "Relationship",
    "RelationshipKind",
    "Schema",
    "extract_relationships",
    "find_target_entity",
    "is_navigation_property",
    "visible_properties",
    "SavedLayout",
    "TablePosition",
    "get_layout_file_path",
    "parse_layout_file",
    "write_layout_file",
    "SchemaFormatError",
    "load_schema",
]
