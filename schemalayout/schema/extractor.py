"""
Relationship extraction.

Turns entity data into layout edges by resolving each foreign-key property
to the entity it references, and decides which properties are visible when
a table is drawn (navigation properties are hidden by default).
"""

import logging
import re
from typing import List, Optional, Sequence

from .abstraction import Entity, Property, Relationship, Schema

logger = logging.getLogger(__name__)

# Collection and model-typed properties are navigation properties
NAVIGATION_TYPE_PATTERNS = [
    re.compile(r"^ICollection<"),
    re.compile(r"^List<"),
    re.compile(r"^IList<"),
    re.compile(r"^HashSet<"),
    re.compile(r"^ISet<"),
    re.compile(r"Model$"),
    re.compile(r"Entity$"),
]

_KEY_SUFFIX = re.compile(r"(_id|Id|ID)$")
_MODEL_SUFFIX = re.compile(r"(model|entity)$", re.IGNORECASE)


def is_navigation_property(prop: Property, entity_names: Sequence[str] = ()) -> bool:
    """Check if a property navigates to another entity rather than holding data."""
    if any(pattern.search(prop.type) for pattern in NAVIGATION_TYPE_PATTERNS):
        return True
    # Single references such as "Customer" or "Customer?"
    return prop.type.rstrip("?") in entity_names


def visible_properties(
    entity: Entity,
    entity_names: Sequence[str] = (),
    show_navigation: bool = False,
    include_inherited: bool = False,
) -> List[Property]:
    """Properties shown in the rendered table."""
    props = list(entity.properties)
    if include_inherited:
        props.extend(entity.inherited_properties)
    if show_navigation:
        return props
    return [p for p in props if not is_navigation_property(p, entity_names)]


def find_target_entity(foreign_key_name: str, entity_names: Sequence[str]) -> Optional[str]:
    """
    Resolve a foreign-key property name to the entity it references.

    Tries, in order: the name without its key suffix, the same with a
    ``Model`` or ``Entity`` suffix, then a case-insensitive containment
    match in either direction.
    """
    target = _KEY_SUFFIX.sub("", foreign_key_name)
    if not target:
        return None

    names = set(entity_names)
    if target in names:
        return target
    if target + "Model" in names:
        return target + "Model"
    if target + "Entity" in names:
        return target + "Entity"

    lowered = target.lower()
    for name in entity_names:
        stripped = _MODEL_SUFFIX.sub("", name.lower())
        if lowered in name.lower() or (stripped and stripped in lowered):
            return name
    return None


def extract_relationships(schema: Schema) -> List[Relationship]:
    """Build one relationship per resolvable foreign-key property."""
    relationships = []
    entity_names = schema.entity_names

    for key, entity in schema.entities.items():
        for prop in entity.get_foreign_keys():
            target = find_target_entity(prop.name, entity_names)
            if target is None:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Unresolved foreign key %s.%s", key, prop.name)
                continue
            relationships.append(Relationship(source=key, target=target, property=prop.name))

    logger.debug(
        "Extracted %d relationships from %d entities", len(relationships), len(schema)
    )
    return relationships
