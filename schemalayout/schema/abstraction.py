"""
Schema Abstraction Layer

Entities (tables), their properties (columns) and the foreign-key
relationships between them. Schemas are built from the plain mapping that
schema extractors produce:

```python
{
    "Order": {
        "type": "Order",
        "properties": [
            {"name": "Id", "type": "int", "isKey": True},
            {"name": "CustomerId", "type": "int", "isForeignKey": True},
        ],
    },
}
```
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class RelationshipKind(Enum):
    """Kinds of relationship between entities."""
    FOREIGN_KEY = "FK"


@dataclass
class Property:
    """A column of an entity."""
    name: str
    type: str = ""
    is_key: bool = False
    is_foreign_key: bool = False
    comment: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Property":
        """Create from a mapping, accepting camelCase or snake_case keys."""
        return cls(
            name=str(data.get("name", "")),
            type=str(data.get("type", "")),
            is_key=bool(data.get("isKey", data.get("is_key", False))),
            is_foreign_key=bool(data.get("isForeignKey", data.get("is_foreign_key", False))),
            comment=data.get("comment"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "name": self.name,
            "type": self.type,
            "isKey": self.is_key,
            "isForeignKey": self.is_foreign_key,
        }
        if self.comment:
            d["comment"] = self.comment
        return d


@dataclass
class Entity:
    """A table in the schema."""
    type: str
    base_type: str = ""
    properties: List[Property] = field(default_factory=list)
    inherited_properties: List[Property] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.type

    def get_foreign_keys(self) -> List[Property]:
        return [p for p in self.properties if p.is_foreign_key]

    def get_property(self, name: str) -> Optional[Property]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "Entity":
        inherited = data.get("inheritedProperties", data.get("inherited_properties")) or []
        return cls(
            type=str(data.get("type") or name),
            base_type=str(data.get("baseType", data.get("base_type", "")) or ""),
            properties=[Property.from_dict(p) for p in data.get("properties") or []],
            inherited_properties=[Property.from_dict(p) for p in inherited],
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.type,
            "properties": [p.to_dict() for p in self.properties],
        }
        if self.base_type:
            d["baseType"] = self.base_type
        if self.inherited_properties:
            d["inheritedProperties"] = [p.to_dict() for p in self.inherited_properties]
        return d


@dataclass
class Relationship:
    """Directed foreign-key relationship: source references target."""
    source: str
    target: str
    property: str
    strength: float = 1.0
    kind: RelationshipKind = RelationshipKind.FOREIGN_KEY


@dataclass
class Schema:
    """A named collection of entities, in declaration order."""
    entities: Dict[str, Entity] = field(default_factory=dict)
    name: str = ""

    def add_entity(self, entity: Entity, key: Optional[str] = None):
        self.entities[key or entity.type] = entity

    def get_entity(self, name: str) -> Optional[Entity]:
        return self.entities.get(name)

    @property
    def entity_names(self) -> List[str]:
        return list(self.entities.keys())

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities.values())

    def __len__(self) -> int:
        return len(self.entities)

    def __contains__(self, name: object) -> bool:
        return name in self.entities

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: str = "") -> "Schema":
        """Create from a mapping of entity name -> entity data."""
        schema = cls(name=name)
        for key, entity_data in data.items():
            schema.add_entity(Entity.from_dict(key, entity_data or {}), key=key)
        return schema

    def to_dict(self) -> Dict[str, Any]:
        return {key: entity.to_dict() for key, entity in self.entities.items()}

    def __repr__(self) -> str:
        return f"Schema(name={self.name!r}, entities={len(self.entities)})"
