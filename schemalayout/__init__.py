"""
SchemaLayout - Automatic Layout for Entity-Relationship Diagrams

Positions every table of a relational schema on a diagram canvas using a
three-phase simulated-annealing force-directed layout, with overlap
elimination and canvas normalization.
"""

__version__ = "0.1.0"
__author__ = "SchemaLayout Team"

from .schema.abstraction import Entity, Property, Relationship, Schema
from .layout.config import LayoutConfig
from .layout.force_directed import LayoutResult, ThreePhaseLayout, compute_layout
from .layout.pipeline import calculate_table_positions

__all__ = [
    "Entity",
    "Property",
    "Relationship",
    "Schema",
    "LayoutConfig",
    "LayoutResult",
    "ThreePhaseLayout",
    "compute_layout",
    "calculate_table_positions",
]
