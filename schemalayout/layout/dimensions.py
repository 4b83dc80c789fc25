"""Table footprint estimation from label and visible field text."""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

# Rendering metrics of a table box (canvas pixels)
HEADER_HEIGHT = 88
ROW_HEIGHT = 55
PADDING = 30
MIN_WIDTH = 625
MIN_HEIGHT = 250
NAME_CHAR_WIDTH = 20
TYPE_CHAR_WIDTH = 18

# Footprint used when an entity has no data at all
DEFAULT_DIMENSIONS = (625.0, 500.0)


@dataclass(frozen=True)
class TableDimensions:
    """Rectangular footprint of a rendered table."""
    width: float
    height: float

    @property
    def half_width(self) -> float:
        return self.width / 2

    @property
    def half_height(self) -> float:
        return self.height / 2


def estimate_dimensions(
    name: Optional[str],
    fields: Iterable[Tuple[str, str]],
) -> TableDimensions:
    """
    Estimate a table's footprint.

    Width follows the longest name (table or field) and the longest type
    string; height grows with the number of visible fields.

    Args:
        name: Table label, or None for an unknown entity
        fields: (field_name, field_type) pairs of the visible fields

    Returns:
        TableDimensions
    """
    if name is None:
        return TableDimensions(*DEFAULT_DIMENSIONS)

    fields = list(fields)
    max_name_length = max([len(name)] + [len(field_name) for field_name, _ in fields])
    max_type_length = max([0] + [len(field_type) for _, field_type in fields])

    width = max(
        MIN_WIDTH,
        max_name_length * NAME_CHAR_WIDTH + max_type_length * TYPE_CHAR_WIDTH + PADDING * 8,
    )
    height = HEADER_HEIGHT + len(fields) * ROW_HEIGHT + PADDING

    return TableDimensions(width=float(width), height=float(max(height, MIN_HEIGHT)))
