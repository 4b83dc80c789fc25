"""
Saved Layout File Handler

Persists table positions in a `<schema>.layout.yaml` sidecar file next to
the schema. When a saved layout exists for a document it is reused verbatim
and the automatic layout engine is skipped.

File Format (YAML):
```yaml
version: 1
created: 2026-01-14T10:30:00
modified: 2026-01-14T11:45:00
document: blog
positions:
  Blog:
    x: 1200
    y: 900
  Post:
    x: 1900
    y: 900
```
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

LAYOUT_FILE_VERSION = 1

# Grid used when snapping saved positions
GRID_SIZE = 50

# Position given to tables that have no saved entry
DEFAULT_POSITION = (500, 500)


def snap_to_grid(value: float, grid: int = GRID_SIZE) -> int:
    """Round a coordinate to the nearest grid line (halves round up)."""
    return int(math.floor(value / grid + 0.5)) * grid


@dataclass
class TablePosition:
    """Stored position of a single table."""
    name: str
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "TablePosition":
        return cls(
            name=name,
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
        )


@dataclass
class SavedLayout:
    """Positions previously saved for one document."""
    version: int = LAYOUT_FILE_VERSION
    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    document: str = ""
    positions: Dict[str, TablePosition] = field(default_factory=dict)

    # Path this layout was loaded from or written to
    source_file: Optional[Path] = None

    def __post_init__(self):
        now = datetime.now()
        if self.created is None:
            self.created = now
        if self.modified is None:
            self.modified = now

    def set_position(self, name: str, x: float, y: float):
        self.positions[name] = TablePosition(name=name, x=x, y=y)
        self.modified = datetime.now()

    def get_position(self, name: str) -> Optional[TablePosition]:
        return self.positions.get(name)

    def update_from_positions(self, positions: Dict[str, Tuple[float, float]]):
        """Store every position of a computed layout."""
        for name, (x, y) in positions.items():
            self.positions[name] = TablePosition(name=name, x=x, y=y)
        self.modified = datetime.now()

    def resolve(
        self,
        names: Iterable[str],
        snap: bool = True,
    ) -> Dict[str, Tuple[int, int]]:
        """
        Positions for the requested tables.

        Tables without a saved entry get DEFAULT_POSITION. With ``snap`` every
        coordinate is rounded to GRID_SIZE.
        """
        result: Dict[str, Tuple[int, int]] = {}
        for name in names:
            saved = self.positions.get(name)
            x, y = (saved.x, saved.y) if saved else DEFAULT_POSITION
            if snap:
                result[name] = (snap_to_grid(x), snap_to_grid(y))
            else:
                result[name] = (int(math.floor(x + 0.5)), int(math.floor(y + 0.5)))
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "created": self.created.isoformat() if self.created else None,
            "modified": self.modified.isoformat() if self.modified else None,
            "document": self.document,
            "positions": {name: pos.to_dict() for name, pos in self.positions.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedLayout":
        positions = {}
        for name, pos_data in (data.get("positions") or {}).items():
            if isinstance(pos_data, dict):
                positions[name] = TablePosition.from_dict(name, pos_data)

        return cls(
            version=data.get("version", LAYOUT_FILE_VERSION),
            created=_parse_timestamp(data.get("created")),
            modified=_parse_timestamp(data.get("modified")),
            document=str(data.get("document") or ""),
            positions=positions,
        )

    def __repr__(self) -> str:
        return f"SavedLayout(document={self.document!r}, tables={len(self.positions)})"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def get_layout_file_path(schema_path: Path) -> Path:
    """
    Sidecar path for a schema file.

    For example: `blog.json` -> `blog.layout.yaml`
    """
    schema_path = Path(schema_path)
    return schema_path.parent / f"{schema_path.stem}.layout.yaml"


def parse_layout_file(path: Path) -> Optional[SavedLayout]:
    """
    Parse a saved layout file.

    Returns:
        SavedLayout, or None if the file is missing, empty or unreadable
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Layout file not found: %s", path)
        return None

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to parse layout file %s: %s", path, e)
        return None

    if not data:
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring layout file %s: expected a mapping", path)
        return None

    layout = SavedLayout.from_dict(data)
    if not layout.positions:
        return None
    layout.source_file = path
    logger.debug("Loaded layout file: %s", layout)
    return layout


def write_layout_file(layout: SavedLayout, path: Path) -> bool:
    """
    Write a saved layout file.

    Returns:
        True if successful
    """
    path = Path(path)
    try:
        layout.modified = datetime.now()
        content = yaml.dump(
            layout.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        path.write_text(content, encoding="utf-8")
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to write layout file %s: %s", path, e)
        return False

    layout.source_file = path
    logger.info("Saved layout file: %s (%d tables)", path, len(layout.positions))
    return True
