"""Domain models describing what has to be placed where."""

from dataclasses import dataclass
from typing import Optional, Union

from .common import Color, Direction, EntityKind

Attribute = Union[Color, Direction]


@dataclass(frozen=True)
class PlacementTask:
    """A single astral object to create at a grid coordinate.

    Produced by the goal map decoder and consumed once by the batch scheduler.
    """
    row: int
    column: int
    kind: EntityKind
    attribute: Optional[Attribute] = None

    def __post_init__(self) -> None:
        if self.row < 0 or self.column < 0:
            raise ValueError(f"Coordinates must be non-negative, got ({self.row}, {self.column})")

    def __str__(self) -> str:
        suffix = f" [{self.attribute.value}]" if self.attribute is not None else ""
        return f"{self.kind.display_name}{suffix} at ({self.row}, {self.column})"
