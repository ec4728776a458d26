"""Interface for clients that place and remove astral objects.

Implementations absorb their own failures: callers never see an exception
from a single placement.
"""

import abc
from typing import Optional

from ..models.common import EntityKind
from ..models.placement import Attribute, PlacementTask


class ObjectClient(abc.ABC):
    """Abstract Base Class for creating and deleting megaverse objects."""

    @abc.abstractmethod
    async def create_at(
        self,
        kind: EntityKind,
        row: int,
        column: int,
        attribute: Optional[Attribute] = None,
    ) -> None:
        """Creates an object of `kind` at the given coordinate.

        Args:
            kind: The astral object kind to create.
            row: Row index in the megaverse.
            column: Column index in the megaverse.
            attribute: Colour for soloons, direction for comeths, None otherwise.
        """
        pass

    @abc.abstractmethod
    async def delete_at(self, kind: EntityKind, row: int, column: int) -> None:
        """Deletes the object of `kind` at the given coordinate."""
        pass

    async def place(self, task: PlacementTask) -> None:
        """Creates the object described by a placement task."""
        await self.create_at(task.kind, task.row, task.column, task.attribute)

    async def remove(self, task: PlacementTask) -> None:
        """Deletes the object described by a placement task."""
        await self.delete_at(task.kind, task.row, task.column)
