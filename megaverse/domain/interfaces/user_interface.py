"""Interface for user interaction.

Defines the contract for how the application reports progress and results
to the person running it.
"""

import abc

from ..models.common import GoalGrid


class UserInterface(abc.ABC):
    """Abstract Base Class for user interface interactions."""

    @abc.abstractmethod
    def display_info(self, message: str) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_error(self, message: str) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_goal_map(self, grid: GoalGrid) -> None:
        """Renders the goal map.

        Args:
            grid: The goal grid as rows of cell labels.
        """
        pass
