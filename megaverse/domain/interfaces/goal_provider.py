"""Interface for sources of the goal map."""

import abc

from ..models.common import GoalGrid


class GoalMapProvider(abc.ABC):
    """Abstract Base Class for fetching the target megaverse layout."""

    @abc.abstractmethod
    async def fetch_goal_map(self) -> GoalGrid:
        """Fetches the goal map asynchronously.

        Returns:
            The goal grid as rows of cell labels.

        Raises:
            GoalMapFetchError: If the map is unreachable or malformed.
        """
        pass
