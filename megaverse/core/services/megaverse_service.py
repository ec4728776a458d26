"""Application service that rebuilds (or clears) the megaverse.

Fetch the goal map, decode it into placement tasks, then hand the tasks to
the batch scheduler. A fetch failure aborts the run before any request is
made; after that the run is best effort and always completes.
"""

import logging
from typing import List

from megaverse.core.goal_decoder import decode_goal_map
from megaverse.core.services.batch_scheduler import BatchScheduler
from megaverse.domain.interfaces.goal_provider import GoalMapProvider
from megaverse.domain.interfaces.object_client import ObjectClient
from megaverse.domain.models.placement import PlacementTask

logger = logging.getLogger(__name__)


class MegaverseService:
    """Drives the fetch, decode and schedule pipeline."""

    def __init__(
        self,
        goal_provider: GoalMapProvider,
        object_client: ObjectClient,
        scheduler: BatchScheduler,
        strict_decoding: bool = False,
    ):
        self.goal_provider = goal_provider
        self.object_client = object_client
        self.scheduler = scheduler
        self.strict_decoding = strict_decoding

    async def plan(self) -> List[PlacementTask]:
        """Fetches the goal map and returns the placement tasks it implies.

        Raises:
            GoalMapFetchError: If the goal map cannot be fetched.
        """
        goal_map = await self.goal_provider.fetch_goal_map()
        return decode_goal_map(goal_map, strict=self.strict_decoding)

    async def create_megaverse(self) -> None:
        """Creates every object of the goal map, batch by batch.

        Raises:
            GoalMapFetchError: If the goal map cannot be fetched.
        """
        tasks = await self.plan()
        logger.info(f"Creating megaverse: {len(tasks)} object(s) to place")
        await self.scheduler.run(tasks, self.object_client.place)
        logger.info("Created megaverse successfully")

    async def clear_megaverse(self) -> None:
        """Deletes every object the goal map places, batch by batch.

        Raises:
            GoalMapFetchError: If the goal map cannot be fetched.
        """
        tasks = await self.plan()
        logger.info(f"Clearing megaverse: {len(tasks)} object(s) to remove")
        await self.scheduler.run(tasks, self.object_client.remove)
        logger.info("Cleared megaverse successfully")
