"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and delegates
the work to the MegaverseService. Goal map fetch failures end the command
with a logged error; they do not change the process exit status.
"""

import logging

from megaverse.core.services.megaverse_service import MegaverseService
from megaverse.domain.exceptions import GoalMapDecodeError, GoalMapFetchError
from megaverse.domain.interfaces.goal_provider import GoalMapProvider
from megaverse.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to the megaverse service."""

    def __init__(
        self,
        megaverse_service: MegaverseService,
        goal_provider: GoalMapProvider,
        ui: UserInterface,
    ):
        self.megaverse_service = megaverse_service
        self.goal_provider = goal_provider
        self.ui = ui

    async def handle_create(self) -> None:
        """Handles the 'create' command."""
        logger.info("Handling 'create' command.")
        try:
            await self.megaverse_service.create_megaverse()
        except (GoalMapFetchError, GoalMapDecodeError) as e:
            logger.error(f"Failed to create the megaverse: {e}")
            self.ui.display_error(f"Failed to create the megaverse: {e}")
            return
        self.ui.display_info("Megaverse created.")

    async def handle_clear(self) -> None:
        """Handles the 'clear' command."""
        logger.info("Handling 'clear' command.")
        try:
            await self.megaverse_service.clear_megaverse()
        except (GoalMapFetchError, GoalMapDecodeError) as e:
            logger.error(f"Failed to clear the megaverse: {e}")
            self.ui.display_error(f"Failed to clear the megaverse: {e}")
            return
        self.ui.display_info("Megaverse cleared.")

    async def handle_show_goal(self) -> None:
        """Handles the 'show-goal' command: renders the goal map without placing anything."""
        logger.info("Handling 'show-goal' command.")
        try:
            goal_map = await self.goal_provider.fetch_goal_map()
        except GoalMapFetchError as e:
            logger.error(f"Failed to show the goal map: {e}")
            self.ui.display_error(f"Failed to fetch the goal map: {e}")
            return
        self.ui.display_goal_map(goal_map)
