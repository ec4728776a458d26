"""Main entry point for the megaverse application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
import sys
from typing import Any, Callable, Coroutine, Dict, Optional

import httpx
import typer

# --- Core Layer ---
from megaverse.core.command_handler import CommandHandler
from megaverse.core.services.batch_scheduler import BatchScheduler
from megaverse.core.services.megaverse_service import MegaverseService

# --- Infrastructure Layer ---
from megaverse.infrastructure.api.astral_objects import AstralObjectClient
from megaverse.infrastructure.api.goal_map import HttpGoalMapProvider
from megaverse.infrastructure.api.http_client import MegaverseHttpClient
from megaverse.infrastructure.cli.display import ConsoleDisplay
from megaverse.infrastructure.config.settings import (
    get_api_base_url, get_api_timeout, get_batch_policy, get_candidate_id,
    get_config, get_retry_policy, get_strict_decoding, load_configuration,
)
from megaverse.infrastructure.monitoring.logger_setup import setup_logging
from megaverse.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def create_dependencies(transport: Optional[httpx.AsyncBaseTransport] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.

    Args:
        transport: Optional httpx transport, used to replace the network in tests.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First
    load_configuration()
    log_level_name = str(get_config('logging.level')).upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    setup_logging(
        log_level=log_level,
        log_format=get_config('logging.format'),
        log_file=get_config('logging.file'),
    )
    logger.info("Configuration and logging initialized.")

    dependencies['ui'] = ConsoleDisplay()

    try:
        candidate_id = get_candidate_id()
        retry_policy = get_retry_policy()
        batch_policy = get_batch_policy()
    except ValueError as e:
        logger.error(f"Fatal Error during application initialization: {e}")
        dependencies['ui'].display_error(f"Application Initialization Failed: {e}")
        sys.exit(1)

    # 2. Instantiate Infrastructure Adapters & Services
    dependencies['http_client'] = MegaverseHttpClient(
        get_api_base_url(),
        timeout_seconds=get_api_timeout(),
        transport=transport,
    )
    dependencies['api_retry_service'] = ApiRetryService(policy=retry_policy)
    dependencies['object_client'] = AstralObjectClient(
        http=dependencies['http_client'],
        candidate_id=candidate_id,
        retry_service=dependencies['api_retry_service'],
    )
    dependencies['goal_provider'] = HttpGoalMapProvider(
        http=dependencies['http_client'],
        candidate_id=candidate_id,
    )

    # 3. Instantiate Core Services (injecting dependencies)
    dependencies['scheduler'] = BatchScheduler(policy=batch_policy)
    dependencies['megaverse_service'] = MegaverseService(
        goal_provider=dependencies['goal_provider'],
        object_client=dependencies['object_client'],
        scheduler=dependencies['scheduler'],
        strict_decoding=get_strict_decoding(),
    )

    # 4. Instantiate Command Handler
    dependencies['command_handler'] = CommandHandler(
        megaverse_service=dependencies['megaverse_service'],
        goal_provider=dependencies['goal_provider'],
        ui=dependencies['ui'],
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="megaverse",
    help="Rebuilds your megaverse from its goal map, respecting the API rate limits.",
    add_completion=False,
)


# --- Helper for Running Async Commands ---
def run_async(command: Callable[[CommandHandler], Coroutine[Any, Any, None]]) -> None:
    """Wires dependencies, runs an async handler method and closes the HTTP client."""
    dependencies = create_dependencies()

    async def _run() -> None:
        try:
            await command(dependencies['command_handler'])
        finally:
            await dependencies['http_client'].aclose()

    try:
        asyncio.run(_run())
    except Exception as e:
        logger.error(f"Error executing command: {e}", exc_info=True)
        dependencies['ui'].display_error(f"Command execution failed: {e}")


# --- CLI Commands ---

@app.command()
def create():
    """Create every object of the goal map (the default command)."""
    run_async(CommandHandler.handle_create)


@app.command()
def clear():
    """Delete every object the goal map places."""
    run_async(CommandHandler.handle_clear)


@app.command(name="show-goal")
def show_goal():
    """Print the goal map without changing anything."""
    run_async(CommandHandler.handle_show_goal)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context):
    """Main entry point. Creates the megaverse if no command is given."""
    if ctx.invoked_subcommand is None:
        logger.debug("No command invoked, running 'create'.")
        create()


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
