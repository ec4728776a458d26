import logging
from typing import Dict

from rich.console import Console
from rich.table import Table

from megaverse.core.goal_decoder import parse_goal_cell
from megaverse.domain.interfaces.user_interface import UserInterface
from megaverse.domain.models.common import EMPTY_LABEL, Color, Direction, EntityKind, GoalGrid

logger = logging.getLogger(__name__)

COLOR_STYLES: Dict[Color, str] = {
    Color.BLUE: "blue",
    Color.RED: "red",
    Color.PURPLE: "magenta",
    Color.WHITE: "white",
}

DIRECTION_GLYPHS: Dict[Direction, str] = {
    Direction.UP: "^",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
    Direction.RIGHT: ">",
}


def render_cell(label: str) -> str:
    """Returns the rich markup used for one goal map cell."""
    if label == EMPTY_LABEL:
        return "[dim].[/dim]"
    parsed = parse_goal_cell(label)
    if parsed is None:
        return "[bold red]?[/bold red]"
    kind, attribute = parsed
    if kind is EntityKind.POLYANET:
        return "[bold yellow]O[/bold yellow]"
    if kind is EntityKind.SOLOON:
        style = COLOR_STYLES[attribute]
        return f"[{style}]*[/{style}]"
    return f"[cyan]{DIRECTION_GLYPHS[attribute]}[/cyan]"


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self):
        """Initializes the rich Console."""
        self.console = Console()

    def display_info(self, message: str) -> None:
        self.console.print(f"[blue]Info:[/blue] {message}")

    def display_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def display_goal_map(self, grid: GoalGrid) -> None:
        if not grid:
            self.display_info("The goal map is empty.")
            return

        width = max(len(row) for row in grid)
        table = Table(title="Goal map", show_header=True, header_style="dim", show_lines=False, pad_edge=False)
        table.add_column("", style="dim", justify="right")
        for column in range(width):
            table.add_column(str(column), justify="center")

        objects = 0
        for row_index, row in enumerate(grid):
            cells = [render_cell(label) for label in row]
            objects += sum(1 for label in row if label != EMPTY_LABEL and parse_goal_cell(label) is not None)
            cells.extend([""] * (width - len(row)))
            table.add_row(str(row_index), *cells)

        logger.debug(f"Rendering goal map of {len(grid)} rows x {width} columns")
        self.console.print(table)
        self.display_info(f"{objects} object(s) to place.")
