"""Turns a goal map into an ordered list of placement tasks.

Cells are visited row by row, columns ascending. Empty cells produce no
task. Labels that are not recognized are dropped unless strict decoding
is requested.
"""

import logging
from typing import List, Optional, Tuple

from megaverse.domain.exceptions import GoalMapDecodeError
from megaverse.domain.models.common import (
    COMETH_SUFFIX, EMPTY_LABEL, POLYANET_LABEL, SOLOON_SUFFIX,
    Color, Direction, EntityKind, GoalGrid,
)
from megaverse.domain.models.placement import Attribute, PlacementTask

logger = logging.getLogger(__name__)


def parse_goal_cell(label: str) -> Optional[Tuple[EntityKind, Optional[Attribute]]]:
    """Classifies a single goal map label.

    Args:
        label: Raw cell label, e.g. 'POLYANET', 'RED_SOLOON' or 'UP_COMETH'.

    Returns:
        The entity kind and its attribute, or None for empty and
        unrecognized labels.
    """
    if label == EMPTY_LABEL:
        return None
    if label == POLYANET_LABEL:
        return EntityKind.POLYANET, None
    if label.endswith(COMETH_SUFFIX):
        prefix = label[:-len(COMETH_SUFFIX)].lower()
        try:
            return EntityKind.COMETH, Direction(prefix)
        except ValueError:
            return None
    if label.endswith(SOLOON_SUFFIX):
        prefix = label[:-len(SOLOON_SUFFIX)].lower()
        try:
            return EntityKind.SOLOON, Color(prefix)
        except ValueError:
            return None
    return None


def decode_goal_map(grid: GoalGrid, strict: bool = False) -> List[PlacementTask]:
    """Flattens a goal grid into placement tasks in row-major order.

    Args:
        grid: Rows of cell labels. Rows may differ in length.
        strict: Raise on unrecognized labels instead of skipping them.

    Returns:
        One PlacementTask per recognized, non-empty cell.

    Raises:
        GoalMapDecodeError: If `strict` is set and a label is not recognized.
    """
    tasks: List[PlacementTask] = []
    skipped = 0
    for row, cells in enumerate(grid):
        for column, label in enumerate(cells):
            if label == EMPTY_LABEL:
                continue
            parsed = parse_goal_cell(label)
            if parsed is None:
                if strict:
                    raise GoalMapDecodeError(label, row, column)
                logger.debug(f"Skipping unrecognized goal label '{label}' at ({row}, {column})")
                skipped += 1
                continue
            kind, attribute = parsed
            tasks.append(PlacementTask(row=row, column=column, kind=kind, attribute=attribute))

    if skipped:
        logger.warning(f"Skipped {skipped} unrecognized goal label(s)")
    logger.info(f"Decoded goal map into {len(tasks)} placement task(s)")
    return tasks
