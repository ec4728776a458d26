"""Fetches the goal map for a candidate from the challenge API."""

import logging
from typing import Any

from megaverse.domain.exceptions import GoalMapFetchError, MegaverseApiError
from megaverse.domain.interfaces.goal_provider import GoalMapProvider
from megaverse.domain.models.common import CandidateId, GoalGrid
from megaverse.infrastructure.api.http_client import MegaverseHttpClient

logger = logging.getLogger(__name__)


def validate_goal_payload(payload: Any) -> GoalGrid:
    """Checks that `payload` is an object whose `goal` is a list of lists of strings.

    Raises:
        GoalMapFetchError: If the payload has any other shape.
    """
    if not isinstance(payload, dict) or "goal" not in payload:
        raise GoalMapFetchError("Invalid goal map structure: missing 'goal' field")
    goal = payload["goal"]
    if not isinstance(goal, list):
        raise GoalMapFetchError("Invalid goal map structure: 'goal' is not a list")
    for index, row in enumerate(goal):
        if not isinstance(row, list) or not all(isinstance(cell, str) for cell in row):
            raise GoalMapFetchError(f"Invalid goal map structure: row {index} is not a list of strings")
    return goal


class HttpGoalMapProvider(GoalMapProvider):
    """GoalMapProvider backed by GET /map/{candidateId}/goal."""

    def __init__(self, http: MegaverseHttpClient, candidate_id: CandidateId):
        self.http = http
        self.candidate_id = candidate_id

    async def fetch_goal_map(self) -> GoalGrid:
        path = f"map/{self.candidate_id}/goal"
        try:
            payload = await self.http.get_json(path)
        except MegaverseApiError as e:
            logger.error(f"Failed to fetch goal map: {e}")
            raise GoalMapFetchError(f"Failed to fetch goal map: {e}") from e

        goal = validate_goal_payload(payload)
        logger.info(f"Successfully fetched goal map ({len(goal)} rows)")
        return goal
