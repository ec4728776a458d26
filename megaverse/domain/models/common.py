"""Defines common Value Objects used across different domain contexts.

These objects represent simple values or concepts like the candidate
identity, goal map labels, colours, directions and the policies that
shape how requests are paced.
"""

import enum
from dataclasses import dataclass
from typing import List, NewType

# === Core Value Objects ===

CandidateId = NewType("CandidateId", str)      # Identity sent with every API request
GoalLabel = NewType("GoalLabel", str)          # Raw cell label from the goal map, e.g. 'RED_SOLOON'
GoalGrid = List[List[str]]                     # Goal map as returned by the API, row-major

# === Goal Map Labels ===
EMPTY_LABEL = GoalLabel("SPACE")
POLYANET_LABEL = GoalLabel("POLYANET")
SOLOON_SUFFIX = "_SOLOON"
COMETH_SUFFIX = "_COMETH"


class Color(str, enum.Enum):
    """Colours a soloon can take."""
    BLUE = "blue"
    RED = "red"
    PURPLE = "purple"
    WHITE = "white"


class Direction(str, enum.Enum):
    """Directions a cometh can face."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class EntityKind(enum.Enum):
    """Astral objects that can be placed in the megaverse.

    The value is the API resource path for the kind.
    """
    POLYANET = "polyanets"
    SOLOON = "soloons"
    COMETH = "comeths"

    @property
    def display_name(self) -> str:
        return self.value[:-1]


# --- Policies ---

@dataclass(frozen=True)
class RetryPolicy:
    """Value Object representing retry backoff configuration."""
    base_delay_s: float = 0.5
    max_attempts: int = 3
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_delay_s < 0:
            raise ValueError(f"base_delay_s must not be negative, got {self.base_delay_s}")

    def delay_for(self, attempt_index: int) -> float:
        """Delay in seconds to wait after the zero-based attempt `attempt_index` failed."""
        return self.base_delay_s * self.backoff_multiplier ** attempt_index


@dataclass(frozen=True)
class BatchPolicy:
    """Value Object describing how placement tasks are grouped and paced."""
    batch_size: int = 3
    cooldown_s: float = 3.0

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.cooldown_s < 0:
            raise ValueError(f"cooldown_s must not be negative, got {self.cooldown_s}")
