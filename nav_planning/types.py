# =============================================================================
# Planning - Types and Data Structures
# =============================================================================
# Results returned by the global and local planners.
# =============================================================================

from dataclasses import dataclass, field
from typing import List

from nav_world import Point, Vector2D


@dataclass
class PlanResult:
    """Outcome of one A* search."""
    path: List[Point]               # Cells from start to goal, empty if unreachable
    cost: float                     # Accumulated move cost (0 when no path)
    expanded: int                   # Nodes popped and expanded

    @property
    def found(self) -> bool:
        return bool(self.path)


@dataclass
class VelocityDecision:
    """Local planner decision with scoring details."""
    velocity: Vector2D              # Selected velocity
    score: float                    # Combined score (-inf if nothing admissible)
    obstacle_score: float = 0.0
    heading_score: float = 0.0
    distance_score: float = 0.0
    num_candidates: int = 0
    num_rejected: int = 0
    reason: str = ""
    predicted_trajectory: List[Point] = field(default_factory=list)

    @property
    def admissible(self) -> bool:
        return self.score != float('-inf')
