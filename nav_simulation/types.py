# =============================================================================
# Simulation - Types and Data Structures
# =============================================================================
# Run state machine and per-tick records handed to the host.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from nav_world import Point, Vector2D


class SimulationState(Enum):
    """Simulation run state."""
    IDLE = "IDLE"                   # Editing allowed, nothing moves
    RUNNING = "RUNNING"             # Ticking
    FINISHED = "FINISHED"           # Goal reached, trace frozen


@dataclass
class AgentKinematicState:
    """Agent pose and motion for the current tick."""
    position: Point
    velocity: Vector2D = field(default_factory=Vector2D)
    path_available: bool = True     # False while the goal is unreachable

    @property
    def speed(self) -> float:
        return self.velocity.length


@dataclass
class SimulationSnapshot:
    """State published after each tick."""
    state: SimulationState
    time: float
    agent: AgentKinematicState
    path: List[Point] = field(default_factory=list)
    traversed_path: List[Point] = field(default_factory=list)
    replanned: bool = False
    plan_version: int = 0
