# =============================================================================
# World Model - Environment
# =============================================================================
# Grid, start / goal / agent position, obstacle arena and the stored global
# path. Every mutation that can make the path unsafe clears it and bumps
# `plan_version` so planners can tell a stale plan from a fresh one.
# =============================================================================

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from .config import (
    DEFAULT_GRID_WIDTH,
    DEFAULT_GRID_HEIGHT,
    DEFAULT_OBSTACLE_RADIUS,
    REMOVE_TOLERANCE,
    GOAL_THRESHOLD,
)
from .obstacles import MotionParams, MotionType, Obstacle, ObstacleView
from .types import INVALID_POINT, Grid, Point

logger = logging.getLogger(__name__)


class Environment:
    """
    Planar grid world.

    Editor commands (`set_start`, `set_goal`, `add_*_obstacle`) never raise
    on bad input: an invalid request is ignored and reported through the
    return value, leaving the state unchanged.
    """

    def __init__(self, width: int = DEFAULT_GRID_WIDTH,
                 height: int = DEFAULT_GRID_HEIGHT,
                 start: Optional[Point] = None,
                 goal: Optional[Point] = None):
        """
        Initialize the environment.

        Args:
            width: Number of cells along x
            height: Number of cells along y
            start: Start point (defaults to cell (0, 0))
            goal: Goal point (defaults to the opposite corner)
        """
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")

        self.grid = Grid(int(width), int(height))
        self.start = start if start is not None else Point(0.0, 0.0)
        self.goal = goal if goal is not None else Point(float(width - 1), float(height - 1))
        self.current = self.start

        self._obstacles: Dict[int, Obstacle] = {}
        self._next_handle = 0

        self._path: List[Point] = []
        self.plan_version = 0

    # =========================================================================
    # Grid queries
    # =========================================================================

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def is_in_bounds(self, p: Point) -> bool:
        return self.grid.contains(p)

    def is_obstacle(self, p: Point) -> bool:
        """True if any obstacle's collision circle covers the cell of `p`."""
        return self._covered(p, self._obstacles.values())

    def is_static_obstacle(self, p: Point) -> bool:
        return self._covered(p, self.static_obstacles)

    def is_dynamic_obstacle(self, p: Point) -> bool:
        return self._covered(p, self.dynamic_obstacles)

    def is_cell_blocked(self, cx: int, cy: int) -> bool:
        return any(obs.covers_cell(cx, cy) for obs in self._obstacles.values())

    @staticmethod
    def _covered(p: Point, obstacles) -> bool:
        if not p.is_valid():
            return False
        cx, cy = p.grid_cell()
        return any(obs.covers_cell(cx, cy) for obs in obstacles)

    def occupancy_grid(self) -> np.ndarray:
        """
        Blocked-cell mask for the current obstacle positions.

        Returns:
            Boolean array of shape (height, width); True = blocked.
            Indexed as grid[cy, cx].
        """
        blocked = np.zeros(self.grid.shape, dtype=bool)
        if not self._obstacles:
            return blocked
        ys, xs = np.mgrid[0:self.height, 0:self.width]
        for obs in self._obstacles.values():
            dist = np.hypot(obs.position.x - xs, obs.position.y - ys)
            blocked |= dist <= obs.radius
        return blocked

    def check_collision(self, p: Point, agent_radius: float = DEFAULT_OBSTACLE_RADIUS) -> bool:
        """True if a disc of `agent_radius` at `p` overlaps any obstacle."""
        return any(obs.intersects(p, agent_radius) for obs in self._obstacles.values())

    # =========================================================================
    # Start / goal / agent
    # =========================================================================

    def set_start(self, p: Point) -> bool:
        """Set the start point; also moves the agent there. Returns False if rejected."""
        if not self._is_free(p):
            logger.debug("Rejected start at (%.2f, %.2f)", p.x, p.y)
            return False
        self.start = p
        self.current = p
        self.invalidate_path()
        return True

    def set_goal(self, p: Point) -> bool:
        """Set the goal point. Returns False if rejected."""
        if not self._is_free(p):
            logger.debug("Rejected goal at (%.2f, %.2f)", p.x, p.y)
            return False
        self.goal = p
        self.invalidate_path()
        return True

    def clear_start(self):
        self.start = INVALID_POINT
        self.invalidate_path()

    def clear_goal(self):
        self.goal = INVALID_POINT
        self.invalidate_path()

    def set_current_position(self, p: Point):
        self.current = p

    def is_start_point(self, p: Point) -> bool:
        return p.distance_to(self.start) < GOAL_THRESHOLD

    def is_goal_point(self, p: Point) -> bool:
        return p.distance_to(self.goal) < GOAL_THRESHOLD

    def has_reached_goal(self) -> bool:
        if not self.is_in_bounds(self.goal):
            return False
        return self.current.distance_to(self.goal) < GOAL_THRESHOLD

    def _is_free(self, p: Point) -> bool:
        return self.is_in_bounds(p) and not self.is_obstacle(p)

    # =========================================================================
    # Obstacle arena
    # =========================================================================

    @property
    def obstacles(self) -> List[Obstacle]:
        return list(self._obstacles.values())

    @property
    def static_obstacles(self) -> List[Obstacle]:
        return [obs for obs in self._obstacles.values() if not obs.is_dynamic]

    @property
    def dynamic_obstacles(self) -> List[Obstacle]:
        return [obs for obs in self._obstacles.values() if obs.is_dynamic]

    def get_obstacle(self, handle: int) -> Optional[Obstacle]:
        return self._obstacles.get(handle)

    def obstacle_views(self, kind: Optional[MotionType] = None) -> List[ObstacleView]:
        """Render records; `kind=STATIC` gives static ones, any dynamic kind gives all dynamic ones."""
        if kind is None:
            selected = self._obstacles.values()
        elif kind is MotionType.STATIC:
            selected = self.static_obstacles
        else:
            selected = self.dynamic_obstacles
        return [obs.to_view() for obs in selected]

    def add_obstacle(self, obstacle: Obstacle) -> Optional[int]:
        """
        Register an obstacle.

        Rejected (returns None) when its position is out of bounds, its cell
        is already covered by an obstacle, or it sits on the start, goal or
        agent cell.

        Returns:
            Stable handle of the new obstacle, or None
        """
        p = obstacle.position
        if not self._is_free(p) or self._on_reserved_cell(p):
            logger.debug("Rejected %s obstacle at (%.2f, %.2f)",
                         obstacle.kind.value, p.x, p.y)
            return None

        handle = self._next_handle
        self._next_handle += 1
        obstacle.handle = handle
        self._obstacles[handle] = obstacle
        self.invalidate_path()
        return handle

    def add_static_obstacle(self, p: Point, radius: float = DEFAULT_OBSTACLE_RADIUS) -> Optional[int]:
        return self.add_obstacle(Obstacle.static(p, radius))

    def add_dynamic_obstacle(self, p: Point, params: MotionParams) -> Optional[int]:
        return self.add_obstacle(Obstacle.from_params(p, params))

    def remove_obstacle(self, p: Point, tolerance: float = REMOVE_TOLERANCE) -> int:
        """
        Remove every obstacle whose centre lies within `tolerance` of `p`.

        Returns:
            Number of obstacles removed; the path is kept when nothing matched
        """
        doomed = [handle for handle, obs in self._obstacles.items()
                  if obs.position.distance_to(p) <= tolerance]
        for handle in doomed:
            del self._obstacles[handle]
        if doomed:
            self.invalidate_path()
        return len(doomed)

    def clear_static_obstacles(self):
        for obs in self.static_obstacles:
            del self._obstacles[obs.handle]
        self.invalidate_path()

    def clear_dynamic_obstacles(self):
        for obs in self.dynamic_obstacles:
            del self._obstacles[obs.handle]
        self.invalidate_path()

    def clear_obstacles(self):
        self._obstacles.clear()
        self.invalidate_path()

    def _on_reserved_cell(self, p: Point) -> bool:
        cell = p.grid_cell()
        return cell in (self.start.grid_cell(), self.goal.grid_cell(), self.current.grid_cell())

    # =========================================================================
    # Path
    # =========================================================================

    @property
    def path(self) -> List[Point]:
        return list(self._path)

    def has_path(self) -> bool:
        return bool(self._path)

    def set_path(self, path: Sequence[Point]):
        self._path = list(path)

    def invalidate_path(self):
        """Discard the stored path and mark any cached plan as stale."""
        self._path = []
        self.plan_version += 1

    def path_is_clear(self, path: Optional[Sequence[Point]] = None) -> bool:
        """
        True if no cell of `path` (default: stored path) is blocked.

        The first cell is the agent's origin and is not checked.
        """
        path = self._path if path is None else path
        if len(path) < 2:
            return True
        blocked = self.occupancy_grid()
        for p in path[1:]:
            cx, cy = p.grid_cell()
            if not self.grid.contains_cell(cx, cy) or blocked[cy, cx]:
                return False
        return True

    # =========================================================================
    # Simulation hooks
    # =========================================================================

    def update(self, dt: float) -> bool:
        """
        Advance every dynamic obstacle by `dt`.

        Returns:
            True if the motion blocked the stored path (it is then cleared)
        """
        for obs in self._obstacles.values():
            if obs.is_dynamic:
                obs.update(dt, self.grid)

        if self._path and not self.path_is_clear():
            logger.info("Obstacle motion blocked the current path")
            self.invalidate_path()
            return True
        return False

    def reset(self):
        """Restore obstacle initial poses and put the agent back at start."""
        for obs in self._obstacles.values():
            obs.reset()
        self.current = self.start
        self.invalidate_path()
