# =============================================================================
# Planning - A* Global Planner
# =============================================================================
# 8-connected grid search from the agent's cell to the goal cell over the
# environment's current occupancy. Axis moves cost 1, diagonal moves sqrt(2);
# the heuristic is the Euclidean distance. Cells are closed when popped and a
# cheaper route to an open cell replaces the old entry, so returned paths are
# cost-optimal.
# =============================================================================

import heapq
import itertools
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from nav_world import Environment, Point

from .config import (
    ASTAR_STRAIGHT_COST,
    ASTAR_DIAGONAL_COST,
    ASTAR_NEIGHBORS,
)
from .types import PlanResult

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


def move_cost(dx: int, dy: int) -> float:
    return ASTAR_DIAGONAL_COST if dx and dy else ASTAR_STRAIGHT_COST


def path_cost(path: Sequence[Point]) -> float:
    """Sum of move costs along a cell path."""
    total = 0.0
    for a, b in zip(path, path[1:]):
        ax, ay = a.grid_cell()
        bx, by = b.grid_cell()
        total += move_cost(bx - ax, by - ay)
    return total


class AStarPlanner:
    """
    Grid-based A* planner bound to an Environment.

    Usage:
        planner = AStarPlanner(env)
        path = planner.find_path()      # also stored as env.path
    """

    def __init__(self, environment: Environment):
        self.env = environment
        self.last_result: Optional[PlanResult] = None

    @staticmethod
    def heuristic(a: Cell, b: Cell) -> float:
        """Euclidean distance heuristic in grid space."""
        return float(np.hypot(a[0] - b[0], a[1] - b[1]))

    def find_path(self) -> List[Point]:
        """
        Plan from the agent's current cell to the goal cell.

        The stored path is cleared first and replaced by the result, so
        repeated calls on an unchanged environment return the same path.

        Returns:
            List of cell points from start to goal, empty if no path exists
        """
        self.env.set_path([])
        result = self.plan(self.env.current, self.env.goal)
        self.env.set_path(result.path)
        return list(result.path)

    def plan(self, start: Point, goal: Point) -> PlanResult:
        """
        Search between the cells of `start` and `goal` without touching the stored path.

        The start cell is always expandable (the agent already stands
        there); the goal cell must be free.
        """
        grid = self.env.grid
        empty = PlanResult(path=[], cost=0.0, expanded=0)
        if not (start.is_valid() and goal.is_valid()):
            self.last_result = empty
            return empty

        start_cell = start.grid_cell()
        goal_cell = goal.grid_cell()
        blocked = self.env.occupancy_grid()

        if not grid.contains_cell(*start_cell) or not grid.contains_cell(*goal_cell):
            logger.debug("Start %s or goal %s out of bounds", start_cell, goal_cell)
            self.last_result = empty
            return empty
        if blocked[goal_cell[1], goal_cell[0]]:
            logger.debug("Goal cell %s is blocked", goal_cell)
            self.last_result = empty
            return empty

        # Open set entries: (f, insertion order, cell); FIFO among equal f
        counter = itertools.count()
        open_set: List[Tuple[float, int, Cell]] = []
        heapq.heappush(open_set, (self.heuristic(start_cell, goal_cell), next(counter), start_cell))

        g_score: Dict[Cell, float] = {start_cell: 0.0}
        came_from: Dict[Cell, Cell] = {}
        closed = set()
        expanded = 0

        while open_set:
            _, _, current = heapq.heappop(open_set)
            if current in closed:
                continue

            if current == goal_cell:
                path = self._reconstruct_path(came_from, current)
                result = PlanResult(path=path, cost=g_score[current], expanded=expanded)
                logger.debug("A* found %d-cell path (cost %.3f, %d expanded)",
                             len(path), result.cost, expanded)
                self.last_result = result
                return result

            closed.add(current)
            expanded += 1
            current_g = g_score[current]

            for dx, dy in ASTAR_NEIGHBORS:
                nx, ny = current[0] + dx, current[1] + dy
                neighbor = (nx, ny)
                if not grid.contains_cell(nx, ny) or blocked[ny, nx] or neighbor in closed:
                    continue

                tentative_g = current_g + move_cost(dx, dy)
                if tentative_g < g_score.get(neighbor, float('inf')):
                    g_score[neighbor] = tentative_g
                    came_from[neighbor] = current
                    f = tentative_g + self.heuristic(neighbor, goal_cell)
                    heapq.heappush(open_set, (f, next(counter), neighbor))

        logger.debug("A* exhausted the open set after %d expansions", expanded)
        result = PlanResult(path=[], cost=0.0, expanded=expanded)
        self.last_result = result
        return result

    @staticmethod
    def _reconstruct_path(came_from: Dict[Cell, Cell], current: Cell) -> List[Point]:
        """Backtrack from goal to start and reverse."""
        cells = [current]
        while current in came_from:
            current = came_from[current]
            cells.append(current)
        cells.reverse()
        return [Point.from_cell(c) for c in cells]
