"""A* global planner: optimal lengths, soundness, completeness."""

import math

import numpy as np
import pytest

from nav_world import Environment, Point, ScenarioPresets
from nav_planning import AStarPlanner, path_cost


def _king_moves(path):
    for a, b in zip(path, path[1:]):
        (ax, ay), (bx, by) = a.grid_cell(), b.grid_cell()
        if max(abs(ax - bx), abs(ay - by)) != 1:
            return False
    return True


def test_diagonal_path_on_empty_grid(env10):
    path = AStarPlanner(env10).find_path()
    assert path == [Point(i, i) for i in range(10)]
    assert env10.path == path


def test_obstacle_on_diagonal_forces_detour(env10):
    env10.add_static_obstacle(Point(5, 5))
    planner = AStarPlanner(env10)
    path = planner.find_path()
    assert len(path) > 10
    assert Point(5, 5) not in path
    assert path[0] == Point(0, 0) and path[-1] == Point(9, 9)
    assert _king_moves(path)
    assert planner.last_result.cost == pytest.approx(8 * math.sqrt(2) + 2)
    assert path_cost(path) == pytest.approx(planner.last_result.cost)


@pytest.mark.parametrize("start, goal", [
    ((0, 0), (14, 3)),
    ((7, 11), (2, 0)),
    ((3, 3), (3, 9)),
    ((14, 0), (0, 11)),
    ((5, 5), (6, 5)),
])
def test_path_length_is_chebyshev_optimal(start, goal):
    env = Environment(15, 12, start=Point(*start), goal=Point(*goal))
    path = AStarPlanner(env).find_path()
    dx, dy = abs(goal[0] - start[0]), abs(goal[1] - start[1])
    assert len(path) == max(dx, dy) + 1
    assert _king_moves(path)


def test_start_equals_goal_gives_single_cell():
    env = Environment(5, 5, start=Point(2, 2), goal=Point(2, 2))
    assert AStarPlanner(env).find_path() == [Point(2, 2)]


def test_enclosed_goal_returns_empty(env10):
    for p in (Point(8, 9), Point(8, 8), Point(9, 8)):
        assert env10.add_static_obstacle(p) is not None
    planner = AStarPlanner(env10)
    assert planner.find_path() == []
    assert not planner.last_result.found
    assert planner.last_result.expanded > 0
    assert not env10.has_path()


def test_blocked_goal_returns_empty(env10):
    # radius 1 obstacle beside the goal covers the goal cell itself
    env10.add_static_obstacle(Point(9, 8), radius=1.0)
    assert env10.is_cell_blocked(9, 9)
    assert AStarPlanner(env10).find_path() == []


def test_unset_goal_returns_empty(env10):
    env10.clear_goal()
    assert AStarPlanner(env10).find_path() == []


def test_start_cell_is_expandable_when_covered(env10):
    env10.add_static_obstacle(Point(3, 2), radius=1.0)
    env10.set_current_position(Point(2, 2))
    path = AStarPlanner(env10).find_path()
    assert path[0] == Point(2, 2)
    assert path[-1] == Point(9, 9)


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_path_never_crosses_blocked_cells(seed):
    env = Environment(20, 20)
    ScenarioPresets.scenario_random_static(env, num_obstacles=40, rng=np.random.default_rng(seed))
    path = AStarPlanner(env).find_path()
    blocked = env.occupancy_grid()
    for p in path[1:]:
        cx, cy = p.grid_cell()
        assert not blocked[cy, cx]
    assert _king_moves(path)


def test_route_through_wall_gap(env10):
    info = ScenarioPresets.scenario_wall(env10, x=5, gap_y=2)
    path = AStarPlanner(env10).find_path()
    assert info['gap'] == (5, 2)
    assert Point(5, 2) in path


def test_find_path_is_idempotent(env10):
    env10.add_static_obstacle(Point(4, 4))
    planner = AStarPlanner(env10)
    first = planner.find_path()
    second = planner.find_path()
    assert first == second
    assert env10.path == second


def test_plan_does_not_touch_stored_path(env10):
    env10.set_path([Point(0, 0)])
    result = AStarPlanner(env10).plan(Point(0, 0), Point(3, 0))
    assert result.found
    assert [p.grid_cell() for p in result.path] == [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert env10.path == [Point(0, 0)]


def test_equal_cost_routes_resolve_by_insertion_order():
    # Two routes of cost 2 + sqrt(2) around (1, 1). The first expansion pushes
    # (0, 1) before (1, 0) with the same f, and the first-in entry is expanded
    # first at every later tie, so the route through (0, 1) is returned.
    env = Environment(5, 5)
    env.add_static_obstacle(Point(1, 1))
    result = AStarPlanner(env).plan(Point(0, 0), Point(2, 2))
    assert result.path == [Point(0, 0), Point(0, 1), Point(1, 2), Point(2, 2)]
    assert result.cost == pytest.approx(2.0 + math.sqrt(2.0))

    again = AStarPlanner(env).plan(Point(0, 0), Point(2, 2))
    assert again.path == result.path
