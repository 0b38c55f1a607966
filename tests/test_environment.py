"""Environment: editor commands, occupancy, plan invalidation and reset."""

import numpy as np
import pytest

from nav_world import (
    Environment,
    MotionParams,
    MotionType,
    Point,
    Vector2D,
)


def test_defaults():
    env = Environment(6, 4)
    assert env.start == Point(0, 0)
    assert env.goal == Point(5, 3)
    assert env.current == env.start
    assert not env.has_path()


@pytest.mark.parametrize("width, height", [(0, 5), (5, -1)])
def test_non_positive_size_raises(width, height):
    with pytest.raises(ValueError):
        Environment(width, height)


def test_set_start_moves_agent_and_clears_path(env10):
    env10.set_path([Point(0, 0), Point(1, 1)])
    assert env10.set_start(Point(2, 3))
    assert env10.start == Point(2, 3)
    assert env10.current == Point(2, 3)
    assert env10.path == []


@pytest.mark.parametrize("p", [Point(-1, 0), Point(10, 3), Point(3, 9.6)])
def test_out_of_bounds_start_and_goal_rejected(env10, p):
    assert not env10.set_start(p)
    assert not env10.set_goal(p)
    assert env10.start == Point(0, 0)
    assert env10.goal == Point(9, 9)


def test_start_on_obstacle_rejected(env10):
    env10.add_static_obstacle(Point(4, 4))
    version = env10.plan_version
    assert not env10.set_start(Point(4, 4))
    assert not env10.set_goal(Point(4.2, 3.9))
    assert env10.start == Point(0, 0)
    assert env10.plan_version == version


def test_add_obstacle_rejections(env10):
    assert env10.add_static_obstacle(Point(0, 0)) is None          # start cell
    assert env10.add_static_obstacle(Point(9, 9)) is None          # goal cell
    assert env10.add_static_obstacle(Point(12, 3)) is None         # out of bounds
    assert env10.add_static_obstacle(Point(3, 3)) is not None
    assert env10.add_static_obstacle(Point(3.2, 3.1)) is None      # cell already covered
    assert len(env10.obstacles) == 1


def test_handles_are_stable_and_views_filter_by_kind(env10):
    h1 = env10.add_static_obstacle(Point(3, 3))
    h2 = env10.add_dynamic_obstacle(Point(5, 2), MotionParams(speed=1.0))
    params = MotionParams(movement_type=MotionType.CIRCULAR, center=Point(5, 5), orbit_radius=2.0)
    h3 = env10.add_dynamic_obstacle(Point(7, 5), params)
    assert len({h1, h2, h3}) == 3
    assert env10.get_obstacle(h2).kind is MotionType.LINEAR

    env10.remove_obstacle(Point(3, 3))
    assert env10.get_obstacle(h1) is None
    assert env10.get_obstacle(h3).kind is MotionType.CIRCULAR

    static_views = env10.obstacle_views(MotionType.STATIC)
    dynamic_views = env10.obstacle_views(MotionType.LINEAR)
    assert static_views == []
    assert {v.handle for v in dynamic_views} == {h2, h3}
    assert all(v.radius == pytest.approx(0.5) for v in dynamic_views)


def test_obstacle_queries_by_kind(env10):
    env10.add_static_obstacle(Point(3, 3))
    env10.add_dynamic_obstacle(Point(6, 2), MotionParams(speed=0.0))
    assert env10.is_obstacle(Point(3, 3))
    assert env10.is_static_obstacle(Point(3.3, 2.8))
    assert not env10.is_dynamic_obstacle(Point(3, 3))
    assert env10.is_dynamic_obstacle(Point(6, 2))
    assert not env10.is_obstacle(Point(4, 3))
    assert env10.is_cell_blocked(6, 2)


def test_occupancy_grid_matches_coverage(env10):
    env10.add_static_obstacle(Point(5, 5))
    env10.add_static_obstacle(Point(2, 7), radius=1.0)
    grid = env10.occupancy_grid()
    assert grid.shape == (10, 10)
    assert grid[5, 5]
    assert not grid[5, 6] and not grid[4, 5]
    # radius 1 covers the four axis neighbours but not the diagonals
    assert grid[7, 2] and grid[7, 1] and grid[7, 3] and grid[6, 2] and grid[8, 2]
    assert not grid[8, 3]
    assert int(grid.sum()) == 6
    for cy, cx in zip(*np.nonzero(grid)):
        assert env10.is_cell_blocked(int(cx), int(cy))


def test_check_collision_uses_agent_radius(env10):
    env10.add_static_obstacle(Point(5, 5))
    assert env10.check_collision(Point(5.9, 5), agent_radius=0.5)
    assert not env10.check_collision(Point(5.9, 5), agent_radius=0.3)


def test_mutations_bump_plan_version(env10):
    versions = [env10.plan_version]

    def bumped():
        versions.append(env10.plan_version)
        return versions[-1] > versions[-2]

    env10.set_goal(Point(8, 8))
    assert bumped()
    env10.add_static_obstacle(Point(4, 4))
    assert bumped()
    env10.remove_obstacle(Point(4, 4))
    assert bumped()
    env10.invalidate_path()
    assert bumped()
    env10.set_path([Point(0, 0), Point(1, 1)])
    assert not bumped()


def test_remove_obstacle_tolerance(env10):
    env10.add_static_obstacle(Point(3, 3))
    env10.add_static_obstacle(Point(6, 6))
    assert env10.remove_obstacle(Point(3.3, 3.3)) == 1
    assert env10.remove_obstacle(Point(7, 7)) == 0
    assert len(env10.obstacles) == 1


def test_clear_obstacles_by_kind(env10):
    env10.add_static_obstacle(Point(3, 3))
    env10.add_dynamic_obstacle(Point(6, 2), MotionParams())
    env10.clear_static_obstacles()
    assert env10.static_obstacles == [] and len(env10.dynamic_obstacles) == 1
    env10.add_static_obstacle(Point(3, 3))
    env10.clear_dynamic_obstacles()
    assert env10.dynamic_obstacles == [] and len(env10.static_obstacles) == 1
    env10.clear_obstacles()
    assert env10.obstacles == []


def test_has_reached_goal_threshold():
    env = Environment(10, 10, start=Point(0, 0), goal=Point(5, 5))
    env.set_current_position(Point(5, 5))
    assert env.has_reached_goal()
    env.set_current_position(Point(5, 5.3))
    assert env.has_reached_goal()
    env.set_current_position(Point(5, 5.6))
    assert not env.has_reached_goal()


def test_has_reached_goal_false_without_goal(env10):
    env10.set_current_position(Point(9, 9))
    env10.clear_goal()
    assert not env10.has_reached_goal()


def test_path_is_clear_skips_origin(env10):
    env10.add_static_obstacle(Point(5, 5))
    assert env10.path_is_clear([Point(5, 5), Point(6, 6)])
    assert not env10.path_is_clear([Point(4, 4), Point(5, 5), Point(6, 6)])
    assert not env10.path_is_clear([Point(8, 8), Point(10, 10)])


def test_update_invalidates_blocked_path(env10):
    env10.add_dynamic_obstacle(Point(3, 2), MotionParams(speed=1.0, direction=Vector2D(0, -1)))
    env10.set_path([Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0), Point(4, 0)])
    version = env10.plan_version

    assert not env10.update(1.0)                 # obstacle at (3, 1)
    assert env10.has_path()
    assert env10.update(1.0)                     # obstacle at (3, 0)
    assert not env10.has_path()
    assert env10.plan_version > version


def test_reset_restores_obstacles_and_agent(env10):
    handle = env10.add_dynamic_obstacle(Point(2, 5), MotionParams(speed=2.0))
    env10.set_current_position(Point(4.5, 4.5))
    for _ in range(5):
        env10.update(0.3)
    assert env10.get_obstacle(handle).position != Point(2, 5)

    env10.reset()
    assert env10.get_obstacle(handle).position == Point(2, 5)
    assert env10.current == env10.start
    assert not env10.has_path()


def test_start_and_goal_hit_test(env10):
    assert env10.is_start_point(Point(0.3, 0.2))
    assert not env10.is_start_point(Point(0.6, 0))
    assert env10.is_goal_point(Point(9, 8.6))
    assert not env10.is_goal_point(Point(8, 8))


def test_missed_remove_keeps_path(env10):
    env10.add_static_obstacle(Point(6, 6))
    env10.set_path([Point(0, 0), Point(1, 1)])
    version = env10.plan_version
    assert env10.remove_obstacle(Point(2, 7)) == 0
    assert env10.plan_version == version
    assert env10.has_path()


def test_obstacle_rejected_on_agent_cell(env10):
    env10.set_current_position(Point(4.2, 3.9))
    assert env10.add_static_obstacle(Point(4, 4)) is None
    assert env10.add_dynamic_obstacle(Point(3.8, 4.1), MotionParams(speed=1.0)) is None
    assert env10.obstacles == []
    assert env10.add_static_obstacle(Point(6, 6)) is not None
