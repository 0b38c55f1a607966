"""Environment loading: defaults, fallbacks and fail-fast validation."""

import json
import logging
import math

import pytest

from nav_world import (
    DynamicObstacleConfig,
    StaticObstacleConfig,
    WorldConfig,
    DEFAULT_GRID_HEIGHT,
    DEFAULT_GRID_WIDTH,
    ConfigurationError,
    MotionType,
    Point,
    configure,
    load_environment,
)


FULL_CONFIG = {
    "width": 20,
    "height": 15,
    "start": [1, 1],
    "goal": [18, 13],
    "static_obstacles": [
        {"x": 5, "y": 5},
        {"x": 8, "y": 3, "radius": 1.0},
    ],
    "dynamic_obstacles": [
        {"x": 3, "y": 10, "movement_type": "linear", "speed": 2.0, "direction": [0, 1]},
        {"x": 12, "y": 7, "movement_type": "circular", "center": [10, 7],
         "radius": 2.0, "angular_speed": -0.5, "collision_radius": 0.4},
    ],
}


def test_configure_full_description():
    env = configure(FULL_CONFIG)
    assert (env.width, env.height) == (20, 15)
    assert env.start == Point(1, 1)
    assert env.current == Point(1, 1)
    assert env.goal == Point(18, 13)
    assert len(env.static_obstacles) == 2
    assert env.static_obstacles[1].radius == pytest.approx(1.0)

    linear, circular = env.dynamic_obstacles
    assert linear.kind is MotionType.LINEAR
    assert linear.speed == pytest.approx(2.0)
    assert linear.direction.y == pytest.approx(1.0)
    assert circular.kind is MotionType.CIRCULAR
    assert circular.orbit_radius == pytest.approx(2.0)
    assert circular.radius == pytest.approx(0.4)
    assert circular.angular_speed == pytest.approx(-0.5)
    assert circular.center == Point(10, 7)


def test_empty_description_uses_defaults():
    env = configure({})
    assert (env.width, env.height) == (DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT)
    assert env.start == Point(0, 0)
    assert env.goal == Point(DEFAULT_GRID_WIDTH - 1, DEFAULT_GRID_HEIGHT - 1)
    assert env.obstacles == []


def test_malformed_fields_fall_back_with_warning(caplog):
    data = {
        "width": "wide",
        "height": 10,
        "start": "somewhere",
        "goal": [4, 4],
        "static_obstacles": [{"x": 2}, "junk", {"x": 3, "y": 3, "radius": "big"}],
        "dynamic_obstacles": {"not": "a list"},
    }
    with caplog.at_level(logging.WARNING, logger="nav_world.loader"):
        env = configure(data)

    assert env.width == DEFAULT_GRID_WIDTH
    assert env.height == 10
    assert env.start == Point(0, 0)
    assert env.goal == Point(4, 4)
    assert len(env.static_obstacles) == 1
    assert env.static_obstacles[0].radius == pytest.approx(0.5)
    assert env.dynamic_obstacles == []
    assert len(caplog.records) >= 5


def test_unknown_movement_type_defaults_to_linear():
    env = configure({"width": 10, "height": 10,
                     "dynamic_obstacles": [{"x": 4, "y": 4, "movement_type": "teleport"}]})
    assert env.dynamic_obstacles[0].kind is MotionType.LINEAR


def test_rejected_start_keeps_default(caplog):
    data = {"width": 10, "height": 10, "start": [30, 30]}
    with caplog.at_level(logging.WARNING, logger="nav_world.loader"):
        env = configure(data)
    assert env.start == Point(0, 0)
    assert any("Start" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("data", [
    {"width": 0},
    {"height": -3},
    {"width": 4.5},
    {"width": math.nan},
    {"start": [math.nan, 1]},
    {"static_obstacles": [{"x": 1, "y": 1, "radius": -1}]},
    {"static_obstacles": [{"x": math.inf, "y": 1}]},
    {"dynamic_obstacles": [{"x": 2, "y": 2, "speed": -1}]},
    {"dynamic_obstacles": [{"x": 2, "y": 2, "movement_type": "circular", "radius": -2}]},
    {"dynamic_obstacles": [{"x": 2, "y": 2, "movement_type": "circular",
                            "angular_speed": math.nan}]},
])
def test_invalid_values_raise(data):
    with pytest.raises(ConfigurationError):
        configure(data)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)
    with pytest.raises(ValueError):
        configure([1, 2, 3])


def test_load_environment_from_json(tmp_path):
    path = tmp_path / "world.json"
    path.write_text(json.dumps(FULL_CONFIG), encoding="utf-8")
    env = load_environment(path)
    assert (env.width, env.height) == (20, 15)
    assert len(env.obstacles) == 4


def test_load_environment_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_environment(path)

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_environment(path)


def test_load_environment_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_environment(tmp_path / "nope.json")


def test_world_config_falls_back_per_field(caplog):
    with caplog.at_level(logging.WARNING, logger="nav_world.schema"):
        world = WorldConfig.model_validate({"width": "wide", "height": 12, "goal": [1, 2, 3]})
    assert world.width == DEFAULT_GRID_WIDTH
    assert world.height == 12
    assert world.goal is None
    assert len(caplog.records) == 2


def test_world_config_keeps_fatal_errors():
    with pytest.raises(ValueError):
        WorldConfig.model_validate({"width": -1})
    with pytest.raises(ValueError):
        StaticObstacleConfig.model_validate({"x": 1, "y": math.nan})


def test_static_obstacle_config_requires_position():
    with pytest.raises(ValueError):
        StaticObstacleConfig.model_validate({"x": 1})
    entry = StaticObstacleConfig.model_validate({"x": "2.5", "y": 1, "radius": None})
    assert entry.x == pytest.approx(2.5)
    assert entry.radius == pytest.approx(0.5)


def test_circular_config_orbits_its_own_position_by_default():
    entry = DynamicObstacleConfig.model_validate(
        {"x": 4, "y": 4, "movement_type": "CIRCULAR", "radius": 1.0}
    )
    assert entry.movement_type == "circular"
    obstacle = entry.to_obstacle()
    assert obstacle.kind is MotionType.CIRCULAR
    assert obstacle.center == Point(4, 4)
