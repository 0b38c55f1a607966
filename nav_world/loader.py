# =============================================================================
# World Model - Configuration Loader
# =============================================================================
# Builds a fresh Environment from a structured description (dict or JSON
# file), validated against the models in `schema`. Missing or malformed
# fields fall back to defaults with a warning; values that are well-formed
# but invalid (NaN, negative radius, empty grid) fail fast with
# ConfigurationError.
#
# Layout:
#   {
#     "width": 20, "height": 20,
#     "start": [0, 0], "goal": [19, 19],
#     "static_obstacles": [{"x": 5, "y": 5, "radius": 0.5}],
#     "dynamic_obstacles": [
#       {"x": 3, "y": 8, "movement_type": "linear",
#        "speed": 2.0, "direction": [1, 0]},
#       {"x": 12, "y": 10, "movement_type": "circular",
#        "center": [10, 10], "radius": 2.0, "angular_speed": 1.0}
#     ]
#   }
# =============================================================================

import json
import logging
from pathlib import Path
from typing import Any, Iterator, List, Mapping, Type, Union

from pydantic import ValidationError

from .environment import Environment
from .schema import (
    DynamicObstacleConfig,
    LenientModel,
    StaticObstacleConfig,
    WorldConfig,
    is_fatal,
)
from .types import Point

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Invalid value in an environment description."""


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'value'}: {err['msg']}"
        for err in error.errors()
    )


def _parse_entries(model: Type[LenientModel], entries: List[Any], key: str) -> Iterator[LenientModel]:
    """Validate obstacle entries one by one, skipping malformed ones."""
    for entry in entries:
        if not isinstance(entry, Mapping):
            logger.warning("Field %r: skipping non-object entry %r", key, entry)
            continue
        try:
            yield model.model_validate(dict(entry))
        except ValidationError as e:
            if is_fatal(e):
                raise ConfigurationError(f"{key} entry {entry!r}: {_describe(e)}") from e
            logger.warning("Field %r: skipping entry %r (%s)", key, entry, _describe(e))


# =============================================================================
# Public API
# =============================================================================

def configure(data: Mapping[str, Any]) -> Environment:
    """
    Build a fresh Environment from a structured description.

    Args:
        data: Mapping with the layout described in the module header

    Returns:
        Configured Environment

    Raises:
        ConfigurationError: A field is well-formed but invalid
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Expected a mapping, got {type(data).__name__}")

    try:
        world = WorldConfig.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigurationError(_describe(e)) from e

    env = Environment(world.width, world.height)

    if world.start is not None and not env.set_start(Point(*world.start)):
        logger.warning("Start %r is not a free in-bounds cell; keeping (%.0f, %.0f)",
                       world.start, env.start.x, env.start.y)
    if world.goal is not None and not env.set_goal(Point(*world.goal)):
        logger.warning("Goal %r is not a free in-bounds cell; keeping (%.0f, %.0f)",
                       world.goal, env.goal.x, env.goal.y)

    try:
        for entry in _parse_entries(StaticObstacleConfig, world.static_obstacles, "static_obstacles"):
            if env.add_obstacle(entry.to_obstacle()) is None:
                logger.warning("Static obstacle %r could not be placed", entry.model_dump())

        for entry in _parse_entries(DynamicObstacleConfig, world.dynamic_obstacles, "dynamic_obstacles"):
            if env.add_obstacle(entry.to_obstacle()) is None:
                logger.warning("Dynamic obstacle %r could not be placed", entry.model_dump())
    except ConfigurationError:
        raise
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    logger.info("Configured %dx%d grid with %d static and %d dynamic obstacles",
                env.width, env.height, len(env.static_obstacles), len(env.dynamic_obstacles))
    return env


def load_raw_config(path: Union[str, Path]) -> dict:
    """Load an environment description file without applying it."""
    config_path = Path(path)
    with config_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected an object in {config_path}, got {type(data).__name__}")
    return data


def load_environment(path: Union[str, Path]) -> Environment:
    """
    Load and apply an environment description from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigurationError: If the file or one of its values is invalid.
    """
    return configure(load_raw_config(path))
