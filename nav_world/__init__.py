# =============================================================================
# World Model Package
# =============================================================================
# Grid world layer for agent navigation.
#
# Responsibilities:
# - Planar types (Point, Vector2D, Grid)
# - Obstacle kinematics (static, linear, circular) with boundary reflection
# - Environment state: start / goal / agent, obstacle arena, stored path
# - Configuration schema (pydantic), loading and scenario presets
#
# Usage:
#   from nav_world import Environment, Point
#   env = Environment(20, 20)
#   env.add_static_obstacle(Point(5, 5))
#   env.update(dt=0.1)
# =============================================================================

from .types import Point, Vector2D, Grid, INVALID_POINT
from .obstacles import (
    MotionType,
    MotionParams,
    Obstacle,
    ObstacleView,
    ObstacleGenerator,
)
from .environment import Environment
from .schema import WorldConfig, StaticObstacleConfig, DynamicObstacleConfig
from .loader import ConfigurationError, configure, load_environment, load_raw_config
from .scenarios import ScenarioPresets

# Re-export config for convenience
from .config import (
    DEFAULT_GRID_WIDTH,
    DEFAULT_GRID_HEIGHT,
    DEFAULT_OBSTACLE_RADIUS,
    GOAL_THRESHOLD,
    REMOVE_TOLERANCE,
)

__all__ = [
    # Types
    'Point',
    'Vector2D',
    'Grid',
    'INVALID_POINT',

    # Obstacles
    'MotionType',
    'MotionParams',
    'Obstacle',
    'ObstacleView',
    'ObstacleGenerator',

    # Environment
    'Environment',
    'ScenarioPresets',

    # Loading
    'WorldConfig',
    'StaticObstacleConfig',
    'DynamicObstacleConfig',
    'ConfigurationError',
    'configure',
    'load_environment',
    'load_raw_config',

    # Config exports
    'DEFAULT_GRID_WIDTH',
    'DEFAULT_GRID_HEIGHT',
    'DEFAULT_OBSTACLE_RADIUS',
    'GOAL_THRESHOLD',
    'REMOVE_TOLERANCE',
]

__version__ = '1.0.0'
