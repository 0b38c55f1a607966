# =============================================================================
# Planning Package
# =============================================================================
# Global and local planners for grid navigation.
#
# Planners:
# - A*:  8-connected grid search, Euclidean heuristic (global path)
# - DWA: sampled velocities scored on clearance, heading and distance (local)
#
# Usage:
#   from nav_planning import AStarPlanner, DWAPlanner
#   path = AStarPlanner(env).find_path()
#   vel = DWAPlanner(env, rng=np.random.default_rng(0)).choose_velocity(
#       pos, vel, path[1], max_speed=5.0, max_rotation_speed=2.0)
# =============================================================================

from .types import PlanResult, VelocityDecision
from .astar import AStarPlanner, path_cost
from .dwa import DWAPlanner

# Re-export config for convenience
from .config import (
    AGENT_RADIUS,
    MAX_SPEED,
    MAX_ROTATION_SPEED,
    SENSOR_RANGE,
    DWA_VELOCITY_SAMPLES,
    DWA_PREDICT_TIME,
)

__all__ = [
    # Types
    'PlanResult',
    'VelocityDecision',

    # Planners
    'AStarPlanner',
    'DWAPlanner',
    'path_cost',

    # Config exports
    'AGENT_RADIUS',
    'MAX_SPEED',
    'MAX_ROTATION_SPEED',
    'SENSOR_RANGE',
    'DWA_VELOCITY_SAMPLES',
    'DWA_PREDICT_TIME',
]

__version__ = '1.0.0'
