# =============================================================================
# Planning - Configuration
# =============================================================================
# Parameters for the global (A*) and local (DWA) planners.
# =============================================================================

import math

# =============================================================================
# COMMON AGENT PARAMETERS
# =============================================================================
AGENT_RADIUS = 0.15             # Collision radius used for rollouts (grid units)

# Movement limits
MAX_SPEED = 5.0                 # Maximum speed (grid units / s)
MAX_ROTATION_SPEED = 2.0        # Maximum heading perturbation per decision (rad)

# Obstacles farther than this from the agent do not affect the clearance score
SENSOR_RANGE = 5.0

# =============================================================================
# A* PARAMETERS
# =============================================================================
ASTAR_STRAIGHT_COST = 1.0
ASTAR_DIAGONAL_COST = math.sqrt(2.0)

# 8-connected moves; even indices are axis-aligned
ASTAR_NEIGHBORS = (
    (-1, 0), (-1, 1), (0, 1), (1, 1),
    (1, 0), (1, -1), (0, -1), (-1, -1),
)

# =============================================================================
# DWA PARAMETERS
# =============================================================================
# Velocity sampling (random candidates in addition to the current velocity)
DWA_VELOCITY_SAMPLES = 20
DWA_MIN_SAMPLE_SPEED = 0.1      # Floor for sampled speeds (grid units / s)

# Trajectory prediction
DWA_PREDICT_TIME = 2.0          # Prediction horizon (seconds)
DWA_PREDICT_STEPS = 10          # Rollout subdivisions

# Scoring weights (sum to 1, obstacle avoidance dominant)
DWA_WEIGHT_OBSTACLE = 0.40
DWA_WEIGHT_HEADING = 0.30
DWA_WEIGHT_DISTANCE = 0.30

# Clearance at which the obstacle score saturates to 1 (grid units).
# Below the 0.35 gap left when passing between two obstacles one cell
# apart, so a drivable corridor scores as fully clear.
DWA_CLEARANCE_SATURATION = 0.3

# Decay constant of the goal-distance score exp(-d / k)
DWA_DISTANCE_DECAY = 10.0

# Target closer than this counts as reached: hold position
DWA_TARGET_EPSILON = 1e-3
