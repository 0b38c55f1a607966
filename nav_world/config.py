# =============================================================================
# World Model - Configuration
# =============================================================================
# All configurable parameters for the grid world layer.
# =============================================================================

# =============================================================================
# GRID DIMENSIONS
# =============================================================================
# Number of cells along each axis. Valid cells are [0, width) x [0, height).
DEFAULT_GRID_WIDTH = 50
DEFAULT_GRID_HEIGHT = 50

# Sentinel coordinate for an unset start / goal
INVALID_COORD = -1.0

# =============================================================================
# POINT COMPARISON
# =============================================================================
# Two points closer than this are considered equal (grid units)
POINT_EPSILON = 1e-3

# Vectors shorter than this normalize to zero
VECTOR_EPSILON = 1e-4

# =============================================================================
# OBSTACLE CONFIGURATION
# =============================================================================
# Collision radius of an obstacle (half a grid cell)
DEFAULT_OBSTACLE_RADIUS = 0.5

# Linear motion defaults
DEFAULT_LINEAR_SPEED = 3.0              # grid units / s
DEFAULT_LINEAR_DIRECTION = (1.0, 0.0)

# Circular motion defaults
DEFAULT_ORBIT_RADIUS = 5.0              # grid units
DEFAULT_ANGULAR_SPEED = 1.0             # rad / s

# =============================================================================
# EDITOR TOLERANCES
# =============================================================================
# Remove command deletes obstacles whose centre lies within this distance
REMOVE_TOLERANCE = 0.5

# Start / goal hit radius and goal arrival threshold
GOAL_THRESHOLD = 0.5

# =============================================================================
# SCENARIO CONFIGURATION
# =============================================================================
# Random static obstacles: count and minimum spacing between centres
SCENARIO_RANDOM_NUM_STATIC_OBSTACLES = 12
SCENARIO_RANDOM_MIN_DISTANCE = 1.5
SCENARIO_RANDOM_MAX_ATTEMPTS = 100
