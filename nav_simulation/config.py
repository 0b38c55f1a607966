# =============================================================================
# Simulation - Configuration
# =============================================================================
# Tick-loop thresholds and defaults for the navigation simulation.
# =============================================================================

# =============================================================================
# TIMING
# =============================================================================
DEFAULT_DT = 0.1                # Default tick length (seconds)

# =============================================================================
# AGENT MOTION
# =============================================================================
DEFAULT_MAX_SPEED = 5.0         # grid units / s
DEFAULT_MAX_ROTATION_SPEED = 2.0
DEFAULT_SENSOR_RANGE = 5.0

# Trace points closer than this to the previous one are not recorded
TRACE_MIN_SPACING = 0.01

# =============================================================================
# PATH FOLLOWING
# =============================================================================
# Local target: first path point after the nearest one that is at least this
# far from the agent.
# 0 selects the waypoint right after the nearest one.
WAYPOINT_LOOKAHEAD = 2.0

# Stuck detection: distance to goal must shrink by NO_PROGRESS_MIN_GAIN
# within NO_PROGRESS_TICKS ticks, otherwise the agent restarts from rest
NO_PROGRESS_TICKS = 40
NO_PROGRESS_MIN_GAIN = 0.05

# =============================================================================
# METRICS / LOGS
# =============================================================================
LOG_DIR = "log"
METRICS_FLOAT_PRECISION = 4
