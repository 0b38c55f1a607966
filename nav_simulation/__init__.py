# =============================================================================
# Simulation Package
# =============================================================================
# Tick-driven navigation run on top of nav_world and nav_planning.
#
# Responsibilities:
# - Simulation state machine (IDLE / RUNNING / FINISHED)
# - Replanning when the plan is stale or blocked, DWA velocity per tick
# - NavigationCore facade: configuration, editor commands, render queries
# - Run metrics with CSV / JSON export
#
# Usage:
#   from nav_simulation import NavigationCore
#   core = NavigationCore(rng=np.random.default_rng(0))
#   core.configure({"width": 10, "height": 10, "start": [0, 0], "goal": [9, 9]})
#   core.start_simulation()
#   core.run(dt=0.1, max_steps=2000)
#   print(core.metrics.summary())
# =============================================================================

from .types import SimulationState, AgentKinematicState, SimulationSnapshot
from .engine import Simulation
from .metrics import RunMetrics
from .core import NavigationCore

# Re-export config for convenience
from .config import (
    DEFAULT_DT,
    DEFAULT_MAX_SPEED,
    DEFAULT_MAX_ROTATION_SPEED,
    TRACE_MIN_SPACING,
)

__all__ = [
    # Types
    'SimulationState',
    'AgentKinematicState',
    'SimulationSnapshot',

    # Components
    'Simulation',
    'RunMetrics',
    'NavigationCore',

    # Config exports
    'DEFAULT_DT',
    'DEFAULT_MAX_SPEED',
    'DEFAULT_MAX_ROTATION_SPEED',
    'TRACE_MIN_SPACING',
]

__version__ = '1.0.0'
