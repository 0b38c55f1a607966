# =============================================================================
# Simulation - Navigation Core
# =============================================================================
# Single entry point for a host application: configuration, editor
# commands, the per-frame tick and the render queries.
# =============================================================================

from typing import Any, List, Mapping, Optional

import numpy as np

from nav_world import (
    Environment,
    MotionParams,
    MotionType,
    ObstacleView,
    Point,
    configure as configure_environment,
)
from nav_planning import AStarPlanner, DWAPlanner

from .config import (
    DEFAULT_DT,
    DEFAULT_MAX_SPEED,
    DEFAULT_MAX_ROTATION_SPEED,
    DEFAULT_SENSOR_RANGE,
)
from .engine import Simulation
from .metrics import RunMetrics
from .types import SimulationSnapshot, SimulationState


class NavigationCore:
    """
    Environment + planners + simulation behind one object.

    Editor commands may be issued between ticks in any state. They report
    success through their return value; a rejected command leaves the
    state unchanged, an accepted one makes the next tick replan.
    """

    def __init__(self,
                 environment: Optional[Environment] = None,
                 rng: Optional[np.random.Generator] = None,
                 max_speed: float = DEFAULT_MAX_SPEED,
                 max_rotation_speed: float = DEFAULT_MAX_ROTATION_SPEED,
                 sensor_range: float = DEFAULT_SENSOR_RANGE):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_speed = max_speed
        self.max_rotation_speed = max_rotation_speed
        self.sensor_range = sensor_range
        self.metrics = RunMetrics()
        self._bind(environment if environment is not None else Environment())

    def _bind(self, environment: Environment):
        self.env = environment
        self.simulation = Simulation(
            environment,
            global_planner=AStarPlanner(environment),
            local_planner=DWAPlanner(environment, rng=self.rng),
            max_speed=self.max_speed,
            max_rotation_speed=self.max_rotation_speed,
            sensor_range=self.sensor_range,
        )
        self.metrics.clear()

    # =========================================================================
    # Configuration
    # =========================================================================

    def configure(self, data: Mapping[str, Any]):
        """
        Replace the world with a fresh Environment built from `data`.

        Raises:
            ConfigurationError: A field is well-formed but invalid
        """
        self._bind(configure_environment(data))

    # =========================================================================
    # Editor commands
    # =========================================================================

    def set_start(self, p: Point) -> bool:
        return self.env.set_start(p)

    def set_goal(self, p: Point) -> bool:
        return self.env.set_goal(p)

    def add_static_obstacle(self, p: Point) -> Optional[int]:
        return self.env.add_static_obstacle(p)

    def add_dynamic_obstacle(self, p: Point, params: Optional[MotionParams] = None) -> Optional[int]:
        return self.env.add_dynamic_obstacle(p, params if params is not None else MotionParams())

    def remove_obstacle(self, p: Point) -> int:
        return self.env.remove_obstacle(p)

    def request_replan(self):
        self.simulation.request_replan()

    def start_simulation(self) -> bool:
        started = self.simulation.start()
        if started:
            self.metrics.clear()
        return started

    def reset_simulation(self):
        self.simulation.reset()

    # =========================================================================
    # Tick
    # =========================================================================

    def advance(self, dt: float) -> SimulationSnapshot:
        """Advance the simulation; running ticks are recorded in `metrics`."""
        was_running = self.simulation.is_running()
        snapshot = self.simulation.advance(dt)
        if was_running:
            self.metrics.record(snapshot)
        return snapshot

    def run(self, dt: float = DEFAULT_DT, max_steps: int = 1000) -> SimulationSnapshot:
        """Tick until the run leaves RUNNING or `max_steps` ticks have passed."""
        snapshot = self.snapshot()
        for _ in range(max_steps):
            if not self.simulation.is_running():
                break
            snapshot = self.advance(dt)
        return snapshot

    # =========================================================================
    # Render queries
    # =========================================================================

    def get_agent_position(self) -> Point:
        return self.env.current

    def get_path(self) -> List[Point]:
        return self.env.path

    def get_static_obstacles(self) -> List[ObstacleView]:
        return self.env.obstacle_views(MotionType.STATIC)

    def get_dynamic_obstacles(self) -> List[ObstacleView]:
        return [view for view in self.env.obstacle_views() if view.kind is not MotionType.STATIC]

    def get_simulation_state(self) -> SimulationState:
        return self.simulation.state

    def get_simulation_time(self) -> float:
        return self.simulation.simulation_time

    def snapshot(self) -> SimulationSnapshot:
        return self.simulation.snapshot()
