# =============================================================================
# Simulation - Engine
# =============================================================================
# Tick-driven run of one agent through an Environment:
#   obstacles move -> global path kept valid (A*) -> lookahead waypoint ->
#   local velocity (DWA) -> integrate -> trace -> arrival and progress check.
# =============================================================================

import dataclasses
import logging
from typing import List, Optional

from nav_world import Environment, Point, Vector2D
from nav_planning import AStarPlanner, DWAPlanner

from .config import (
    DEFAULT_MAX_SPEED,
    DEFAULT_MAX_ROTATION_SPEED,
    DEFAULT_SENSOR_RANGE,
    TRACE_MIN_SPACING,
    WAYPOINT_LOOKAHEAD,
    NO_PROGRESS_TICKS,
    NO_PROGRESS_MIN_GAIN,
)
from .types import AgentKinematicState, SimulationSnapshot, SimulationState

logger = logging.getLogger(__name__)


class Simulation:
    """
    Simulation state machine: IDLE -> RUNNING -> FINISHED, reset to IDLE.

    The host drives it by calling `advance(dt)` once per frame. Editor
    commands go to the Environment between ticks; any of them that may
    invalidate the plan bumps `env.plan_version`, which makes the next tick
    replan.
    """

    def __init__(self,
                 environment: Environment,
                 global_planner: Optional[AStarPlanner] = None,
                 local_planner: Optional[DWAPlanner] = None,
                 max_speed: float = DEFAULT_MAX_SPEED,
                 max_rotation_speed: float = DEFAULT_MAX_ROTATION_SPEED,
                 sensor_range: float = DEFAULT_SENSOR_RANGE,
                 lookahead: float = WAYPOINT_LOOKAHEAD):
        """
        Initialize the simulation.

        Args:
            environment: World to navigate
            global_planner: Path planner (A* on the environment if None)
            local_planner: Velocity planner (DWA on the environment if None)
            max_speed: Agent speed limit (grid units / s)
            max_rotation_speed: Heading perturbation bound per decision (rad)
            sensor_range: Obstacle range considered by the local planner
            lookahead: Minimum distance from the agent to its local target
        """
        self.env = environment
        self.global_planner = global_planner if global_planner is not None else AStarPlanner(environment)
        self.local_planner = (local_planner if local_planner is not None
                              else DWAPlanner(environment, sensor_range=sensor_range))
        self.max_speed = max_speed
        self.max_rotation_speed = max_rotation_speed
        self.lookahead = lookahead
        self.local_planner.sensor_range = sensor_range

        self._state = SimulationState.IDLE
        self._time = 0.0
        self._trace: List[Point] = []
        self._agent = AgentKinematicState(position=environment.current)
        self._planned_version: Optional[int] = None
        self._replan_count = 0
        self._blocked_warned = False
        self._best_goal_distance = float('inf')
        self._no_progress_ticks = 0
        self._recovery_count = 0

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def state(self) -> SimulationState:
        return self._state

    def is_idle(self) -> bool:
        return self._state is SimulationState.IDLE

    def is_running(self) -> bool:
        return self._state is SimulationState.RUNNING

    def is_finished(self) -> bool:
        return self._state is SimulationState.FINISHED

    @property
    def simulation_time(self) -> float:
        return self._time

    @property
    def traversed_path(self) -> List[Point]:
        return list(self._trace)

    @property
    def agent_state(self) -> AgentKinematicState:
        return dataclasses.replace(self._agent)

    @property
    def replan_count(self) -> int:
        return self._replan_count

    @property
    def recovery_count(self) -> int:
        """Times the agent was restarted from rest after making no progress."""
        return self._recovery_count

    @property
    def sensor_range(self) -> float:
        return self.local_planner.sensor_range

    @sensor_range.setter
    def sensor_range(self, value: float):
        self.local_planner.sensor_range = value

    def snapshot(self, replanned: bool = False) -> SimulationSnapshot:
        return SimulationSnapshot(
            state=self._state,
            time=self._time,
            agent=self.agent_state,
            path=self.env.path,
            traversed_path=self.traversed_path,
            replanned=replanned,
            plan_version=self.env.plan_version,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> bool:
        """
        IDLE -> RUNNING.

        Ignored (returns False) unless the simulation is idle and both start
        and goal lie inside the grid.
        """
        if self._state is not SimulationState.IDLE:
            logger.debug("start() ignored in state %s", self._state.value)
            return False
        if not (self.env.is_in_bounds(self.env.start) and self.env.is_in_bounds(self.env.goal)):
            logger.debug("start() ignored: start or goal not set")
            return False

        self._restore()
        self._trace = [self.env.start]
        self._state = SimulationState.RUNNING
        logger.info("Simulation started: (%.2f, %.2f) -> (%.2f, %.2f)",
                    self.env.start.x, self.env.start.y, self.env.goal.x, self.env.goal.y)
        return True

    def reset(self):
        """Any state -> IDLE with obstacles, agent, path and clock restored."""
        self._restore()
        self._trace = []
        self._state = SimulationState.IDLE
        logger.info("Simulation reset")

    def request_replan(self):
        """Force a fresh global plan on the next tick."""
        self.env.invalidate_path()

    def _restore(self):
        self._time = 0.0
        self.env.reset()
        self._agent = AgentKinematicState(position=self.env.current)
        self._planned_version = None
        self._replan_count = 0
        self._blocked_warned = False
        self._best_goal_distance = float('inf')
        self._no_progress_ticks = 0
        self._recovery_count = 0

    # =========================================================================
    # Tick
    # =========================================================================

    def advance(self, dt: float) -> SimulationSnapshot:
        """
        Advance one tick of `dt` seconds. No-op unless RUNNING.

        Returns:
            Snapshot after the tick
        """
        if self._state is not SimulationState.RUNNING:
            return self.snapshot()

        self._time += dt
        self.env.update(dt)

        if self.env.has_reached_goal():
            self._finish()
            return self.snapshot()

        replanned = False
        if self._needs_replan():
            replanned = self._replan()

        path = self.env.path
        if not path:
            self._hold()
            return self.snapshot(replanned)

        self._blocked_warned = False
        current = self.env.current
        target = self._next_waypoint(path, current, self.lookahead)
        vel = self.local_planner.choose_velocity(
            current, self._agent.velocity, target,
            self.max_speed, self.max_rotation_speed
        )

        new_pos = current.offset(vel, dt)
        self.env.set_current_position(new_pos)
        self._agent = AgentKinematicState(position=new_pos, velocity=vel, path_available=True)

        if not self._trace or self._trace[-1].distance_to(new_pos) > TRACE_MIN_SPACING:
            self._trace.append(new_pos)

        if self.env.has_reached_goal():
            self._finish()
        else:
            self._track_progress(new_pos)
        return self.snapshot(replanned)

    def _needs_replan(self) -> bool:
        return (not self.env.has_path()
                or self._planned_version != self.env.plan_version
                or not self.env.path_is_clear())

    def _replan(self) -> bool:
        path = self.global_planner.find_path()
        self._planned_version = self.env.plan_version
        self._replan_count += 1
        if path:
            logger.info("Planned path with %d cells at t=%.2f", len(path), self._time)
        return True

    def _hold(self):
        self._agent = AgentKinematicState(position=self.env.current,
                                          velocity=Vector2D(), path_available=False)
        if not self._blocked_warned:
            logger.warning("No path to goal (%.2f, %.2f) at t=%.2f; holding position",
                           self.env.goal.x, self.env.goal.y, self._time)
            self._blocked_warned = True

    def _track_progress(self, position: Point):
        """Restart the agent from rest after NO_PROGRESS_TICKS ticks without getting closer."""
        goal_distance = position.distance_to(self.env.goal)
        if goal_distance < self._best_goal_distance - NO_PROGRESS_MIN_GAIN:
            self._best_goal_distance = goal_distance
            self._no_progress_ticks = 0
            return

        self._no_progress_ticks += 1
        if self._no_progress_ticks >= NO_PROGRESS_TICKS:
            logger.info("No progress towards goal for %d ticks at t=%.2f; restarting from rest",
                        self._no_progress_ticks, self._time)
            self._agent = AgentKinematicState(position=position, velocity=Vector2D(),
                                              path_available=True)
            self._best_goal_distance = goal_distance
            self._no_progress_ticks = 0
            self._recovery_count += 1

    @staticmethod
    def _next_waypoint(path: List[Point], current: Point, lookahead: float = 0.0) -> Point:
        """
        Local target on `path`.

        The first point after the one nearest to the agent that lies at least
        `lookahead` away; the last point when none does.
        """
        nearest = min(range(len(path)), key=lambda i: current.distance_to(path[i]))
        for p in path[nearest + 1:]:
            if current.distance_to(p) >= lookahead:
                return p
        return path[-1]

    def _finish(self):
        self._state = SimulationState.FINISHED
        self._agent = AgentKinematicState(position=self.env.current,
                                          velocity=Vector2D(), path_available=True)
        self.env.set_path(self._trace)
        logger.info("Agent reached goal at t=%.2f after %d replans",
                    self._time, self._replan_count)
