# =============================================================================
# Planning - DWA (Dynamic Window Approach) Local Planner
# =============================================================================
# Samples candidate velocities around the current one, rolls each out at
# constant velocity over a short horizon and scores the rollouts on
# obstacle clearance, heading towards the target and distance to it.
# =============================================================================

import logging
from typing import List, Optional, Tuple

import numpy as np

from nav_world import Environment, Obstacle, Point, Vector2D

from .config import (
    AGENT_RADIUS,
    MAX_SPEED,
    MAX_ROTATION_SPEED,
    SENSOR_RANGE,
    DWA_VELOCITY_SAMPLES,
    DWA_MIN_SAMPLE_SPEED,
    DWA_PREDICT_TIME,
    DWA_PREDICT_STEPS,
    DWA_WEIGHT_OBSTACLE,
    DWA_WEIGHT_HEADING,
    DWA_WEIGHT_DISTANCE,
    DWA_CLEARANCE_SATURATION,
    DWA_DISTANCE_DECAY,
    DWA_TARGET_EPSILON,
)
from .types import VelocityDecision

logger = logging.getLogger(__name__)

# Rollout sample: (time offset, position)
RolloutPoint = Tuple[float, Point]


class DWAPlanner:
    """
    Sampling-based local planner.

    DWA picks the velocity for the next tick by evaluating:
    - Obstacle clearance along the predicted rollout (hard rejection on
      collision or leaving the grid)
    - Heading towards the target
    - Distance from the rollout end to the target

    Dynamic obstacles are checked at their predicted position for each
    rollout time. Candidates come from an injectable numpy Generator so
    seeded runs are reproducible.
    """

    def __init__(self,
                 environment: Environment,
                 rng: Optional[np.random.Generator] = None,
                 num_samples: int = DWA_VELOCITY_SAMPLES,
                 predict_time: float = DWA_PREDICT_TIME,
                 predict_steps: int = DWA_PREDICT_STEPS,
                 agent_radius: float = AGENT_RADIUS,
                 sensor_range: float = SENSOR_RANGE):
        """
        Initialize DWA planner.

        Args:
            environment: World queried for bounds and obstacles
            rng: Random generator for candidate sampling (fresh if None)
            num_samples: Random candidates drawn in addition to the current velocity
            predict_time: Rollout horizon (seconds)
            predict_steps: Number of rollout subdivisions
            agent_radius: Agent collision radius
            sensor_range: Obstacles farther than this do not affect clearance
        """
        self.env = environment
        self.rng = rng if rng is not None else np.random.default_rng()
        self.num_samples = num_samples
        self.predict_time = predict_time
        self.predict_steps = predict_steps
        self.agent_radius = agent_radius
        self.sensor_range = sensor_range

        self.last_decision: Optional[VelocityDecision] = None

    # =========================================================================
    # Sampling and rollout
    # =========================================================================

    def generate_velocity_samples(self,
                                  current_pos: Point,
                                  current_vel: Vector2D,
                                  target_pos: Point,
                                  max_speed: float,
                                  max_rotation_speed: float) -> List[Vector2D]:
        """
        Candidate velocities, baseline first.

        The baseline is the current velocity limited to `max_speed`. The
        random candidates perturb the heading of the current velocity, or
        the heading to the target when the agent is stationary; their speed
        is at least DWA_MIN_SAMPLE_SPEED (capped by `max_speed`).
        """
        candidates = [current_vel.clamped(max_speed)]

        if current_vel.length > 0.0:
            reference = current_vel.heading
        else:
            reference = Vector2D.between(current_pos, target_pos).heading

        for _ in range(self.num_samples):
            speed = min(max(self.rng.uniform(0.0, max_speed), DWA_MIN_SAMPLE_SPEED), max_speed)
            heading = reference + self.rng.uniform(-max_rotation_speed, max_rotation_speed)
            candidates.append(Vector2D.from_polar(float(speed), float(heading)))
        return candidates

    def predict_trajectory(self, pos: Point, vel: Vector2D) -> List[RolloutPoint]:
        """
        Constant-velocity rollout.

        Returns:
            (t, position) for steps 1..predict_steps; the start point is omitted
        """
        dt = self.predict_time / self.predict_steps
        return [(k * dt, pos.offset(vel, k * dt)) for k in range(1, self.predict_steps + 1)]

    def trajectory_clearance(self,
                             trajectory: List[RolloutPoint],
                             current_pos: Point) -> Tuple[bool, float]:
        """
        Check a rollout against the grid and every obstacle.

        Args:
            trajectory: Rollout from predict_trajectory
            current_pos: Agent position, centre of the sensor range

        Returns:
            (is_valid, min_clearance): False if any point leaves the grid or
            collides; clearance is the smallest surface gap to an obstacle
            within sensor range (inf if none)
        """
        obstacles = self.env.obstacles
        in_range = [obs for obs in obstacles
                    if obs.position.distance_to(current_pos) <= self.sensor_range]

        min_clearance = float('inf')
        for t, p in trajectory:
            if not self.env.is_in_bounds(p):
                return False, 0.0

            for obs in obstacles:
                if self._collides(obs, p, t):
                    return False, 0.0

            for obs in in_range:
                clearance = (self._position_at(obs, t).distance_to(p)
                             - obs.radius - self.agent_radius)
                min_clearance = min(min_clearance, clearance)

        return True, min_clearance

    def _collides(self, obs: Obstacle, p: Point, t: float) -> bool:
        return self._position_at(obs, t).distance_to(p) < obs.radius + self.agent_radius

    @staticmethod
    def _position_at(obs: Obstacle, t: float) -> Point:
        return obs.predicted_position(t) if obs.is_dynamic else obs.position

    # =========================================================================
    # Scoring
    # =========================================================================

    @staticmethod
    def obstacle_score(min_clearance: float) -> float:
        """Saturating clearance score in [0, 1]; 1 when nothing is in range."""
        if min_clearance == float('inf'):
            return 1.0
        return float(np.clip(min_clearance / DWA_CLEARANCE_SATURATION, 0.0, 1.0))

    @staticmethod
    def heading_score(vel: Vector2D, to_target: Vector2D) -> float:
        """Cosine similarity rescaled to [0, 1]; 0.5 for a zero candidate."""
        if vel.length <= 0.0 or to_target.length <= 0.0:
            return 0.5
        cos_sim = vel.dot(to_target) / (vel.length * to_target.length)
        return (float(np.clip(cos_sim, -1.0, 1.0)) + 1.0) / 2.0

    @staticmethod
    def distance_score(end: Point, target: Point) -> float:
        return float(np.exp(-end.distance_to(target) / DWA_DISTANCE_DECAY))

    # =========================================================================
    # Decision
    # =========================================================================

    def evaluate(self,
                 current_pos: Point,
                 current_vel: Vector2D,
                 target_pos: Point,
                 max_speed: float = MAX_SPEED,
                 max_rotation_speed: float = MAX_ROTATION_SPEED) -> VelocityDecision:
        """
        Score every candidate and keep the best admissible one.

        Args:
            current_pos: Agent position
            current_vel: Agent velocity
            target_pos: Local target (next path waypoint)
            max_speed: Speed limit for sampled candidates
            max_rotation_speed: Heading perturbation bound (rad)

        Returns:
            VelocityDecision; zero velocity when the target is reached or
            every candidate was rejected
        """
        to_target = Vector2D.between(current_pos, target_pos)
        if to_target.length < DWA_TARGET_EPSILON:
            decision = VelocityDecision(velocity=Vector2D(), score=1.0,
                                        obstacle_score=1.0, heading_score=1.0,
                                        distance_score=1.0, reason="Target reached")
            self.last_decision = decision
            return decision

        candidates = self.generate_velocity_samples(
            current_pos, current_vel, target_pos, max_speed, max_rotation_speed
        )

        best: Optional[VelocityDecision] = None
        rejected = 0
        for vel in candidates:
            trajectory = self.predict_trajectory(current_pos, vel)
            valid, min_clearance = self.trajectory_clearance(trajectory, current_pos)
            if not valid:
                rejected += 1
                continue

            obs_s = self.obstacle_score(min_clearance)
            head_s = self.heading_score(vel, to_target)
            dist_s = self.distance_score(trajectory[-1][1], target_pos)
            score = (
                DWA_WEIGHT_OBSTACLE * obs_s +
                DWA_WEIGHT_HEADING * head_s +
                DWA_WEIGHT_DISTANCE * dist_s
            )

            # Strict comparison: the earlier candidate wins ties
            if best is None or score > best.score:
                best = VelocityDecision(
                    velocity=vel,
                    score=score,
                    obstacle_score=obs_s,
                    heading_score=head_s,
                    distance_score=dist_s,
                    predicted_trajectory=[p for _, p in trajectory],
                )

        if best is None:
            logger.debug("All %d DWA candidates rejected at (%.2f, %.2f)",
                         len(candidates), current_pos.x, current_pos.y)
            best = VelocityDecision(velocity=Vector2D(), score=float('-inf'),
                                    reason="No admissible trajectory")
        else:
            best.reason = f"DWA: |v|={best.velocity.length:.2f}, score={best.score:.3f}"

        best.num_candidates = len(candidates)
        best.num_rejected = rejected
        self.last_decision = best
        return best

    def choose_velocity(self,
                        current_pos: Point,
                        current_vel: Vector2D,
                        target_pos: Point,
                        max_speed: float = MAX_SPEED,
                        max_rotation_speed: float = MAX_ROTATION_SPEED) -> Vector2D:
        """Velocity for the next tick (see `evaluate`)."""
        return self.evaluate(current_pos, current_vel, target_pos,
                             max_speed, max_rotation_speed).velocity
