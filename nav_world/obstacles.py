# =============================================================================
# World Model - Obstacles
# =============================================================================
# Static and dynamic (linear / circular) obstacles as a single tagged type,
# plus a generator for random static layouts.
# =============================================================================

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

import numpy as np

from .config import (
    DEFAULT_OBSTACLE_RADIUS,
    DEFAULT_LINEAR_SPEED,
    DEFAULT_LINEAR_DIRECTION,
    DEFAULT_ORBIT_RADIUS,
    DEFAULT_ANGULAR_SPEED,
    SCENARIO_RANDOM_MIN_DISTANCE,
    SCENARIO_RANDOM_MAX_ATTEMPTS,
)
from .types import Grid, Point, Vector2D

TWO_PI = 2.0 * math.pi


class MotionType(Enum):
    """Obstacle motion variant."""
    STATIC = "static"
    LINEAR = "linear"
    CIRCULAR = "circular"


def wrap_angle(angle: float) -> float:
    """Normalize angle to [0, 2*pi)."""
    angle = math.fmod(angle, TWO_PI)
    if angle < 0.0:
        angle += TWO_PI
    # fmod of a tiny negative value can round up to exactly 2*pi
    return 0.0 if angle >= TWO_PI else angle


def _require_finite(name: str, *values: float):
    for v in values:
        if not math.isfinite(v):
            raise ValueError(f"{name} must be finite, got {v!r}")


def _require_non_negative(name: str, value: float):
    _require_finite(name, value)
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value!r}")


@dataclass
class ObstacleView:
    """Read-only obstacle record published to the rendering layer."""
    handle: int
    kind: MotionType
    position: Point
    radius: float


@dataclass
class MotionParams:
    """Motion description for a dynamic obstacle placed by an editor command."""
    movement_type: MotionType = MotionType.LINEAR
    speed: float = DEFAULT_LINEAR_SPEED                # linear
    direction: Vector2D = Vector2D(*DEFAULT_LINEAR_DIRECTION)
    center: Optional[Point] = None                     # circular, defaults to position
    orbit_radius: float = DEFAULT_ORBIT_RADIUS
    angular_speed: float = DEFAULT_ANGULAR_SPEED
    radius: float = DEFAULT_OBSTACLE_RADIUS            # collision radius


@dataclass
class Obstacle:
    """
    Obstacle tagged by motion type.

    All variants share `position` and collision `radius`. Linear obstacles
    use `speed` and unit `direction`; circular obstacles orbit `center` at
    `orbit_radius` with `angular_speed`. Dynamic obstacles remember their
    initial pose so `reset()` is deterministic.

    Use the `static`, `linear` and `circular` constructors rather than
    building instances directly.
    """
    kind: MotionType
    position: Point
    radius: float = DEFAULT_OBSTACLE_RADIUS

    # Linear motion
    speed: float = 0.0
    direction: Vector2D = field(default_factory=Vector2D)

    # Circular motion
    center: Optional[Point] = None
    orbit_radius: float = 0.0
    angular_speed: float = 0.0
    angle: float = 0.0

    # Arena handle, assigned by the Environment
    handle: int = -1

    # Initial pose
    initial_position: Point = field(init=False)
    initial_direction: Vector2D = field(init=False)
    initial_angle: float = field(init=False)
    initial_angular_speed: float = field(init=False)

    def __post_init__(self):
        self.initial_position = self.position
        self.initial_direction = self.direction
        self.initial_angle = self.angle
        self.initial_angular_speed = self.angular_speed

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def static(cls, position: Point, radius: float = DEFAULT_OBSTACLE_RADIUS) -> "Obstacle":
        _require_finite("position", position.x, position.y)
        _require_non_negative("radius", radius)
        return cls(kind=MotionType.STATIC, position=position, radius=float(radius))

    @classmethod
    def linear(cls, position: Point,
               speed: float = DEFAULT_LINEAR_SPEED,
               direction: Vector2D = Vector2D(1.0, 0.0),
               radius: float = DEFAULT_OBSTACLE_RADIUS) -> "Obstacle":
        """
        Obstacle moving in a straight line and bouncing off the grid border.

        Args:
            position: Initial position
            speed: Speed (grid units / s)
            direction: Heading vector, normalized here
            radius: Collision radius
        """
        _require_finite("position", position.x, position.y)
        _require_finite("direction", direction.x, direction.y)
        _require_non_negative("speed", speed)
        _require_non_negative("radius", radius)
        return cls(kind=MotionType.LINEAR, position=position, radius=float(radius),
                   speed=float(speed), direction=direction.normalized())

    @classmethod
    def circular(cls, position: Point, center: Point,
                 orbit_radius: float,
                 angular_speed: float = DEFAULT_ANGULAR_SPEED,
                 radius: float = DEFAULT_OBSTACLE_RADIUS) -> "Obstacle":
        """
        Obstacle orbiting `center`.

        The starting angle is the bearing of `position` from `center`; the
        obstacle is placed on its orbit at that angle.

        Args:
            position: Requested initial position
            center: Orbit centre
            orbit_radius: Orbit radius (distinct from the collision radius)
            angular_speed: Angular speed (rad / s), sign gives direction
            radius: Collision radius
        """
        _require_finite("position", position.x, position.y)
        _require_finite("center", center.x, center.y)
        _require_finite("angular_speed", angular_speed)
        _require_non_negative("orbit_radius", orbit_radius)
        _require_non_negative("radius", radius)

        if position.distance_to(center) > 0.0:
            angle = wrap_angle(math.atan2(position.y - center.y, position.x - center.x))
        else:
            angle = 0.0
        on_orbit = Point(center.x + orbit_radius * math.cos(angle),
                         center.y + orbit_radius * math.sin(angle))
        return cls(kind=MotionType.CIRCULAR, position=on_orbit, radius=float(radius),
                   center=center, orbit_radius=float(orbit_radius),
                   angular_speed=float(angular_speed), angle=angle)

    @classmethod
    def from_params(cls, position: Point, params: MotionParams) -> "Obstacle":
        """Build a dynamic obstacle from an editor motion description."""
        if params.movement_type is MotionType.CIRCULAR:
            center = params.center if params.center is not None else position
            return cls.circular(position, center, params.orbit_radius,
                                params.angular_speed, params.radius)
        if params.movement_type is MotionType.LINEAR:
            return cls.linear(position, params.speed, params.direction, params.radius)
        raise ValueError(f"Not a dynamic motion type: {params.movement_type}")

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def is_dynamic(self) -> bool:
        return self.kind is not MotionType.STATIC

    def covers_cell(self, cx: int, cy: int) -> bool:
        """True if the collision circle covers the centre of cell (cx, cy)."""
        return float(np.hypot(self.position.x - cx, self.position.y - cy)) <= self.radius

    def intersects(self, p: Point, agent_radius: float = 0.0) -> bool:
        return self.position.distance_to(p) < self.radius + agent_radius

    def predicted_position(self, dt_future: float) -> Point:
        """Closed-form position `dt_future` seconds ahead (no reflection, no mutation)."""
        if self.kind is MotionType.LINEAR:
            step = self.speed * dt_future
            return Point(self.position.x + self.direction.x * step,
                         self.position.y + self.direction.y * step)
        if self.kind is MotionType.CIRCULAR:
            return self._orbit_point(self.angle + self.angular_speed * dt_future)
        return self.position

    def to_view(self) -> ObstacleView:
        return ObstacleView(handle=self.handle, kind=self.kind,
                            position=self.position, radius=self.radius)

    # =========================================================================
    # Motion
    # =========================================================================

    def update(self, dt: float, grid: Grid):
        """Advance by `dt`, reflecting before the step when it would leave `grid`."""
        if self.kind is MotionType.LINEAR:
            self._update_linear(dt, grid)
        elif self.kind is MotionType.CIRCULAR:
            self._update_circular(dt, grid)

    def reset(self):
        """Restore the initial pose."""
        self.position = self.initial_position
        self.direction = self.initial_direction
        self.angle = self.initial_angle
        self.angular_speed = self.initial_angular_speed

    def _update_linear(self, dt: float, grid: Grid):
        next_pos = self.predicted_position(dt)

        dx, dy = self.direction.x, self.direction.y
        reflect_x = not grid.x_in_bounds(next_pos.x)
        reflect_y = not grid.y_in_bounds(next_pos.y)
        if not (reflect_x or reflect_y):
            self.position = next_pos
            return

        if reflect_x:
            dx = -dx
        if reflect_y:
            dy = -dy
        self.direction = Vector2D(dx, dy)

        step = self.speed * dt
        x = self.position.x + dx * step
        y = self.position.y + dy * step
        # Step longer than the free span on this axis: hold it for the tick
        if not grid.x_in_bounds(x):
            x = self.position.x
        if not grid.y_in_bounds(y):
            y = self.position.y
        self.position = Point(x, y)

    def _update_circular(self, dt: float, grid: Grid):
        angle = self.angle + self.angular_speed * dt
        if not grid.contains(self._orbit_point(angle)):
            self.angular_speed = -self.angular_speed
            angle = self.angle + self.angular_speed * dt
            if not grid.contains(self._orbit_point(angle)):
                angle = self.angle

        self.angle = wrap_angle(angle)
        self.position = self._orbit_point(self.angle)

    def _orbit_point(self, angle: float) -> Point:
        return Point(self.center.x + self.orbit_radius * math.cos(angle),
                     self.center.y + self.orbit_radius * math.sin(angle))


class ObstacleGenerator:
    """
    Obstacle generator for scenario setup.
    """

    @staticmethod
    def generate_random_static_obstacles(num_obstacles: int,
                                         grid: Grid,
                                         rng: Optional[np.random.Generator] = None,
                                         radius: float = DEFAULT_OBSTACLE_RADIUS,
                                         min_dist: float = SCENARIO_RANDOM_MIN_DISTANCE,
                                         exclude: Iterable[Point] = ()) -> List[Obstacle]:
        """
        Generate random static obstacles on grid cells without crowding.

        Args:
            num_obstacles: Number of obstacles to generate
            grid: Grid the obstacles must fit in
            rng: Random generator (a fresh unseeded one if None)
            radius: Collision radius
            min_dist: Minimum distance between obstacle centres
            exclude: Points whose cells must stay free (start, goal)

        Returns:
            List of static obstacles (may be shorter than requested when
            the grid is too crowded)
        """
        rng = rng if rng is not None else np.random.default_rng()
        excluded = [p.grid_cell() for p in exclude]
        obstacles: List[Obstacle] = []
        for _ in range(num_obstacles):
            for attempt in range(SCENARIO_RANDOM_MAX_ATTEMPTS):
                cell = (int(rng.integers(0, grid.width)), int(rng.integers(0, grid.height)))
                if cell in excluded:
                    continue
                candidate = Point.from_cell(cell)

                valid = True
                for obs in obstacles:
                    if candidate.distance_to(obs.position) < min_dist:
                        valid = False
                        break

                if valid:
                    obstacles.append(Obstacle.static(candidate, radius))
                    break
        return obstacles
