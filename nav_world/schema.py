# =============================================================================
# World Model - Configuration Schema
# =============================================================================
# Pydantic models for an environment description. A malformed optional
# field (wrong type, unparsable string) falls back to its default with a
# warning; a well-formed but invalid value (NaN / inf, negative radius or
# speed, non-positive or fractional grid size) is left as a validation
# error for the loader to turn into ConfigurationError.
# =============================================================================

import logging
from typing import Any, List, Literal, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from .config import (
    DEFAULT_GRID_WIDTH,
    DEFAULT_GRID_HEIGHT,
    DEFAULT_OBSTACLE_RADIUS,
    DEFAULT_LINEAR_SPEED,
    DEFAULT_LINEAR_DIRECTION,
    DEFAULT_ORBIT_RADIUS,
    DEFAULT_ANGULAR_SPEED,
)
from .obstacles import MotionType, Obstacle
from .types import Point, Vector2D

logger = logging.getLogger(__name__)

# Error types that mean "invalid value", never "malformed field"
FATAL_ERROR_TYPES = frozenset({
    "finite_number",
    "greater_than",
    "greater_than_equal",
    "int_from_float",
})

Pair = Tuple[float, float]


def is_fatal(error: ValidationError) -> bool:
    return any(err["type"] in FATAL_ERROR_TYPES for err in error.errors())


class LenientModel(BaseModel):
    """Base model: optional fields fall back to their default when malformed."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    @field_validator("*", mode="wrap")
    @classmethod
    def fall_back_when_malformed(cls, value: Any,
                                 handler: ValidatorFunctionWrapHandler,
                                 info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError as e:
            field = cls.model_fields[info.field_name]
            if is_fatal(e) or field.is_required():
                raise
            logger.warning("Field %r: could not use %r (%s); using default %r",
                           info.field_name, value, e.errors()[0]["msg"], field.default)
            return field.default


class StaticObstacleConfig(LenientModel):
    x: float
    y: float
    radius: float = Field(DEFAULT_OBSTACLE_RADIUS, ge=0)

    def to_obstacle(self) -> Obstacle:
        return Obstacle.static(Point(self.x, self.y), self.radius)


class DynamicObstacleConfig(LenientModel):
    x: float
    y: float
    movement_type: Literal["linear", "circular"] = "linear"
    collision_radius: float = Field(DEFAULT_OBSTACLE_RADIUS, ge=0)

    # Linear motion
    speed: float = Field(DEFAULT_LINEAR_SPEED, ge=0)
    direction: Pair = DEFAULT_LINEAR_DIRECTION

    # Circular motion; the centre defaults to the obstacle position
    center: Optional[Pair] = None
    radius: float = Field(DEFAULT_ORBIT_RADIUS, ge=0)
    angular_speed: float = DEFAULT_ANGULAR_SPEED

    @field_validator("movement_type", mode="before")
    @classmethod
    def normalize_movement_type(cls, value: Any) -> str:
        name = str(value).lower()
        if name not in (MotionType.LINEAR.value, MotionType.CIRCULAR.value):
            logger.warning("Unknown movement_type %r; using linear", value)
            return MotionType.LINEAR.value
        return name

    def to_obstacle(self) -> Obstacle:
        position = Point(self.x, self.y)
        if self.movement_type == MotionType.CIRCULAR.value:
            cx, cy = self.center if self.center is not None else (self.x, self.y)
            return Obstacle.circular(position, Point(cx, cy), self.radius,
                                     self.angular_speed, self.collision_radius)
        return Obstacle.linear(position, self.speed, Vector2D(*self.direction),
                               self.collision_radius)


class WorldConfig(LenientModel):
    """
    Top-level environment description.

    Obstacle lists are kept as raw entries: each one is validated on its
    own so a malformed entry is skipped without dropping its neighbours.
    """

    width: int = Field(DEFAULT_GRID_WIDTH, gt=0)
    height: int = Field(DEFAULT_GRID_HEIGHT, gt=0)
    start: Optional[Pair] = None
    goal: Optional[Pair] = None
    static_obstacles: List[Any] = []
    dynamic_obstacles: List[Any] = []
