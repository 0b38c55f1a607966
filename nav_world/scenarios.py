# =============================================================================
# World Model - Scenario Presets
# =============================================================================

from typing import Optional

import numpy as np

from .config import SCENARIO_RANDOM_NUM_STATIC_OBSTACLES
from .environment import Environment
from .obstacles import Obstacle, ObstacleGenerator
from .types import Point, Vector2D


class ScenarioPresets:
    """Presets for common test scenarios."""

    @staticmethod
    def scenario_empty(env: Environment) -> dict:
        """Empty scenario with no obstacles - for testing goal reaching."""
        env.clear_obstacles()
        env.reset()
        return {'type': 'empty', 'num_obstacles': 0}

    @staticmethod
    def scenario_random_static(env: Environment,
                               num_obstacles: int = SCENARIO_RANDOM_NUM_STATIC_OBSTACLES,
                               rng: Optional[np.random.Generator] = None) -> dict:
        env.clear_obstacles()
        static_obs = ObstacleGenerator.generate_random_static_obstacles(
            num_obstacles=num_obstacles,
            grid=env.grid,
            rng=rng,
            exclude=(env.start, env.goal)
        )
        placed = sum(1 for obs in static_obs if env.add_obstacle(obs) is not None)
        env.reset()
        return {'type': 'random_static', 'num_obstacles': placed}

    @staticmethod
    def scenario_wall(env: Environment, x: Optional[int] = None, gap_y: Optional[int] = None) -> dict:
        """Vertical wall of static obstacles at column `x` with a single-cell gap at `gap_y`."""
        env.clear_obstacles()
        x = env.width // 2 if x is None else x
        gap_y = env.height - 1 if gap_y is None else gap_y
        placed = 0
        for y in range(env.height):
            if y == gap_y:
                continue
            if env.add_static_obstacle(Point(float(x), float(y))) is not None:
                placed += 1
        env.reset()
        return {'type': 'wall', 'num_obstacles': placed, 'gap': (x, gap_y)}

    @staticmethod
    def scenario_mixed(env: Environment,
                       num_static: int = SCENARIO_RANDOM_NUM_STATIC_OBSTACLES // 2,
                       rng: Optional[np.random.Generator] = None) -> dict:
        """Random static obstacles plus one linear and one circular mover."""
        rng = rng if rng is not None else np.random.default_rng()
        info = ScenarioPresets.scenario_random_static(env, num_static, rng)

        mid_x, mid_y = env.width / 2.0, env.height / 2.0
        num_dynamic = 0
        linear = Obstacle.linear(
            Point(float(round(mid_x)), float(round(mid_y * 0.5))),
            speed=float(rng.uniform(0.5, 1.5)),
            direction=Vector2D(float(rng.uniform(-1, 1)), float(rng.uniform(-1, 1)))
        )
        if env.add_obstacle(linear) is not None:
            num_dynamic += 1

        orbit = max(1.0, min(env.width, env.height) / 4.0)
        circular = Obstacle.circular(
            Point(mid_x + orbit, mid_y), Point(mid_x, mid_y), orbit,
            angular_speed=float(rng.uniform(0.3, 1.0))
        )
        if env.add_obstacle(circular) is not None:
            num_dynamic += 1

        env.reset()
        return {'type': 'mixed', 'num_static': info['num_obstacles'], 'num_dynamic': num_dynamic}
