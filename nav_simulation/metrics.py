# =============================================================================
# Simulation - Run Metrics
# =============================================================================
# Per-tick log of a navigation run and its summary statistics, exported to
# CSV / JSON for offline evaluation.
# =============================================================================

import json
import os
from datetime import datetime
from typing import List, Optional

import numpy as np
import pandas as pd

from .config import LOG_DIR, METRICS_FLOAT_PRECISION
from .types import SimulationSnapshot, SimulationState

COLUMNS = ['time', 'x', 'y', 'speed', 'state', 'path_length', 'replanned', 'path_available']


class RunMetrics:
    """Metrics recorder for one simulation run."""

    def __init__(self):
        self.records: List[dict] = []

    def clear(self):
        self.records = []

    def record(self, snapshot: SimulationSnapshot):
        agent = snapshot.agent
        self.records.append({
            'time': snapshot.time,
            'x': agent.position.x,
            'y': agent.position.y,
            'speed': agent.speed,
            'state': snapshot.state.value,
            'path_length': len(snapshot.path),
            'replanned': snapshot.replanned,
            'path_available': agent.path_available,
        })

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.records, columns=COLUMNS)

    def summary(self) -> dict:
        """
        Aggregate the recorded ticks.

        Returns:
            Dict with ticks, simulation_time, distance_travelled, mean_speed,
            max_speed, replan_count, blocked_ticks and finished
        """
        df = self.to_dataframe()
        if df.empty:
            return {
                'ticks': 0,
                'simulation_time': 0.0,
                'distance_travelled': 0.0,
                'mean_speed': 0.0,
                'max_speed': 0.0,
                'replan_count': 0,
                'blocked_ticks': 0,
                'finished': False,
            }

        steps = np.hypot(df['x'].diff().fillna(0.0), df['y'].diff().fillna(0.0))
        return {
            'ticks': len(df),
            'simulation_time': round(float(df['time'].iloc[-1]), METRICS_FLOAT_PRECISION),
            'distance_travelled': round(float(steps.sum()), METRICS_FLOAT_PRECISION),
            'mean_speed': round(float(df['speed'].mean()), METRICS_FLOAT_PRECISION),
            'max_speed': round(float(df['speed'].max()), METRICS_FLOAT_PRECISION),
            'replan_count': int(df['replanned'].sum()),
            'blocked_ticks': int((~df['path_available'].astype(bool)).sum()),
            'finished': bool(df['state'].iloc[-1] == SimulationState.FINISHED.value),
        }

    def export_csv(self, filename: Optional[str] = None) -> str:
        """Write the per-tick log; defaults to a timestamped file under LOG_DIR."""
        filename = filename or self._default_name('run_log', 'csv')
        self.to_dataframe().to_csv(filename, index=False, encoding='utf-8')
        return filename

    def export_json(self, filename: Optional[str] = None) -> dict:
        summary = self.summary()
        output = {
            'timestamp': datetime.now().isoformat(),
            'metrics': summary
        }
        filename = filename or self._default_name('run_metrics', 'json')
        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=2, ensure_ascii=False, default=str)
        return summary

    @staticmethod
    def _default_name(prefix: str, ext: str) -> str:
        os.makedirs(LOG_DIR, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return os.path.join(LOG_DIR, f"{prefix}_{timestamp}.{ext}")
