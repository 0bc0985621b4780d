# export.py

from __future__ import annotations

from pathlib import Path
import logging

import pandas as pd

from .simulation import Trajectory

logger = logging.getLogger(__name__)


def write_trajectory_csv(trajectory: Trajectory, path: str | Path) -> Path:
    """
    Write the trajectory as a comma-delimited table with a header row
    (time,N,C,H,A) and one row per output time.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not trajectory.complete:
        logger.warning("writing incomplete trajectory (%d rows) to %s", len(trajectory), path)
    trajectory.to_frame().to_csv(path, index=False)
    logger.info("wrote %d rows to %s", len(trajectory), path)
    return path


def read_trajectory_csv(path: str | Path) -> pd.DataFrame:
    return pd.read_csv(path)
